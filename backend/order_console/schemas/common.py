"""Order Console: common response envelope."""
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope: {data, error, meta}.

    `error` holds the error code of a refused or failed action, `meta.message`
    the text to show the operator.
    """

    data: T | None = None
    error: str | None = None
    meta: dict[str, Any] | None = None
