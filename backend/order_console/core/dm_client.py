"""Order Console: Digital Manufacturing public API client.

Every remote call made by the console goes through `DmApiClient`. Failures are
mapped onto the error taxonomy here so services never see raw httpx errors:

* network failure / non-2xx status -> TransportError
* undecodable body or unexpected shape -> ParseError
"""
import logging
from typing import Any

import httpx

from order_console.config import Settings
from order_console.core.errors import ParseError, TransportError

logger = logging.getLogger(__name__)

ORDER_LIST_PATH = "/order/v1/orders/list"
ORDER_DETAIL_PATH = "/order/v1/orders"
ORDER_DISCARD_PATH = "/order/v1/orders/discard"
SFC_DETAIL_PATH = "/sfc/v1/sfcdetail"
SFC_WORKLIST_PATH = "/sfc/v1/worklist/sfcs"
SFC_INVALIDATE_PATH = "/sfc/v1/sfcs/invalidate"
SFC_SET_QUANTITY_PATH = "/sfc/v1/sfcs/setQuantity"


def build_http_client(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Authenticated sender for the DM API. Session handling stays with the host token."""
    headers = {"Accept": "application/json"}
    if settings.DM_API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.DM_API_TOKEN}"
    return httpx.AsyncClient(
        base_url=settings.DM_API_BASE_URL,
        headers=headers,
        timeout=settings.DM_API_TIMEOUT_SECONDS,
        transport=transport,
    )


def upstream_error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response."""
    text = response.text.strip()
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    if text:
        return text[:500]
    return f"Server/API error (HTTP {response.status_code})"


class DmApiClient:
    """Thin async wrapper over the DM order and SFC endpoints."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("DM %s %s failed: %s", method, path, exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            message = upstream_error_message(response)
            logger.warning("DM %s %s returned %s: %s", method, path, response.status_code, message)
            raise TransportError(message, status_code=response.status_code, body=response.text[:2000])
        return response

    @staticmethod
    def _decode(response: httpx.Response, allow_empty: bool = False, error_message: str | None = None) -> Any:
        if allow_empty and not response.text.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(error_message or f"Invalid JSON from {response.request.url.path}") from exc

    # ── Queries ──────────────────────────────────────────────────────────────

    async def list_orders(self, plant: str, filters: dict[str, str], size: int, page: int = 0) -> list[dict]:
        """Single page of the order list. `filters` holds only non-empty query fields."""
        params: dict[str, Any] = {"plant": plant, "size": size, "page": page}
        params.update(filters)
        body = self._decode(await self._request("GET", ORDER_LIST_PATH, params=params))
        if not isinstance(body, dict):
            raise ParseError("Unexpected order list response.")
        content = body.get("content") or []
        if not isinstance(content, list):
            raise ParseError("Unexpected order list response.")
        return [item for item in content if isinstance(item, dict)]

    async def get_order_detail(self, plant: str, order: str) -> dict:
        body = self._decode(await self._request("GET", ORDER_DETAIL_PATH, params={"plant": plant, "order": order}))
        if not isinstance(body, dict):
            raise ParseError(f"Unexpected order detail response for {order}.")
        return body

    async def get_sfc_detail(self, plant: str, sfc: str) -> dict:
        body = self._decode(await self._request("GET", SFC_DETAIL_PATH, params={"plant": plant, "sfc": sfc}))
        if not isinstance(body, dict):
            raise ParseError(f"Unexpected SFC detail response for {sfc}.")
        return body

    async def get_sfc_worklist(self, plant: str, order: str) -> list[dict]:
        """SFCs of an order. An empty body means no SFCs, not an error."""
        response = await self._request("GET", SFC_WORKLIST_PATH, params={"plant": plant, "filter.order": order})
        body = self._decode(response, allow_empty=True, error_message="Invalid JSON in SFC List API response.")
        if body is None:
            return []
        if isinstance(body, dict):
            body = body.get("content") or []
        if not isinstance(body, list):
            raise ParseError("Invalid JSON in SFC List API response.")
        return [item for item in body if isinstance(item, dict)]

    # ── Mutations ────────────────────────────────────────────────────────────

    async def invalidate_sfc(self, plant: str, sfc: str) -> None:
        await self._request("PATCH", SFC_INVALIDATE_PATH, params={"plant": plant, "sfc": sfc})

    async def set_sfc_quantity(self, plant: str, sfc: str, quantity: float) -> None:
        """A 2xx means the quantity was applied; the body is not inspected."""
        payload = {
            "plant": plant,
            "sfcQuantityRequests": [{"sfc": sfc, "quantity": quantity}],
        }
        await self._request("POST", SFC_SET_QUANTITY_PATH, json=payload)

    async def discard_order(self, plant: str, order: str) -> None:
        await self._request("POST", ORDER_DISCARD_PATH, params={"plant": plant, "order": order}, json={})
