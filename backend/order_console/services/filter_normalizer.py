"""Order Console: search criteria validation."""
from pydantic import BaseModel, ConfigDict

from order_console.config import Settings
from order_console.core.errors import ValidationError
from order_console.schemas.order import FilterCriteria, ValidatedQuery

MSG_MATERIAL_MANDATORY = "Material is mandatory."
MSG_DATE_PAIR = "Please provide both 'Date From' and 'Date To' to search by date range."
MSG_NO_DIMENSION = "Please provide at least one search parameter."
MSG_DATE_ORDER = "Date From cannot be later than Date To."


class FilterPolicy(BaseModel):
    """Which validation rules are switched on."""

    model_config = ConfigDict(frozen=True)

    material_mandatory: bool = False
    require_search_dimension: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilterPolicy":
        return cls(
            material_mandatory=settings.MATERIAL_MANDATORY,
            require_search_dimension=settings.REQUIRE_SEARCH_DIMENSION,
        )


def normalize(criteria: FilterCriteria, policy: FilterPolicy | None = None) -> ValidatedQuery | ValidationError:
    """
    Validate raw criteria and build the canonical query.
    Returns (never raises) a ValidationError carrying the message for the operator.
    """
    policy = policy or FilterPolicy()

    has_material = bool(criteria.material)
    has_status = bool(criteria.execution_status)
    has_order = bool(criteria.order_number)
    has_from = criteria.date_from is not None
    has_to = criteria.date_to is not None

    if policy.material_mandatory and not has_material:
        return ValidationError(MSG_MATERIAL_MANDATORY)
    if has_from != has_to:
        return ValidationError(MSG_DATE_PAIR)
    if policy.require_search_dimension and not (has_material or has_status or has_order or (has_from and has_to)):
        return ValidationError(MSG_NO_DIMENSION)
    if has_from and has_to and criteria.date_from > criteria.date_to:
        return ValidationError(MSG_DATE_ORDER)

    return ValidatedQuery(
        material=criteria.material,
        execution_status=criteria.execution_status,
        order_number=criteria.order_number,
        date_from=criteria.date_from,
        date_to=criteria.date_to,
    )
