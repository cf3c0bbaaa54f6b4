"""Order Console: pure mapping from raw DM order objects to display rows."""
from datetime import date, datetime
from typing import Any, Iterable

from order_console.schemas.order import PLACEHOLDER, OrderRow

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _nested(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value: int | float) -> str:
    """10.0 -> "10", 2.5 -> "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def with_uom(value: int | float, uom: str) -> str:
    text = format_number(value)
    return f"{text} {uom}" if uom else text


def resolve_uom(raw: dict) -> str:
    """Unit of measure by precedence: production, ERP, base. "" if none."""
    production = _nested(raw, "productionUnitOfMeasureObject", "uom")
    if production:
        return str(production)
    if raw.get("erpUnitOfMeasure"):
        return str(raw["erpUnitOfMeasure"])
    base = _nested(raw, "baseUnitOfMeasureObject", "uom")
    if base:
        return str(base)
    return ""


def resolve_detail_uom(detail: dict, fallback: str = "") -> str:
    """UOM on an order-detail payload, which also carries flat UOM fields."""
    for candidate in (
        detail.get("productionUnitOfMeasure"),
        detail.get("erpUnitOfMeasure"),
        _nested(detail, "productionUnitOfMeasureObject", "uom"),
        _nested(detail, "baseUnitOfMeasureObject", "uom"),
    ):
        if candidate:
            return str(candidate)
    return fallback


def parse_timestamp(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def timestamp_date(value: Any) -> date | None:
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def format_timestamp(value: Any) -> str:
    """ISO timestamp -> "Jul 31, 2025, 6:00:30 PM", or "-" when missing/invalid."""
    dt = parse_timestamp(value)
    if dt is None:
        return PLACEHOLDER
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}, {hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"


def find_parent_sfc(sfcs: Iterable[Any], order_no: str) -> str | None:
    """First SFC whose identifier contains the order number (case-sensitive)."""
    if not order_no:
        return None
    for sfc in sfcs:
        if isinstance(sfc, str) and order_no in sfc:
            return sfc
    return None


def map_order_to_row(raw: dict, enabled_statuses: Iterable[str] = ("ACTIVE", "NOT_IN_EXECUTION")) -> OrderRow:
    """Map one raw order. parent_sfc / dm_released_qty stay "-" until enrichment."""
    uom = resolve_uom(raw)
    material = raw.get("material") if isinstance(raw.get("material"), dict) else None
    build = raw.get("buildQuantity")
    done = raw.get("doneQuantity")
    status = raw.get("executionStatus")

    return OrderRow(
        order_no=str(raw.get("order") or PLACEHOLDER),
        material_line=f"{material.get('material') or ''} / {material.get('version') or ''}" if material else PLACEHOLDER,
        material_desc=str(material.get("description") or "") if material else "",
        execution_status=str(status or PLACEHOLDER),
        build_qty=with_uom(build, uom) if is_number(build) else PLACEHOLDER,
        done_qty=with_uom(done, uom) if is_number(done) else PLACEHOLDER,
        available_qty=with_uom(build - done, uom) if is_number(build) and is_number(done) else PLACEHOLDER,
        scheduled_start_end=f"{format_timestamp(raw.get('scheduledStartDate'))}\n"
        f"{format_timestamp(raw.get('scheduledCompletionDate'))}",
        scheduled_start_date=_optional_str(raw.get("scheduledStartDate")),
        scheduled_completion_date=_optional_str(raw.get("scheduledCompletionDate")),
        priority=str(raw.get("priority") or PLACEHOLDER),
        enabled=status in set(enabled_statuses),
    )
