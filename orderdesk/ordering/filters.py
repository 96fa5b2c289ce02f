# orderdesk/ordering/filters.py
from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any, List, Mapping, Tuple

from ..models import Driver, Order, OrderStatus
from .dates import parse_calendar_date

DEFAULT_TAKE = 10
MAX_TAKE = 100


def _clean(params: Mapping[str, Any], key: str) -> str:
    return str(params.get(key) or "").strip()


def _int_or(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def page_params(params: Mapping[str, Any], default_take: int = DEFAULT_TAKE) -> Tuple[int, int]:
    """`take`/`skip` from the query string; junk falls back to the defaults."""
    take = _int_or(params.get("take"), default_take)
    skip = _int_or(params.get("skip"), 0)
    if take <= 0:
        take = default_take
    return min(take, MAX_TAKE), max(skip, 0)


def build_order_filters(params: Mapping[str, Any]) -> List[Any]:
    """
    Query parameters -> SQLAlchemy predicates over Order.

    Supported keys: status, driver, phone, fullName, address, from, to.
    Unknown keys and unparsable values are ignored.
    """
    clauses: List[Any] = []

    status = _clean(params, "status").upper()
    if status in OrderStatus.__members__:
        clauses.append(Order.status == OrderStatus[status])

    driver = _clean(params, "driver")
    if driver:
        clauses.append(Order.driver.has(Driver.full_name == driver))

    phone = _clean(params, "phone")
    if phone:
        clauses.append(Order.phone == phone)

    full_name = _clean(params, "fullName")
    if full_name:
        clauses.append(Order.full_name.ilike(f"%{full_name}%"))

    address = _clean(params, "address")
    if address:
        clauses.append(Order.address.ilike(f"%{address}%"))

    start = parse_calendar_date(_clean(params, "from"))
    if start:
        clauses.append(Order.created_at >= datetime.combine(start, time.min))

    end = parse_calendar_date(_clean(params, "to"))
    if end:
        # inclusive of the whole end day
        clauses.append(Order.created_at < datetime.combine(end + timedelta(days=1), time.min))

    return clauses
