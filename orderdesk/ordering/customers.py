# orderdesk/ordering/customers.py
from __future__ import annotations

from typing import Any, List, Mapping

from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from ..db import unit_of_work
from ..models import Order
from ..schemas import CustomerDetail, CustomerOut
from .dates import shifted_date
from .errors import NotFound, guard_upstream
from .filters import page_params
from .projections import project_list_item


class CustomerService:
    """Customers are not stored on their own; they are the orders grouped by phone."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @guard_upstream
    def list_customers(self, params: Mapping[str, Any] | None = None) -> List[CustomerOut]:
        take, skip = page_params(params or {})

        with unit_of_work(self.session_factory) as db:
            # One row per phone: its latest order plus the phone's order count.
            ranked = db.query(
                Order.phone,
                Order.full_name,
                Order.address,
                Order.created_at,
                func.count(Order.id).over(partition_by=Order.phone).label("orders_count"),
                func.row_number()
                .over(partition_by=Order.phone, order_by=(Order.created_at.desc(), Order.id.desc()))
                .label("recency"),
            ).subquery()
            rows = (
                db.query(
                    ranked.c.phone,
                    ranked.c.full_name,
                    ranked.c.address,
                    ranked.c.created_at,
                    ranked.c.orders_count,
                )
                .filter(ranked.c.recency == 1)
                .order_by(ranked.c.created_at.desc(), ranked.c.phone)
                .offset(skip)
                .limit(take)
                .all()
            )

        return [
            CustomerOut(
                full_name=full_name,
                phone=phone,
                address=address,
                orders_count=count,
                last_order_at=shifted_date(created_at),
            )
            for phone, full_name, address, created_at, count in rows
        ]

    @guard_upstream
    def get_customer(self, phone: str) -> CustomerDetail:
        phone = (phone or "").strip()
        with unit_of_work(self.session_factory) as db:
            orders = (
                db.query(Order)
                .filter(Order.phone == phone)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .all()
            )
            if not orders:
                raise NotFound("Customer wasn't found")

            latest = orders[0]
            return CustomerDetail(
                full_name=latest.full_name,
                phone=phone,
                address=latest.address,
                orders_count=len(orders),
                last_order_at=shifted_date(latest.created_at),
                orders=[project_list_item(o) for o in orders],
            )
