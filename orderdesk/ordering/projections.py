# orderdesk/ordering/projections.py
from __future__ import annotations

from typing import List, Optional

from ..models import Order, Product
from ..schemas import (
    CreatedLine,
    CreatedOrder,
    OrderDetail,
    OrderLineOut,
    OrderListItem,
    OrderRecord,
    ProductOut,
)
from .dates import en_gb_date, shifted_date


def _driver_name(order: Order) -> Optional[str]:
    return order.driver.full_name if order.driver is not None else None


def split_sizes(raw: Optional[str]) -> List[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def project_product(product: Product, images: Optional[List[str]] = None) -> ProductOut:
    return ProductOut(
        id=product.id,
        name=product.name,
        description=product.description or "",
        category=product.category,
        price=product.price or 0.0,
        sizes=split_sizes(product.sizes),
        created_at=product.created_at,
        images=images or [],
    )


def project_record(order: Order) -> OrderRecord:
    return OrderRecord(
        id=order.id,
        full_name=order.full_name,
        phone=order.phone,
        address=order.address,
        driver=_driver_name(order),
        status=order.status,
        created_at=order.created_at,
        delivery_date=order.delivery_date,
    )


def project_list_item(order: Order) -> OrderListItem:
    return OrderListItem(
        id=order.id,
        full_name=order.full_name,
        phone=order.phone,
        address=order.address,
        driver=_driver_name(order),
        status=order.status,
        created_at=shifted_date(order.created_at),
        delivery_date=shifted_date(order.delivery_date),
    )


def project_created(order: Order) -> CreatedOrder:
    record = project_record(order)
    return CreatedOrder(
        **record.model_dump(),
        formatted_date=shifted_date(order.created_at),
        order_products=[
            CreatedLine(product_id=op.product_id, quantity=op.quantity, size=op.size)
            for op in order.order_products
        ],
    )


def project_detail(order: Order, lines: List[OrderLineOut]) -> OrderDetail:
    return OrderDetail(
        id=order.id,
        full_name=order.full_name,
        phone=order.phone,
        address=order.address,
        driver=_driver_name(order),
        status=order.status,
        created_at=order.created_at,
        formatted_date=en_gb_date(order.created_at),
        delivery_date=en_gb_date(order.delivery_date),
        order_products=lines,
    )
