# orderdesk/ordering/service.py
"""
Order lifecycle.

Orders are created RECEIVED, move through caller-set intermediate states and
end at COMPLETED. A driver named on creation is claimed (FREE -> DELIVERY)
and is released again when the order completes or is deleted. Nothing else
touches driver status.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog
from sqlalchemy.orm import Session, joinedload, selectinload, sessionmaker

from ..db import unit_of_work
from ..images import ImageStore, product_key
from ..models import Driver, DriverStatus, Order, OrderProduct, OrderStatus, Product
from ..schemas import (
    CreateOrderRequest,
    CreatedOrder,
    OrderDetail,
    OrderLineOut,
    OrderListItem,
    OrderRecord,
    UpdateOrderRequest,
)
from .dates import parse_timestamp, utcnow
from .errors import (
    Conflict,
    DriverBusy,
    DriverNotFound,
    NotFound,
    ProductNotFound,
    ValidationFailed,
    guard_upstream,
)
from .filters import DEFAULT_TAKE, build_order_filters, page_params
from .projections import (
    project_created,
    project_detail,
    project_list_item,
    project_product,
    project_record,
)

logger = structlog.get_logger(__name__)


def _text(value: Optional[str]) -> str:
    return (value or "").strip()


class OrderService:
    def __init__(
        self,
        session_factory: sessionmaker,
        image_store: ImageStore,
        clock: Callable[[], datetime] = utcnow,
        default_take: int = DEFAULT_TAKE,
    ):
        self.session_factory = session_factory
        self.image_store = image_store
        self.clock = clock
        self.default_take = default_take

    # -------------------
    # Queries
    # -------------------
    @guard_upstream
    def list_orders(self, params: Mapping[str, Any] | None = None) -> List[OrderListItem]:
        params = params or {}
        take, skip = page_params(params, self.default_take)

        with unit_of_work(self.session_factory) as db:
            orders = (
                db.query(Order)
                .filter(*build_order_filters(params))
                .order_by(Order.created_at.desc(), Order.id.desc())
                .offset(skip)
                .limit(take)
                .all()
            )
            return [project_list_item(o) for o in orders]

    @guard_upstream
    def get_order(self, order_id: int) -> OrderDetail:
        with unit_of_work(self.session_factory) as db:
            order = (
                db.query(Order)
                .options(selectinload(Order.order_products).joinedload(OrderProduct.product))
                .filter(Order.id == order_id)
                .first()
            )
            if not order:
                raise NotFound()

        lines: List[OrderLineOut] = []
        for op in order.order_products:
            images = self.image_store.get_image_urls(product_key(op.product.id))
            lines.append(
                OrderLineOut(
                    quantity=op.quantity,
                    size=op.size,
                    product=project_product(op.product, images),
                )
            )
        return project_detail(order, lines)

    # -------------------
    # Commands
    # -------------------
    @guard_upstream
    def create_order(self, payload: CreateOrderRequest) -> CreatedOrder:
        full_name, phone, address = _text(payload.full_name), _text(payload.phone), _text(payload.address)
        if not (full_name and phone and address and payload.product_ids):
            raise ValidationFailed()
        for line in payload.product_ids:
            if line.quantity is None or line.quantity <= 0:
                raise ValidationFailed("Quantity must be a positive number")
        delivery_date = parse_timestamp(payload.delivery_date)

        with unit_of_work(self.session_factory) as db:
            # Products first: a failed lookup must not leave a driver claimed.
            products = self._load_products(db, [line.id for line in payload.product_ids])

            driver = None
            driver_key = _text(payload.driver)
            if driver_key:
                driver = self._claim_driver(db, driver_key)

            created_at = self.clock()
            order = Order(
                full_name=full_name,
                phone=phone,
                address=address,
                driver=driver,
                status=OrderStatus.RECEIVED,
                created_at=created_at,
                delivery_date=delivery_date or created_at,
            )
            for position, line in enumerate(payload.product_ids):
                order.order_products.append(
                    OrderProduct(
                        product=products[line.id],
                        position=position,
                        quantity=line.quantity,
                        size=line.size,
                    )
                )

            db.add(order)
            db.flush()
            result = project_created(order)

        logger.info(
            "Order created",
            order_id=result.id,
            driver=result.driver,
            lines=len(result.order_products),
        )
        return result

    @guard_upstream
    def update_order(self, order_id: int, patch: UpdateOrderRequest) -> OrderRecord:
        created_at = parse_timestamp(patch.created_at)
        delivery_date = parse_timestamp(patch.delivery_date)

        with unit_of_work(self.session_factory) as db:
            order = db.query(Order).filter(Order.id == order_id).first()
            if not order:
                raise NotFound()

            if patch.status is not None:
                if order.status == OrderStatus.COMPLETED and patch.status != OrderStatus.COMPLETED:
                    raise Conflict("Completed orders can't change status")
                if patch.status == OrderStatus.COMPLETED and order.driver is not None:
                    self._release_driver(order)
                order.status = patch.status

            for field in ("full_name", "phone", "address"):
                value = getattr(patch, field)
                if value is None:
                    continue
                if not value.strip():
                    raise ValidationFailed()
                setattr(order, field, value.strip())

            if created_at is not None:
                order.created_at = created_at
            if delivery_date is not None:
                order.delivery_date = delivery_date

            db.flush()
            result = project_record(order)

        logger.info("Order updated", order_id=order_id, status=result.status.value)
        return result

    @guard_upstream
    def delete_order(self, order_id: int) -> None:
        with unit_of_work(self.session_factory) as db:
            order = db.query(Order).filter(Order.id == order_id).first()
            if not order:
                raise NotFound()
            if order.driver is not None:
                self._release_driver(order)
            db.delete(order)

        logger.info("Order deleted", order_id=order_id)

    # -------------------
    # Helpers
    # -------------------
    def _load_products(self, db: Session, ids: List[int]) -> Dict[int, Product]:
        wanted = set(ids)
        found = {p.id: p for p in db.query(Product).filter(Product.id.in_(wanted)).all()}
        for pid in ids:
            if pid not in found:
                raise ProductNotFound(f"Product {pid} wasn't found")
        return found

    def _claim_driver(self, db: Session, full_name: str) -> Driver:
        driver = db.query(Driver).filter(Driver.full_name == full_name).first()
        if not driver:
            raise DriverNotFound()
        if driver.status == DriverStatus.DELIVERY:
            raise DriverBusy()

        # Conditional update: of two concurrent claims only one matches a FREE row.
        claimed = (
            db.query(Driver)
            .filter(Driver.id == driver.id, Driver.status == DriverStatus.FREE)
            .update({Driver.status: DriverStatus.DELIVERY}, synchronize_session=False)
        )
        if claimed != 1:
            raise DriverBusy()

        db.expire(driver, ["status"])
        logger.info("Driver claimed", driver_id=driver.id, driver=driver.full_name)
        return driver

    def _release_driver(self, order: Order) -> None:
        driver = order.driver
        driver.status = DriverStatus.FREE
        order.driver = None
        logger.info("Driver released", driver_id=driver.id, order_id=order.id)
