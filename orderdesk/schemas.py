# orderdesk/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import DriverStatus, OrderStatus, UserStatus

T = TypeVar("T")

# Dates arrive either as ISO strings or epoch milliseconds
DateInput = Optional[Union[int, float, str]]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------
# Envelope
# -------------------
class Envelope(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(CamelModel):
    success: bool = False
    message: str


# -------------------
# Orders: requests
# -------------------
class LineItemIn(CamelModel):
    id: int
    quantity: Optional[int] = None
    size: Optional[str] = None


class CreateOrderRequest(CamelModel):
    # Required fields are checked by the service so a missing one is reported
    # in the envelope rather than as a schema error.
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    product_ids: List[LineItemIn] = Field(default_factory=list, alias="productIDs")
    driver: Optional[str] = None
    delivery_date: DateInput = None


class UpdateOrderRequest(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[OrderStatus] = None
    created_at: DateInput = None
    delivery_date: DateInput = None


# -------------------
# Orders: responses
# -------------------
class OrderRecord(CamelModel):
    id: int
    full_name: str
    phone: str
    address: str
    driver: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    delivery_date: Optional[datetime] = None


class OrderListItem(CamelModel):
    """List view: both dates already shifted and truncated to `YYYY-MM-DD`."""

    id: int
    full_name: str
    phone: str
    address: str
    driver: Optional[str] = None
    status: OrderStatus
    created_at: str
    delivery_date: Optional[str] = None


class ProductOut(CamelModel):
    id: int
    name: str
    description: str = ""
    category: Optional[str] = None
    price: float = 0.0
    sizes: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    images: List[str] = Field(default_factory=list)


class OrderLineOut(CamelModel):
    quantity: int
    size: Optional[str] = None
    product: ProductOut


class OrderDetail(CamelModel):
    id: int
    full_name: str
    phone: str
    address: str
    driver: Optional[str] = None
    status: OrderStatus
    created_at: datetime
    formatted_date: str
    delivery_date: Optional[str] = None
    order_products: List[OrderLineOut] = Field(default_factory=list)


class CreatedLine(CamelModel):
    product_id: int
    quantity: int
    size: Optional[str] = None


class CreatedOrder(OrderRecord):
    formatted_date: str
    order_products: List[CreatedLine] = Field(default_factory=list)


# -------------------
# Customers
# -------------------
class CustomerOut(CamelModel):
    full_name: str
    phone: str
    address: str
    orders_count: int
    last_order_at: Optional[str] = None


class CustomerDetail(CustomerOut):
    orders: List[OrderListItem] = Field(default_factory=list)


# -------------------
# Products
# -------------------
class ProductIn(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    sizes: Optional[List[str]] = None


# -------------------
# Drivers / users
# -------------------
class DriverIn(CamelModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None


class DriverOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    full_name: str
    phone: Optional[str] = None
    status: DriverStatus


class UserIn(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: UserStatus = UserStatus.USER


class UserOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    first_name: str
    last_name: str
    status: UserStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
