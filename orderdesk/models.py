# orderdesk/models.py
from __future__ import annotations

import enum

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db import Base
from .ordering.dates import utcnow


class OrderStatus(str, enum.Enum):
    RECEIVED = "RECEIVED"
    PROCESSING = "PROCESSING"
    IN_TRANSIT = "IN_TRANSIT"
    COMPLETED = "COMPLETED"


class DriverStatus(str, enum.Enum):
    FREE = "FREE"
    DELIVERY = "DELIVERY"


class UserStatus(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


def _status_column(enum_cls, default):
    return Column(Enum(enum_cls, native_enum=False, length=32), nullable=False, default=default)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    status = _status_column(UserStatus, UserStatus.USER)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Driver(Base):
    __tablename__ = "drivers"
    id = Column(Integer, primary_key=True)
    full_name = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(64), nullable=True)
    status = _status_column(DriverStatus, DriverStatus.FREE)


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    category = Column(String(255), nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    sizes = Column(String(255), default="")  # comma separated, e.g. "S,M,L"
    created_at = Column(DateTime, default=utcnow)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False, index=True)
    address = Column(String(512), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True)
    status = _status_column(OrderStatus, OrderStatus.RECEIVED)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    delivery_date = Column(DateTime, nullable=True)

    driver = relationship("Driver", lazy="joined")
    order_products = relationship(
        "OrderProduct",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderProduct.position",
    )


class OrderProduct(Base):
    __tablename__ = "order_products"
    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String(64), nullable=True)

    order = relationship("Order", back_populates="order_products")
    product = relationship("Product")
