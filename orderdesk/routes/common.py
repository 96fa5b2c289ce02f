# orderdesk/routes/common.py
from __future__ import annotations

from typing import Mapping

from fastapi import Request
from fastapi.responses import JSONResponse

from ..catalogue import ProductService
from ..directory import DriverService, UserService
from ..ordering.customers import CustomerService
from ..ordering.errors import ErrorKind, OrderError
from ..ordering.service import OrderService
from ..schemas import ErrorResponse

# Status codes per error kind. Anything not listed uses the route's fallback.
READ_STATUS: Mapping[ErrorKind, int] = {ErrorKind.NOT_FOUND: 400}
WRITE_STATUS: Mapping[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DRIVER_NOT_FOUND: 400,
    ErrorKind.DRIVER_BUSY: 400,
}


def error_response(
    err: OrderError,
    status_for: Mapping[ErrorKind, int] | None = None,
    fallback: int = 200,
) -> JSONResponse:
    status = (status_for or {}).get(err.kind, fallback)
    return JSONResponse(ErrorResponse(message=err.message).model_dump(), status_code=status)


# -------------------
# Services (built once in create_app, kept on app.state)
# -------------------
def order_service(request: Request) -> OrderService:
    return request.app.state.services.orders


def customer_service(request: Request) -> CustomerService:
    return request.app.state.services.customers


def product_service(request: Request) -> ProductService:
    return request.app.state.services.products


def driver_service(request: Request) -> DriverService:
    return request.app.state.services.drivers


def user_service(request: Request) -> UserService:
    return request.app.state.services.users
