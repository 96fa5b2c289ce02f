# orderdesk/routes/orders.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from ..ordering.errors import OrderError
from ..ordering.service import OrderService
from ..schemas import (
    CreatedOrder,
    CreateOrderRequest,
    Envelope,
    OrderDetail,
    OrderListItem,
    OrderRecord,
    UpdateOrderRequest,
)
from .common import READ_STATUS, WRITE_STATUS, error_response, order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=Envelope[List[OrderListItem]])
def list_orders(request: Request, service: OrderService = Depends(order_service)):
    # query failures are reported in the body, never as a transport error
    try:
        data = service.list_orders(dict(request.query_params))
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data)


@router.post("/create", response_model=Envelope[CreatedOrder])
def create_order(payload: CreateOrderRequest, service: OrderService = Depends(order_service)):
    try:
        data = service.create_order(payload)
    except OrderError as e:
        return error_response(e, WRITE_STATUS)
    return Envelope(data=data)


@router.get("/{order_id}", response_model=Envelope[OrderDetail])
def get_order(order_id: int, service: OrderService = Depends(order_service)):
    try:
        data = service.get_order(order_id)
    except OrderError as e:
        return error_response(e, READ_STATUS, fallback=500)
    return Envelope(data=data)


@router.put("/{order_id}", response_model=Envelope[OrderRecord])
def update_order(
    order_id: int,
    patch: UpdateOrderRequest,
    service: OrderService = Depends(order_service),
):
    try:
        data = service.update_order(order_id, patch)
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data, message="Order updated successfully")


@router.delete("/{order_id}", response_model=Envelope)
def delete_order(order_id: int, service: OrderService = Depends(order_service)):
    try:
        service.delete_order(order_id)
    except OrderError as e:
        return error_response(e, READ_STATUS, fallback=500)
    return Envelope(message="Order removed")
