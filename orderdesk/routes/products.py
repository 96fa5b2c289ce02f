# orderdesk/routes/products.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from ..catalogue import ProductService
from ..ordering.errors import ErrorKind, OrderError
from ..schemas import Envelope, ProductIn, ProductOut
from .common import WRITE_STATUS, error_response, product_service

router = APIRouter(prefix="/products", tags=["products"])

PRODUCT_READ_STATUS = {ErrorKind.PRODUCT_NOT_FOUND: 400}


@router.get("", response_model=Envelope[List[ProductOut]])
def list_products(request: Request, service: ProductService = Depends(product_service)):
    try:
        data = service.list_products(dict(request.query_params))
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data)


@router.post("/create", response_model=Envelope[ProductOut])
def create_product(payload: ProductIn, service: ProductService = Depends(product_service)):
    try:
        data = service.create_product(payload)
    except OrderError as e:
        return error_response(e, WRITE_STATUS)
    return Envelope(data=data)


@router.get("/{product_id}", response_model=Envelope[ProductOut])
def get_product(product_id: int, service: ProductService = Depends(product_service)):
    try:
        data = service.get_product(product_id)
    except OrderError as e:
        return error_response(e, PRODUCT_READ_STATUS, fallback=500)
    return Envelope(data=data)


@router.put("/{product_id}", response_model=Envelope[ProductOut])
def update_product(
    product_id: int,
    payload: ProductIn,
    service: ProductService = Depends(product_service),
):
    try:
        data = service.update_product(product_id, payload)
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data, message="Product updated successfully")
