# orderdesk/routes/customers.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from ..ordering.customers import CustomerService
from ..ordering.errors import OrderError
from ..schemas import CustomerDetail, CustomerOut, Envelope
from .common import READ_STATUS, customer_service, error_response

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=Envelope[List[CustomerOut]])
def list_customers(request: Request, service: CustomerService = Depends(customer_service)):
    try:
        data = service.list_customers(dict(request.query_params))
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data)


@router.get("/{phone}", response_model=Envelope[CustomerDetail])
def get_customer(phone: str, service: CustomerService = Depends(customer_service)):
    try:
        data = service.get_customer(phone)
    except OrderError as e:
        return error_response(e, READ_STATUS, fallback=500)
    return Envelope(data=data)
