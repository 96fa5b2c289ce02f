# orderdesk/routes/drivers.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from ..directory import DriverService
from ..ordering.errors import OrderError
from ..schemas import DriverIn, DriverOut, Envelope
from .common import WRITE_STATUS, driver_service, error_response

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=Envelope[List[DriverOut]])
def list_drivers(request: Request, service: DriverService = Depends(driver_service)):
    try:
        data = service.list_drivers(dict(request.query_params))
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data)


@router.post("/create", response_model=Envelope[DriverOut])
def create_driver(payload: DriverIn, service: DriverService = Depends(driver_service)):
    try:
        data = service.create_driver(payload)
    except OrderError as e:
        return error_response(e, WRITE_STATUS)
    return Envelope(data=data)
