# orderdesk/routes/users.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from ..directory import UserService
from ..ordering.errors import OrderError
from ..schemas import Envelope, UserIn, UserOut
from .common import READ_STATUS, WRITE_STATUS, error_response, user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=Envelope[List[UserOut]])
def list_users(request: Request, service: UserService = Depends(user_service)):
    try:
        data = service.list_users(dict(request.query_params))
    except OrderError as e:
        return error_response(e)
    return Envelope(data=data)


@router.post("/create", response_model=Envelope[UserOut])
def create_user(payload: UserIn, service: UserService = Depends(user_service)):
    try:
        data = service.create_user(payload)
    except OrderError as e:
        return error_response(e, WRITE_STATUS)
    return Envelope(data=data)


@router.get("/{user_id}", response_model=Envelope[UserOut])
def get_user(user_id: int, service: UserService = Depends(user_service)):
    try:
        data = service.get_user(user_id)
    except OrderError as e:
        return error_response(e, READ_STATUS, fallback=500)
    return Envelope(data=data)
