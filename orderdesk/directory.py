# orderdesk/directory.py
"""Drivers and staff users. Plain records; driver status is owned by the order lifecycle."""
from __future__ import annotations

from typing import Any, List, Mapping

import structlog
from sqlalchemy.orm import sessionmaker

from .db import unit_of_work
from .models import Driver, DriverStatus, User
from .ordering.errors import Conflict, NotFound, ValidationFailed, guard_upstream
from .ordering.filters import page_params
from .schemas import DriverIn, DriverOut, UserIn, UserOut

logger = structlog.get_logger(__name__)


class DriverService:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @guard_upstream
    def list_drivers(self, params: Mapping[str, Any] | None = None) -> List[DriverOut]:
        status = str((params or {}).get("status") or "").strip().upper()

        with unit_of_work(self.session_factory) as db:
            q = db.query(Driver)
            if status in DriverStatus.__members__:
                q = q.filter(Driver.status == DriverStatus[status])
            return [DriverOut.model_validate(d) for d in q.order_by(Driver.full_name).all()]

    @guard_upstream
    def create_driver(self, payload: DriverIn) -> DriverOut:
        full_name = (payload.full_name or "").strip()
        if not full_name:
            raise ValidationFailed()

        with unit_of_work(self.session_factory) as db:
            if db.query(Driver).filter(Driver.full_name == full_name).first():
                raise Conflict("Driver already exists")

            driver = Driver(
                full_name=full_name,
                phone=(payload.phone or "").strip() or None,
                status=DriverStatus.FREE,
            )
            db.add(driver)
            db.flush()
            result = DriverOut.model_validate(driver)

        logger.info("Driver created", driver_id=result.id)
        return result


class UserService:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @guard_upstream
    def list_users(self, params: Mapping[str, Any] | None = None) -> List[UserOut]:
        take, skip = page_params(params or {})
        with unit_of_work(self.session_factory) as db:
            users = db.query(User).order_by(User.id).offset(skip).limit(take).all()
            return [UserOut.model_validate(u) for u in users]

    @guard_upstream
    def get_user(self, user_id: int) -> UserOut:
        with unit_of_work(self.session_factory) as db:
            u = db.query(User).filter(User.id == user_id).first()
            if not u:
                raise NotFound("User wasn't found")
            return UserOut.model_validate(u)

    @guard_upstream
    def create_user(self, payload: UserIn) -> UserOut:
        first_name = (payload.first_name or "").strip()
        last_name = (payload.last_name or "").strip()
        if not (first_name and last_name):
            raise ValidationFailed()

        with unit_of_work(self.session_factory) as db:
            u = User(first_name=first_name, last_name=last_name, status=payload.status)
            db.add(u)
            db.flush()
            result = UserOut.model_validate(u)

        logger.info("User created", user_id=result.id)
        return result
