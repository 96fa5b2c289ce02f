# orderdesk/main.py
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from sqlalchemy.orm import sessionmaker

from .catalogue import ProductService
from .db import Base, make_engine, make_session_factory
from .directory import DriverService, UserService
from .images import ImageStore, LocalImageStore
from .ordering.customers import CustomerService
from .ordering.dates import utcnow
from .ordering.service import OrderService
from .routes import customers, drivers, orders, products, users
from .schemas import ErrorResponse
from .utils.logging import configure_logging

# Load .env locally (safe in prod too)
load_dotenv()


# -------------------
# Config (env-driven)
# -------------------
def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./orderdesk.db").strip()

    images_dir: str = os.getenv("IMAGES_DIR", "./public").strip()
    images_base_url: str = os.getenv("IMAGES_BASE_URL", "/public").strip()

    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip()
    page_size: int = _int_env("PAGE_SIZE", 10)

    def origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


@dataclass
class Services:
    orders: OrderService
    customers: CustomerService
    products: ProductService
    drivers: DriverService
    users: UserService


def build_services(
    session_factory: sessionmaker,
    image_store: ImageStore,
    clock: Callable[[], datetime] = utcnow,
    page_size: int = 10,
) -> Services:
    return Services(
        orders=OrderService(session_factory, image_store, clock=clock, default_take=page_size),
        customers=CustomerService(session_factory),
        products=ProductService(session_factory, image_store),
        drivers=DriverService(session_factory),
        users=UserService(session_factory),
    )


# -------------------
# Errors
# -------------------
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    body = ErrorResponse(message="; ".join(parts) or "Invalid request")
    return JSONResponse(body.model_dump(), status_code=400)


# -------------------
# App factory
# -------------------
def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker] = None,
    image_store: Optional[ImageStore] = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """
    Build the API. Run with:
        uvicorn --factory orderdesk.main:create_app
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    if session_factory is None:
        engine = make_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        session_factory = make_session_factory(engine)

    images_dir = Path(settings.images_dir)
    if image_store is None:
        image_store = LocalImageStore(images_dir, settings.images_base_url)

    app = FastAPI(title="Orderdesk API")
    app.state.settings = settings
    app.state.services = build_services(session_factory, image_store, clock, settings.page_size)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error)

    for module in (users, products, orders, customers, drivers):
        app.include_router(module.router)

    if images_dir.is_dir():
        app.mount(settings.images_base_url, StaticFiles(directory=images_dir), name="images")

    @app.get("/")
    def root():
        return {"success": True, "service": "orderdesk"}

    return app
