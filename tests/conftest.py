from dataclasses import dataclass
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from orderdesk.db import Base, make_engine, make_session_factory, unit_of_work
from orderdesk.images import MemoryImageStore
from orderdesk.main import Settings, build_services, create_app
from orderdesk.models import Driver, DriverStatus, Product

FIXED_NOW = datetime(2024, 1, 10, 0, 0, 0)


class Clock:
    """Settable clock so tests can space orders out in time."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@dataclass
class Catalog:
    shirt_id: int
    scarf_id: int
    free_driver: str = "Aram Petrosyan"
    busy_driver: str = "Lilit Hakobyan"


@pytest.fixture()
def engine(tmp_path):
    # file backed so concurrent sessions really use separate connections
    engine = make_engine(f"sqlite:///{tmp_path / 'orders.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def clock():
    return Clock()


@pytest.fixture()
def catalog(session_factory):
    with unit_of_work(session_factory) as db:
        shirt = Product(name="Linen shirt", category="shirts", price=14500, sizes="S,M,L")
        scarf = Product(name="Wool scarf", category="accessories", price=6000)
        db.add_all(
            [
                shirt,
                scarf,
                Driver(full_name="Aram Petrosyan", status=DriverStatus.FREE),
                Driver(full_name="Lilit Hakobyan", status=DriverStatus.DELIVERY),
            ]
        )
        db.flush()
        return Catalog(shirt_id=shirt.id, scarf_id=scarf.id)


@pytest.fixture()
def image_store(catalog):
    return MemoryImageStore(
        {
            f"products/{catalog.shirt_id}": [
                "/public/products/1/front.jpg",
                "/public/products/1/back.jpg",
            ]
        }
    )


@pytest.fixture()
def services(session_factory, image_store, clock):
    return build_services(session_factory, image_store, clock=clock)


@pytest.fixture()
def order_service(services):
    return services.orders


@pytest.fixture()
def client(tmp_path, session_factory, image_store, clock):
    settings = Settings(
        database_url="sqlite://",
        images_dir=str(tmp_path / "no-images"),
        log_level="WARNING",
    )
    app = create_app(settings, session_factory=session_factory, image_store=image_store, clock=clock)
    return TestClient(app)


@pytest.fixture()
def driver_status(session_factory):
    def _status(full_name: str) -> DriverStatus:
        with unit_of_work(session_factory) as db:
            return db.query(Driver).filter(Driver.full_name == full_name).one().status

    return _status
