"""Tests for the seed tool."""

import json
from pathlib import Path

from orderdesk.db import unit_of_work
from orderdesk.models import Driver, DriverStatus, Product, User, UserStatus
from tools.seed_db import DEFAULT_SEED, load_seed


def test_bundled_seed_file_loads(session_factory):
    data = json.loads(Path(DEFAULT_SEED).read_text(encoding="utf-8"))

    with unit_of_work(session_factory) as db:
        made = load_seed(db, data)

    assert made == {"drivers": 2, "products": 2, "users": 1}
    with unit_of_work(session_factory) as db:
        assert {d.status for d in db.query(Driver).all()} == {DriverStatus.FREE}
        assert db.query(Product).filter(Product.name == "Linen shirt").one().sizes == "S,M,L"
        assert db.query(User).one().status == UserStatus.ADMIN


def test_existing_drivers_are_skipped(session_factory):
    data = {"drivers": [{"fullName": "Aram Petrosyan"}, {"fullName": ""}]}

    with unit_of_work(session_factory) as db:
        first = load_seed(db, data)
    with unit_of_work(session_factory) as db:
        second = load_seed(db, data)

    assert first["drivers"] == 1
    assert second["drivers"] == 0
