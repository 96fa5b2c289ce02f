from __future__ import annotations

import json
import sys
from pathlib import Path

from orderdesk.db import Base, make_engine, make_session_factory, unit_of_work
from orderdesk.main import Settings
from orderdesk.models import Driver, DriverStatus, Product, User, UserStatus

# Seed file lives here unless a path is passed on the command line
DEFAULT_SEED = Path(__file__).resolve().parents[1] / "data" / "seed.json"


def load_seed(db, data: dict) -> dict:
    made = {"drivers": 0, "products": 0, "users": 0}

    for d in data.get("drivers") or []:
        name = str(d.get("fullName") or "").strip()
        if not name or db.query(Driver).filter(Driver.full_name == name).first():
            continue
        db.add(Driver(full_name=name, phone=d.get("phone"), status=DriverStatus.FREE))
        made["drivers"] += 1

    for p in data.get("products") or []:
        name = str(p.get("name") or "").strip()
        if not name:
            continue
        db.add(
            Product(
                name=name,
                description=p.get("description") or "",
                category=p.get("category"),
                price=float(p.get("price") or 0.0),
                sizes=",".join(p.get("sizes") or []),
            )
        )
        made["products"] += 1

    for u in data.get("users") or []:
        first, last = str(u.get("firstName") or "").strip(), str(u.get("lastName") or "").strip()
        if not (first and last):
            continue
        status = UserStatus(str(u.get("status") or "USER").upper())
        db.add(User(first_name=first, last_name=last, status=status))
        made["users"] += 1

    return made


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    seed_path = Path(argv[0]) if argv else DEFAULT_SEED
    if not seed_path.exists():
        raise SystemExit(f"No seed file at {seed_path}")

    settings = Settings()
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    data = json.loads(seed_path.read_text(encoding="utf-8"))
    with unit_of_work(make_session_factory(engine)) as db:
        made = load_seed(db, data)

    print(f"Seeded {settings.database_url}: {made}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
