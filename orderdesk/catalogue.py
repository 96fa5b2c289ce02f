# orderdesk/catalogue.py
from __future__ import annotations

from typing import Any, List, Mapping, Optional

import structlog
from sqlalchemy.orm import sessionmaker

from .db import unit_of_work
from .images import ImageStore, product_key
from .models import Product
from .ordering.errors import ProductNotFound, ValidationFailed, guard_upstream
from .ordering.filters import page_params
from .ordering.projections import project_product
from .schemas import ProductIn, ProductOut

logger = structlog.get_logger(__name__)


def _join_sizes(sizes: Optional[List[str]]) -> str:
    return ",".join(s.strip() for s in (sizes or []) if s and s.strip())


class ProductService:
    def __init__(self, session_factory: sessionmaker, image_store: ImageStore):
        self.session_factory = session_factory
        self.image_store = image_store

    @guard_upstream
    def list_products(self, params: Mapping[str, Any] | None = None) -> List[ProductOut]:
        params = params or {}
        take, skip = page_params(params)
        name = str(params.get("name") or "").strip()
        category = str(params.get("category") or "").strip()

        with unit_of_work(self.session_factory) as db:
            q = db.query(Product)
            if name:
                q = q.filter(Product.name.ilike(f"%{name}%"))
            if category:
                q = q.filter(Product.category == category)
            products = q.order_by(Product.created_at.desc(), Product.id.desc()).offset(skip).limit(take).all()

        # list view stays cheap: images only on the detail route
        return [project_product(p) for p in products]

    @guard_upstream
    def get_product(self, product_id: int) -> ProductOut:
        with unit_of_work(self.session_factory) as db:
            product = db.query(Product).filter(Product.id == product_id).first()
            if not product:
                raise ProductNotFound()

        return project_product(product, self.image_store.get_image_urls(product_key(product.id)))

    @guard_upstream
    def create_product(self, payload: ProductIn) -> ProductOut:
        name = (payload.name or "").strip()
        if not name or payload.price is None:
            raise ValidationFailed()
        if payload.price < 0:
            raise ValidationFailed("Price can't be negative")

        with unit_of_work(self.session_factory) as db:
            product = Product(
                name=name,
                description=(payload.description or "").strip(),
                category=(payload.category or "").strip() or None,
                price=payload.price,
                sizes=_join_sizes(payload.sizes),
            )
            db.add(product)
            db.flush()
            result = project_product(product)

        logger.info("Product created", product_id=result.id)
        return result

    @guard_upstream
    def update_product(self, product_id: int, payload: ProductIn) -> ProductOut:
        with unit_of_work(self.session_factory) as db:
            product = db.query(Product).filter(Product.id == product_id).first()
            if not product:
                raise ProductNotFound()

            if payload.name is not None:
                if not payload.name.strip():
                    raise ValidationFailed()
                product.name = payload.name.strip()
            if payload.description is not None:
                product.description = payload.description.strip()
            if payload.category is not None:
                product.category = payload.category.strip() or None
            if payload.price is not None:
                if payload.price < 0:
                    raise ValidationFailed("Price can't be negative")
                product.price = payload.price
            if payload.sizes is not None:
                product.sizes = _join_sizes(payload.sizes)

            db.flush()

        logger.info("Product updated", product_id=product_id)
        return project_product(product, self.image_store.get_image_urls(product_key(product.id)))
