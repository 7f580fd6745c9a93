from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import ValidationError
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.filters import ProductFilters
from storefront.schemas.products import ProductCreate, ProductUpdate
from storefront.services.pagination import Include, OrderBy, Page, fetch_one, fetch_page
from storefront.services.predicates import build_product_predicates
from storefront.services.slugs import generate_slug, unique_slug

_LOG = logging.getLogger("storefront.products")

PRODUCT_INCLUDE = (Include("category"),)

# A concurrent write can take the slug between the lookup and the commit.
SLUG_COMMIT_ATTEMPTS = 3

SORT_COLUMNS = {
    "createdAt": "created_at",
    "price": "price",
    "name": "name",
    "stock": "stock",
}


def _ensure_category_or_400(db: Session, category_id: int) -> None:
    if db.scalar(select(Category.id).where(Category.id == category_id)) is None:
        raise ValidationError(f"Category {category_id} does not exist", field="categoryId")


def list_products(db: Session, filters: ProductFilters) -> Page[Product]:
    return fetch_page(
        db,
        Product,
        build_product_predicates(filters),
        page=filters.page,
        limit=filters.limit,
        order_by=OrderBy(SORT_COLUMNS[filters.sort_by], filters.sort_order),
        include=PRODUCT_INCLUDE,
    )


def get_product(db: Session, product_id: int) -> Product:
    # Direct lookups still resolve soft-deleted products.
    return fetch_one(db, Product, product_id, include=PRODUCT_INCLUDE, label="Product")


def _commit_with_free_slug(db: Session, build, base: str, *, exclude_id: int | None = None) -> Product:
    """Commit ``build()`` under the first free slug, retrying when another writer wins it."""
    for attempt in range(1, SLUG_COMMIT_ATTEMPTS + 1):
        product = build()
        slug = unique_slug(db, Product, base, exclude_id=exclude_id)
        product.slug = slug
        db.add(product)
        try:
            db.commit()
            return product
        except IntegrityError:
            db.rollback()
            if attempt == SLUG_COMMIT_ATTEMPTS:
                raise
            _LOG.warning("slug_taken_on_commit slug=%s attempt=%s", slug, attempt)


def create_product(db: Session, payload: ProductCreate) -> Product:
    _ensure_category_or_400(db, payload.category_id)
    data = payload.model_dump(exclude={"slug"})
    base = generate_slug(payload.slug or payload.name)
    product = _commit_with_free_slug(db, lambda: Product(**data), base)
    _LOG.info("product_created id=%s slug=%s category_id=%s", product.id, product.slug, product.category_id)
    return get_product(db, product.id)


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "category_id" in changes:
        _ensure_category_or_400(db, changes["category_id"])

    def apply_changes() -> Product:
        # A rollback expires the instance, so changes are re-applied on every attempt.
        for key, value in changes.items():
            setattr(product, key, value)
        return product

    if "name" in changes and changes["name"] != product.name:
        _commit_with_free_slug(db, apply_changes, generate_slug(changes["name"]), exclude_id=product.id)
        fields = sorted([*changes, "slug"])
    else:
        db.add(apply_changes())
        db.commit()
        fields = sorted(changes)
    _LOG.info("product_updated id=%s fields=%s", product.id, ",".join(fields) or "-")
    return get_product(db, product.id)


def soft_delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)
    product.active = False
    db.add(product)
    db.commit()
    _LOG.info("product_deactivated id=%s", product_id)
