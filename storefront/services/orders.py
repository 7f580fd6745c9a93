from __future__ import annotations

from sqlalchemy.orm import Session

from storefront.models.order import Order
from storefront.schemas.filters import OrderFilters
from storefront.services.pagination import Include, OrderBy, Page, fetch_one, fetch_page
from storefront.services.predicates import build_order_predicates

ORDER_INCLUDE = (
    Include("user"),
    Include("items", (Include("product", (Include("category"),)),)),
)


def list_orders(db: Session, filters: OrderFilters) -> Page[Order]:
    return fetch_page(
        db,
        Order,
        build_order_predicates(filters),
        page=filters.page,
        limit=filters.limit,
        order_by=OrderBy("created_at", "desc"),
        include=ORDER_INCLUDE,
    )


def get_order(db: Session, order_id: int) -> Order:
    return fetch_one(db, Order, order_id, include=ORDER_INCLUDE, label="Order")
