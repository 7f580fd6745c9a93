from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from sqlalchemy import ColumnElement, false

from storefront.models.common import MAX_ROW_ID
from storefront.schemas.filters import OrderFilters, ProductFilters


class PredicateKind(str, Enum):
    EQUALITY = "equality"
    RANGE_LOWER = "range-lower"
    RANGE_UPPER = "range-upper"
    SUBSTRING = "substring"
    FOREIGN_KEY = "foreign-key-equality"


@dataclass(frozen=True)
class Predicate:
    kind: PredicateKind
    field: str
    value: Any


def build_order_predicates(filters: OrderFilters) -> list[Predicate]:
    predicates: list[Predicate] = []
    if filters.status is not None:
        predicates.append(Predicate(PredicateKind.EQUALITY, "status", filters.status))
    if filters.user_id is not None:
        predicates.append(Predicate(PredicateKind.FOREIGN_KEY, "user_id", filters.user_id))
    if filters.start_date is not None:
        predicates.append(Predicate(PredicateKind.RANGE_LOWER, "created_at", filters.start_date))
    if filters.end_date is not None:
        predicates.append(Predicate(PredicateKind.RANGE_UPPER, "created_at", filters.end_date))
    return predicates


def build_product_predicates(filters: ProductFilters) -> list[Predicate]:
    # Soft-deleted products never show up in listings.
    predicates = [Predicate(PredicateKind.EQUALITY, "active", True)]
    if filters.search is not None:
        predicates.append(Predicate(PredicateKind.SUBSTRING, "name", filters.search))
    if filters.category_id is not None:
        predicates.append(Predicate(PredicateKind.FOREIGN_KEY, "category_id", filters.category_id))
    # min > max is not rejected; the two bounds just select nothing.
    if filters.min_price is not None:
        predicates.append(Predicate(PredicateKind.RANGE_LOWER, "price", filters.min_price))
    if filters.max_price is not None:
        predicates.append(Predicate(PredicateKind.RANGE_UPPER, "price", filters.max_price))
    return predicates


def to_clause(model, predicate: Predicate) -> ColumnElement[bool]:
    col = getattr(model, predicate.field)
    if predicate.kind is PredicateKind.FOREIGN_KEY and predicate.value > MAX_ROW_ID:
        # No row can carry a key past the column range.
        return false()
    if predicate.kind in (PredicateKind.EQUALITY, PredicateKind.FOREIGN_KEY):
        return col == predicate.value
    if predicate.kind is PredicateKind.RANGE_LOWER:
        return col >= predicate.value
    if predicate.kind is PredicateKind.RANGE_UPPER:
        return col <= predicate.value
    if predicate.kind is PredicateKind.SUBSTRING:
        # Case folded explicitly so behaviour does not depend on collation.
        return col.icontains(predicate.value, autoescape=True)
    raise ValueError(f"Unsupported predicate kind: {predicate.kind!r}")


def where_clauses(model, predicates: Iterable[Predicate]) -> list[ColumnElement[bool]]:
    return [to_clause(model, p) for p in predicates]
