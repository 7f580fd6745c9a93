"""Count + offset/limit execution of a predicate set and page assembly.

Listing endpoints run two reads in the same session: a ``COUNT(*)`` and a
bounded fetch. Both use the same WHERE clauses, so under the default isolation
level the only possible disagreement comes from writes committed between them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Literal, Sequence, TypeVar

from sqlalchemy import asc, desc, func, select
from sqlalchemy.orm import Session, selectinload

from storefront.core.errors import NotFoundError
from storefront.models.common import MAX_ROW_ID, MAX_SQL_BIGINT
from storefront.services.predicates import Predicate, where_clauses

_LOG = logging.getLogger("storefront.pagination")

T = TypeVar("T")


@dataclass(frozen=True)
class Include:
    """One relationship to resolve eagerly, with its own nested relationships."""

    relation: str
    children: tuple["Include", ...] = ()


@dataclass(frozen=True)
class OrderBy:
    field: str = "created_at"
    direction: Literal["asc", "desc"] = "desc"


@dataclass
class Page(Generic[T]):
    records: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    def to_dict(self, serialize: Callable[[T], dict[str, Any]]) -> dict[str, Any]:
        return {
            "data": [serialize(r) for r in self.records],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }


def total_pages_for(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return (total + limit - 1) // limit


def assemble_page(records: Sequence[T], total: int, page: int, limit: int) -> Page[T]:
    return Page(
        records=list(records),
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages_for(total, limit),
    )


def _loader_option(model, include: Include):
    attr = getattr(model, include.relation)
    option = selectinload(attr)
    if include.children:
        target = attr.property.mapper.class_
        option = option.options(*(_loader_option(target, child) for child in include.children))
    return option


def loader_options(model, includes: Iterable[Include]) -> list:
    return [_loader_option(model, inc) for inc in includes]


def _order_clauses(model, order_by: OrderBy) -> list:
    direction = asc if order_by.direction == "asc" else desc
    clauses = [direction(getattr(model, order_by.field))]
    if order_by.field != "id":
        # Tie-breaker keeps consecutive pages contiguous when the sort key repeats.
        clauses.append(direction(model.id))
    return clauses


def fetch_page(
    db: Session,
    model,
    predicates: Sequence[Predicate],
    *,
    page: int,
    limit: int,
    order_by: OrderBy = OrderBy(),
    include: Sequence[Include] = (),
) -> Page:
    clauses = where_clauses(model, predicates)

    total = db.scalar(select(func.count()).select_from(model).where(*clauses)) or 0
    offset = (page - 1) * limit
    if offset > MAX_SQL_BIGINT:
        # No table holds that many rows; the page is past the end.
        records = []
    else:
        stmt = (
            select(model)
            .where(*clauses)
            .order_by(*_order_clauses(model, order_by))
            .offset(offset)
            .limit(min(limit, MAX_SQL_BIGINT))
            .options(*loader_options(model, include))
        )
        records = db.scalars(stmt).all()

    _LOG.debug(
        "page model=%s predicates=%d page=%s limit=%s total=%s returned=%s",
        model.__name__,
        len(clauses),
        page,
        limit,
        total,
        len(records),
    )
    return assemble_page(records, int(total), page, limit)


def fetch_one(db: Session, model, record_id: int, *, include: Sequence[Include] = (), label: str | None = None):
    record = None
    # Ids outside the key column range cannot exist and would overflow the driver.
    if 1 <= record_id <= MAX_ROW_ID:
        stmt = select(model).where(model.id == record_id).options(*loader_options(model, include))
        record = db.scalars(stmt).first()
    if record is None:
        name = label or model.__name__
        raise NotFoundError(f"{name} not found", entity=model.__name__, entity_id=record_id)
    return record
