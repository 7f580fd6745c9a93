from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from storefront.core.config import settings
from storefront.core.errors import ValidationError
from storefront.models.order import ORDER_STATUSES as ORDER_STATUS_VALUES
from storefront.schemas.filters import OrderFilters, ProductFilters

ORDER_STATUSES = set(ORDER_STATUS_VALUES)
PRODUCT_SORT_FIELDS = {"createdAt", "price", "name", "stock"}
SORT_ORDERS = {"asc", "desc"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _bad_value(key: str, kind: str) -> ValidationError:
    return ValidationError(f'Invalid value for "{key}" (expected {kind})', field=key)


def _coerce_page_value(key: str, value: Any, default: int) -> int:
    """Parse ``page``/``limit``.

    Absent, blank and zero values fall back to ``default``. Anything else that is
    not a positive integer is rejected.
    """
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        raise _bad_value(key, "positive integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise _bad_value(key, "positive integer")
        parsed = int(value)
    elif isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            raise _bad_value(key, "positive integer")
    if parsed == 0:
        return default
    if parsed < 0:
        raise _bad_value(key, "positive integer")
    return parsed


def _optional_id(value: Any) -> int | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            return None
    return parsed if parsed > 0 else None


def _optional_decimal(value: Any) -> Decimal | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation:
            return None
    return parsed if parsed.is_finite() else None


def _optional_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _optional_choice(value: Any, choices: set[str], *, fold=None) -> str | None:
    text = _optional_text(value)
    if text is None:
        return None
    if fold is not None:
        text = fold(text)
    return text if text in choices else None


def _coerce_datetime(key: str, value: Any) -> datetime | None:
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        try:
            if "T" not in text and " " not in text and len(text) == 10:
                # A bare date is midnight UTC on either bound.
                parsed = datetime.combine(date.fromisoformat(text), time.min)
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise _bad_value(key, "ISO-8601 date")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _page_fields(raw: Mapping[str, Any]) -> dict[str, int]:
    return {
        "page": _coerce_page_value("page", raw.get("page"), settings.DEFAULT_PAGE),
        "limit": _coerce_page_value("limit", raw.get("limit"), settings.DEFAULT_PAGE_LIMIT),
    }


def parse_order_filters(raw: Mapping[str, Any]) -> OrderFilters:
    return OrderFilters(
        **_page_fields(raw),
        status=_optional_choice(raw.get("status"), ORDER_STATUSES, fold=str.upper),
        user_id=_optional_id(raw.get("userId")),
        start_date=_coerce_datetime("startDate", raw.get("startDate")),
        end_date=_coerce_datetime("endDate", raw.get("endDate")),
    )


def parse_product_filters(raw: Mapping[str, Any]) -> ProductFilters:
    fields: dict[str, Any] = {
        **_page_fields(raw),
        "search": _optional_text(raw.get("search")),
        "category_id": _optional_id(raw.get("categoryId")),
        "min_price": _optional_decimal(raw.get("minPrice")),
        "max_price": _optional_decimal(raw.get("maxPrice")),
    }
    sort_by = _optional_choice(raw.get("sortBy"), PRODUCT_SORT_FIELDS)
    if sort_by is not None:
        fields["sort_by"] = sort_by
    sort_order = _optional_choice(raw.get("sortOrder"), SORT_ORDERS, fold=str.lower)
    if sort_order is not None:
        fields["sort_order"] = sort_order
    return ProductFilters(**fields)
