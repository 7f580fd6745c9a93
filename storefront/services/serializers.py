from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from storefront.models.category import Category
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User


def serialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: serialize_value(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _pick(row: Any, fields: dict[str, str]) -> dict[str, Any]:
    return {key: serialize_value(getattr(row, attr)) for key, attr in fields.items()}


_CATEGORY_SUMMARY = {"id": "id", "name": "name", "slug": "slug"}
_CATEGORY_DETAIL = {**_CATEGORY_SUMMARY, "description": "description"}

_PRODUCT_SUMMARY = {"id": "id", "name": "name", "slug": "slug", "images": "images"}
_PRODUCT_DETAIL = {
    "id": "id",
    "name": "name",
    "description": "description",
    "price": "price",
    "slug": "slug",
    "stock": "stock",
    "colors": "colors",
    "sizes": "sizes",
    "images": "images",
}
_PRODUCT_FULL = {
    **_PRODUCT_DETAIL,
    "active": "active",
    "categoryId": "category_id",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

_USER_SUMMARY = {"id": "id", "firstName": "first_name", "lastName": "last_name", "email": "email"}
_USER_DETAIL = {**_USER_SUMMARY, "cpf": "cpf", "phone": "phone"}

_ORDER_FIELDS = {
    "id": "id",
    "userId": "user_id",
    "total": "total",
    "status": "status",
    "shippingAddress": "shipping_address",
    "paymentMethod": "payment_method",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
_ITEM_SUMMARY = {"id": "id", "productId": "product_id", "price": "price", "quantity": "quantity", "size": "size"}
_ITEM_DETAIL = {**_ITEM_SUMMARY, "createdAt": "created_at"}


def category_to_dict(category: Category | None, *, detail: bool = False) -> dict[str, Any] | None:
    if category is None:
        return None
    return _pick(category, _CATEGORY_DETAIL if detail else _CATEGORY_SUMMARY)


def product_to_dict(product: Product) -> dict[str, Any]:
    data = _pick(product, _PRODUCT_FULL)
    data["category"] = category_to_dict(product.category, detail=True)
    return data


def user_to_dict(user: User | None, *, detail: bool = False) -> dict[str, Any] | None:
    if user is None:
        return None
    return _pick(user, _USER_DETAIL if detail else _USER_SUMMARY)


def _order_item_to_dict(item: OrderItem, *, detail: bool) -> dict[str, Any]:
    data = _pick(item, _ITEM_DETAIL if detail else _ITEM_SUMMARY)
    product = item.product
    if product is None:
        data["product"] = None
        return data
    product_data = _pick(product, _PRODUCT_DETAIL if detail else _PRODUCT_SUMMARY)
    product_data["category"] = category_to_dict(product.category, detail=detail)
    data["product"] = product_data
    return data


def order_to_dict(order: Order, *, detail: bool = False) -> dict[str, Any]:
    data = _pick(order, _ORDER_FIELDS)
    data["user"] = user_to_dict(order.user, detail=detail)
    data["items"] = [_order_item_to_dict(item, detail=detail) for item in order.items]
    return data


def order_detail_to_dict(order: Order) -> dict[str, Any]:
    return order_to_dict(order, detail=True)
