from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.orm import Session

from storefront.core.deps import require_role
from storefront.db.session import get_db
from storefront.schemas.products import ProductCreate, ProductUpdate
from storefront.services.filter_normalizer import parse_product_filters
from storefront.services.products import (
    create_product,
    get_product,
    list_products,
    soft_delete_product,
    update_product,
)
from storefront.services.serializers import product_to_dict

router = APIRouter()


@router.get("", summary="List active products with pagination, filters and sorting")
def list_products_route(
    page: Optional[str] = Query(None, description="Page number (default: 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default: 10)"),
    search: Optional[str] = Query(None, description="Case-insensitive match on the product name"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt, price, name or stock"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    db: Session = Depends(get_db),
):
    filters = parse_product_filters(
        {
            "page": page,
            "limit": limit,
            "search": search,
            "categoryId": category_id,
            "minPrice": min_price,
            "maxPrice": max_price,
            "sortBy": sort_by,
            "sortOrder": sort_order,
        }
    )
    return list_products(db, filters).to_dict(product_to_dict)


@router.get("/{product_id}", summary="Get a single product")
def get_product_route(product_id: int = Path(...), db: Session = Depends(get_db)):
    return product_to_dict(get_product(db, product_id))


@router.post("", status_code=201)
def create_product_route(payload: ProductCreate, db: Session = Depends(get_db), admin=Depends(require_role("ADMIN"))):
    product = create_product(db, payload)
    return {"message": "Product created", "product": product_to_dict(product)}


@router.put("/{product_id}")
def update_product_route(
    payload: ProductUpdate,
    product_id: int = Path(...),
    db: Session = Depends(get_db),
    admin=Depends(require_role("ADMIN")),
):
    return product_to_dict(update_product(db, product_id, payload))


@router.delete("/{product_id}", status_code=204)
def delete_product_route(product_id: int = Path(...), db: Session = Depends(get_db), admin=Depends(require_role("ADMIN"))):
    soft_delete_product(db, product_id)
    return Response(status_code=204)
