from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from storefront.db.session import get_db
from storefront.services.filter_normalizer import parse_order_filters
from storefront.services.orders import get_order, list_orders
from storefront.services.serializers import order_detail_to_dict, order_to_dict

router = APIRouter()


@router.get("", summary="List orders with pagination and filters")
def list_orders_route(
    page: Optional[str] = Query(None, description="Page number (default: 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default: 10)"),
    status: Optional[str] = Query(None, description="PENDING, PAID, SHIPPED, DELIVERED or CANCELLED"),
    user_id: Optional[str] = Query(None, alias="userId", description="Filter by user id"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Created on or after (ISO 8601)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Created on or before (ISO 8601)"),
    db: Session = Depends(get_db),
):
    filters = parse_order_filters(
        {
            "page": page,
            "limit": limit,
            "status": status,
            "userId": user_id,
            "startDate": start_date,
            "endDate": end_date,
        }
    )
    return list_orders(db, filters).to_dict(order_to_dict)


@router.get("/{order_id}", summary="Get a single order")
def get_order_route(order_id: int = Path(..., description="Order id"), db: Session = Depends(get_db)):
    return order_detail_to_dict(get_order(db, order_id))
