from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["PENDING", "PAID", "SHIPPED", "DELIVERED", "CANCELLED"]
ProductSortField = Literal["createdAt", "price", "name", "stock"]
SortOrder = Literal["asc", "desc"]


class PageParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)


class OrderFilters(PageParams):
    status: Optional[OrderStatus] = None
    user_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ProductFilters(PageParams):
    search: Optional[str] = None
    category_id: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort_by: ProductSortField = "createdAt"
    sort_order: SortOrder = "desc"
