from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from storefront.models.common import MAX_ROW_ID

# Surrounding whitespace is dropped before the length check, so "   " is empty.
ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
ProductDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProductCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: ProductName
    description: ProductDescription
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category_id: int = Field(ge=1, le=MAX_ROW_ID)
    stock: int = Field(0, ge=0, le=MAX_ROW_ID)
    colors: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    active: bool = True
    slug: Optional[str] = None


class ProductUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[ProductName] = None
    description: Optional[ProductDescription] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = Field(None, ge=1, le=MAX_ROW_ID)
    stock: Optional[int] = Field(None, ge=0, le=MAX_ROW_ID)
    colors: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    images: Optional[List[str]] = None
    active: Optional[bool] = None
