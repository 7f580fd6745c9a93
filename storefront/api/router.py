from fastapi import APIRouter
from storefront.api import orders, products

router = APIRouter()
router.include_router(orders.router, prefix="/orders", tags=["Orders"])
router.include_router(products.router, prefix="/products", tags=["Products"])
