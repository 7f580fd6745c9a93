# Importing this module registers every mapped class on Base.metadata so that
# string-based relationship targets resolve.
from storefront.models.category import Category
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User

__all__ = ["Category", "Order", "OrderItem", "Product", "User"]
