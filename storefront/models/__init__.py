# storefront/models/__init__.py
# Importing every model registers the tables on Base.metadata (create_all, alembic).
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.references import CartItem, OrderItem
from storefront.models.review import Review

__all__ = ["Category", "Product", "CartItem", "OrderItem", "Review"]
