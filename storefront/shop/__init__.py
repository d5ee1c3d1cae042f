# storefront/shop/__init__.py
"""Client-side shop state: URL-driven product listing and the cart store."""
from storefront.shop.cart import CartLine, CartStore
from storefront.shop.listing import ListingView, ShopListing, StaleResponse
from storefront.shop.query import PriceBounds, ShopQuery

__all__ = [
    "CartLine",
    "CartStore",
    "ListingView",
    "PriceBounds",
    "ShopListing",
    "ShopQuery",
    "StaleResponse",
]
