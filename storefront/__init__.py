"""Storefront catalog API and shop client."""

__version__ = "0.1.0"
