"""
Core Services Module

Product CRUD with derived tax fields and image handling.
"""

from .product_service import ProductService

__all__ = ["ProductService"]
