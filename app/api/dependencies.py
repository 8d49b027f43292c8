"""
API Dependencies

Provides dependency injection for the product service and what it is built
from. Tests replace get_db and get_image_host through dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.product_store import ProductStore
from app.db.session import get_db
from app.infrastructure.storage import ProductImageHost
from app.services.core import ProductService


@lru_cache()
def get_image_host() -> ProductImageHost:
    """
    Process-wide image host, built from settings on first use
    """
    return ProductImageHost.from_settings()


def get_product_store(db: Session = Depends(get_db)) -> ProductStore:
    return ProductStore(db)


def get_product_service(
    store: ProductStore = Depends(get_product_store),
    image_host: ProductImageHost = Depends(get_image_host),
) -> ProductService:
    """
    Product service bound to the request's database session

    Returns:
        ProductService: Configured product service
    """
    return ProductService(store=store, image_host=image_host)
