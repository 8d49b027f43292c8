"""
Object Storage Factory

Builds the MinIO adapter from application settings.
"""

from typing import Optional

from app.core.config import settings
from .base import ObjectStorageInterface, StorageConfig
from .minio_adapter import MinIOAdapter


def storage_config_from_settings() -> StorageConfig:
    return StorageConfig(
        endpoint=settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
        image_bucket=settings.PRODUCT_IMAGE_BUCKET,
        public_url=settings.MINIO_PUBLIC_URL
    )


def create_storage(config: Optional[StorageConfig] = None) -> ObjectStorageInterface:
    """
    Object storage for product images

    Args:
        config: explicit configuration, settings are used when omitted
    """
    return MinIOAdapter(config or storage_config_from_settings())
