"""
Storage Infrastructure Module

Provides the object storage adapters and the product image host built on them.
"""

from .image_processor import ImageProcessor, ImageUpload, PreparedImage
from .image_host import ProductImageHost, StoredAsset
from . import object_storage

__all__ = [
    'ImageProcessor',
    'ImageUpload',
    'PreparedImage',
    'ProductImageHost',
    'StoredAsset',
    'object_storage'
]
