"""
Object Storage Infrastructure Module

Provides abstracted object storage interfaces; MinIO is the shipped backend.
"""

from .base import ObjectStorageInterface, StorageConfig
from .minio_adapter import MinIOAdapter
from .factory import create_storage, storage_config_from_settings

__all__ = [
    'ObjectStorageInterface',
    'StorageConfig',
    'MinIOAdapter',
    'create_storage',
    'storage_config_from_settings'
]
