"""
Object Storage Abstract Base Classes

Defines the interface for object storage implementations so the image host
can run against MinIO in production and against an in-memory double in tests.
"""

from abc import ABC, abstractmethod
from typing import Optional, BinaryIO, Union
from dataclasses import dataclass


@dataclass
class StorageConfig:
    """Configuration for object storage services"""
    endpoint: str
    access_key: str
    secret_key: str
    secure: bool = True
    region: Optional[str] = None

    # Bucket holding product images
    image_bucket: str = "product-images"
    # Base for public object URLs; derived from endpoint when empty
    public_url: Optional[str] = None


class ObjectStorageInterface(ABC):
    """
    Abstract interface for object storage operations

    Methods report failure through their return value (False / None) and
    log the cause; callers decide whether a failure is fatal.
    """

    def __init__(self, config: StorageConfig):
        self.config = config

    @abstractmethod
    def ensure_bucket_exists(self, bucket_name: str) -> bool:
        """
        Ensure bucket exists, create if it doesn't

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def upload_file_object(
        self,
        file_data: Union[bytes, BinaryIO],
        bucket_name: str,
        object_name: str,
        content_type: Optional[str] = None
    ) -> bool:
        """
        Upload file object (bytes or stream) to storage

        Args:
            file_data: File content as bytes or binary stream
            bucket_name: Target bucket name
            object_name: Object name in storage
            content_type: MIME content type

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def delete_file(self, bucket_name: str, object_name: str) -> bool:
        """
        Delete file from storage; a missing object counts as deleted

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def get_public_url(self, bucket_name: str, object_name: str) -> str:
        """
        Permanent URL of an object in a publicly readable bucket
        """
        pass

    @abstractmethod
    def initialize(self) -> bool:
        """
        Initialize storage service (create required buckets, access policies)

        Returns:
            True if successful, False otherwise
        """
        pass
