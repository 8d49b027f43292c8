"""
Product image host

Stores product images on an object storage backend and hands back the
object name (kept on the product for later deletion) and its public URL.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from app.core.config import settings
from app.infrastructure.exceptions import AssetDeleteError, UploadError
from .image_processor import ImageProcessor, ImageUpload
from .object_storage import ObjectStorageInterface, create_storage

logger = logging.getLogger(__name__)


@dataclass
class StoredAsset:
    asset_id: str
    url: str


class ProductImageHost:
    """Upload and delete product images on an ObjectStorageInterface"""

    def __init__(
            self,
            storage: ObjectStorageInterface,
            bucket: str,
            folder: str = "products",
            processor: Optional[ImageProcessor] = None,
    ):
        self.storage = storage
        self.bucket = bucket
        self.folder = folder.strip("/")
        self.processor = processor or ImageProcessor()

    @classmethod
    def from_settings(cls) -> "ProductImageHost":
        return cls(
            storage=create_storage(),
            bucket=settings.PRODUCT_IMAGE_BUCKET,
            folder=settings.PRODUCT_IMAGE_FOLDER,
            processor=ImageProcessor(
                max_size=(settings.IMAGE_MAX_WIDTH, settings.IMAGE_MAX_HEIGHT),
                max_bytes=settings.MAX_IMAGE_SIZE,
            ),
        )

    def initialize(self) -> bool:
        return self.storage.initialize()

    def upload(self, image: ImageUpload, folder: Optional[str] = None) -> StoredAsset:
        """
        Store an image under ``folder`` (the configured one by default)

        Raises:
            InvalidImageError: the blob was rejected before upload
            UploadError: the storage backend refused the object
        """
        prepared = self.processor.prepare(image)
        prefix = (folder or self.folder).strip("/")
        object_name = f"{prefix}/{uuid.uuid4().hex}{prepared.extension}"

        if not self.storage.upload_file_object(
            prepared.data, self.bucket, object_name, content_type=prepared.content_type
        ):
            raise UploadError("Image upload failed")

        return StoredAsset(
            asset_id=object_name,
            url=self.storage.get_public_url(self.bucket, object_name),
        )

    def delete(self, asset_id: str) -> None:
        """
        Remove a stored image; an already missing object is not an error

        Raises:
            AssetDeleteError
        """
        if not self.storage.delete_file(self.bucket, asset_id):
            raise AssetDeleteError(f"Failed to delete image {asset_id}")
