"""
MinIO Object Storage Adapter

Implements ObjectStorageInterface for MinIO object storage.
This adapter wraps the MinIO client to provide a consistent interface.
"""

import io
import json
import logging
from typing import Optional, BinaryIO, Union
from urllib.parse import quote

from minio import Minio
from minio.error import S3Error

from .base import ObjectStorageInterface, StorageConfig

logger = logging.getLogger(__name__)


def public_read_policy(bucket_name: str) -> str:
    """Bucket policy allowing anonymous GET on every object"""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"AWS": ["*"]},
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket_name}/*"],
            }
        ],
    })


class MinIOAdapter(ObjectStorageInterface):
    """
    MinIO implementation of ObjectStorageInterface
    """

    def __init__(self, config: StorageConfig):
        super().__init__(config)
        self.client = Minio(
            endpoint=config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=config.secure,
            region=config.region
        )

    def ensure_bucket_exists(self, bucket_name: str) -> bool:
        """Ensure bucket exists, create if it doesn't"""
        try:
            if not self.client.bucket_exists(bucket_name):
                self.client.make_bucket(bucket_name)
                logger.info(f"✅ Bucket '{bucket_name}' created")
            return True
        except S3Error as e:
            logger.error(f"❌ Bucket operation failed: {e}")
            return False

    def upload_file_object(
        self,
        file_data: Union[bytes, BinaryIO],
        bucket_name: str,
        object_name: str,
        content_type: Optional[str] = None
    ) -> bool:
        """Upload file object (bytes or stream) to MinIO"""
        try:
            if isinstance(file_data, bytes):
                data_stream = io.BytesIO(file_data)
                file_size = len(file_data)
            else:
                data_stream = file_data
                try:
                    current_pos = data_stream.tell()
                    data_stream.seek(0, 2)
                    file_size = data_stream.tell()
                    data_stream.seek(current_pos)
                except (OSError, io.UnsupportedOperation):
                    # not seekable, buffer it to learn the length
                    content = data_stream.read()
                    data_stream = io.BytesIO(content)
                    file_size = len(content)

            logger.debug(f"Uploading object: {bucket_name}/{object_name} ({file_size} bytes)")

            self.client.put_object(
                bucket_name=bucket_name,
                object_name=object_name,
                data=data_stream,
                length=file_size,
                content_type=content_type or "application/octet-stream"
            )

            logger.info(f"✅ Object uploaded: {bucket_name}/{object_name}")
            return True

        except S3Error as e:
            logger.error(f"❌ Upload failed {bucket_name}/{object_name}: {e}")
            return False
        except Exception as e:
            logger.error(f"❌ Error during upload of {bucket_name}/{object_name}: {str(e)}")
            return False

    def delete_file(self, bucket_name: str, object_name: str) -> bool:
        """Delete file from MinIO"""
        try:
            logger.debug(f"Deleting object: {bucket_name}/{object_name}")

            self.client.remove_object(
                bucket_name=bucket_name,
                object_name=object_name
            )

            logger.info(f"✅ Object deleted: {bucket_name}/{object_name}")
            return True

        except S3Error as e:
            if e.code in ("NoSuchKey", "NoSuchObject"):
                logger.info(f"Object already gone: {bucket_name}/{object_name}")
                return True
            logger.error(f"❌ Delete failed {bucket_name}/{object_name}: {e}")
            return False
        except Exception as e:
            logger.error(f"❌ Error during delete of {bucket_name}/{object_name}: {str(e)}")
            return False

    def get_public_url(self, bucket_name: str, object_name: str) -> str:
        if self.config.public_url:
            base = self.config.public_url.rstrip("/")
        else:
            scheme = "https" if self.config.secure else "http"
            base = f"{scheme}://{self.config.endpoint}"
        return f"{base}/{bucket_name}/{quote(object_name)}"

    def initialize(self) -> bool:
        """Create the image bucket and open it for anonymous reads"""
        logger.info(f"Initializing MinIO storage, endpoint: {self.config.endpoint}")

        try:
            buckets = self.client.list_buckets()
            logger.info(f"Connected to MinIO, {len(buckets)} buckets present")
        except Exception as e:
            logger.error(f"❌ Could not connect to MinIO: {e}")
            return False

        bucket = self.config.image_bucket
        if not self.ensure_bucket_exists(bucket):
            logger.error("❌ MinIO initialization failed")
            return False

        try:
            self.client.set_bucket_policy(bucket, public_read_policy(bucket))
        except S3Error as e:
            logger.error(f"❌ Could not set public read policy on '{bucket}': {e}")
            return False

        logger.info("✅ MinIO initialization complete")
        return True
