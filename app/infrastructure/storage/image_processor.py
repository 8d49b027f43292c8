import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from app.infrastructure.exceptions import InvalidImageError

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """Raw image blob as received from the client"""
    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


@dataclass
class PreparedImage:
    """Image bytes ready to be stored"""
    data: bytes
    content_type: str
    extension: str
    width: int
    height: int


class ImageProcessor:
    """
    Checks uploaded product images and scales them down to the display limit

    Images are only ever shrunk, keeping their aspect ratio; an image already
    inside the limit is stored byte for byte.
    """

    FORMAT_EXTENSIONS = {
        'JPEG': '.jpg',
        'PNG': '.png',
        'GIF': '.gif',
        'WEBP': '.webp',
        'BMP': '.bmp',
        'TIFF': '.tiff',
    }

    def __init__(self, max_size: Tuple[int, int] = (500, 500), max_bytes: int = 5 * 1024 * 1024):
        self.max_size = max_size
        self.max_bytes = max_bytes

    def validate(self, upload: ImageUpload) -> str:
        """
        Reject anything that is not a readable image within the size limit

        Returns:
            str: Pillow format name of the image

        Raises:
            InvalidImageError
        """
        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise InvalidImageError("Only image files are allowed")
        if not upload.data:
            raise InvalidImageError("Image file is empty")
        if len(upload.data) > self.max_bytes:
            raise InvalidImageError(
                f"Image exceeds the {self.max_bytes // (1024 * 1024)}MB size limit"
            )

        try:
            with Image.open(io.BytesIO(upload.data)) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.warning(f"Rejected unreadable image {upload.filename!r}: {str(e)}")
            raise InvalidImageError("Uploaded file is not a valid image") from e

        if image_format not in self.FORMAT_EXTENSIONS:
            raise InvalidImageError(f"Unsupported image format: {image_format}")
        return image_format

    def prepare(self, upload: ImageUpload) -> PreparedImage:
        image_format = self.validate(upload)
        extension = self.FORMAT_EXTENSIONS[image_format]
        content_type = Image.MIME.get(image_format, upload.content_type)

        # verify() leaves the image unusable, open it again
        with Image.open(io.BytesIO(upload.data)) as img:
            max_width, max_height = self.max_size
            if img.width <= max_width and img.height <= max_height:
                return PreparedImage(
                    data=upload.data,
                    content_type=content_type,
                    extension=extension,
                    width=img.width,
                    height=img.height,
                )

            original = (img.width, img.height)
            img.thumbnail(self.max_size, Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            if image_format == 'JPEG':
                img.save(buffer, format=image_format, optimize=True, quality=85)
            else:
                img.save(buffer, format=image_format)

            logger.info(f"Image scaled from {original[0]}x{original[1]} to {img.width}x{img.height}")
            return PreparedImage(
                data=buffer.getvalue(),
                content_type=content_type,
                extension=extension,
                width=img.width,
                height=img.height,
            )
