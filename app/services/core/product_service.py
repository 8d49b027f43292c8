"""
Product service

The only writer of derived product fields. Wraps every record change with the
matching image work on the asset host:

- an upload failure aborts the operation before anything is persisted
- a superseded or orphaned image is removed best effort; failures are logged
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from app.core.config import settings
from app.db.product_store import ProductStore
from app.infrastructure.exceptions import AssetDeleteError, ConflictError, NotFoundError
from app.infrastructure.storage import ImageUpload, ProductImageHost, StoredAsset
from app.models.product import Product
from app.schemas.product import validate_product_payload
from app.services.core.pricing import compute_price_breakdown
from app.utils.barcode import generate_barcode

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(
            self,
            store: ProductStore,
            image_host: ProductImageHost,
            barcode_generator: Callable[[], str] = generate_barcode,
            barcode_max_attempts: Optional[int] = None,
    ):
        self.store = store
        self.image_host = image_host
        self.barcode_generator = barcode_generator
        self.barcode_max_attempts = barcode_max_attempts or settings.BARCODE_MAX_ATTEMPTS

    def list_products(self) -> List[Product]:
        return self.store.list_all()

    def get_product(self, product_id: Any) -> Product:
        product = self.store.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def create_product(
            self,
            payload: Mapping[str, Any],
            image: Optional[ImageUpload] = None,
    ) -> Product:
        """
        Create a product

        1. validate the payload
        2. upload the image, if any
        3. derive the tax fields
        4. insert with a freshly allocated barcode

        Raises:
            ProductValidationError, UploadError, ConflictError, StoreError
        """
        data = validate_product_payload(payload)
        fields = data.to_fields()
        fields.update(compute_price_breakdown(fields["sell_price"], fields["gst_enabled"]).to_fields())

        asset = self._upload(image) if image is not None else None
        if asset is not None:
            fields["image"] = asset.url
            fields["image_asset_id"] = asset.asset_id

        try:
            product = self._insert_with_unique_barcode(fields)
        except Exception:
            if asset is not None:
                self._discard_asset(asset.asset_id)
            raise

        logger.info(f"Product created: {product.id} ({product.item_name})")
        return product

    def update_product(
            self,
            product_id: Any,
            payload: Mapping[str, Any],
            image: Optional[ImageUpload] = None,
    ) -> Product:
        """
        Update a product and recompute its derived fields

        A new image is uploaded before the record changes; the previous image
        is removed only once the record points at the new one.

        Raises:
            NotFoundError, ProductValidationError, UploadError, StoreError
        """
        existing = self.get_product(product_id)

        data = validate_product_payload(payload, partial=True)
        patch: Dict[str, Any] = data.to_patch()
        gst_enabled = patch.get("gst_enabled", existing.gst_enabled)
        patch.update(compute_price_breakdown(patch["sell_price"], bool(gst_enabled)).to_fields())

        previous_asset_id = existing.image_asset_id
        asset = self._upload(image) if image is not None else None
        if asset is not None:
            patch["image"] = asset.url
            patch["image_asset_id"] = asset.asset_id

        try:
            product = self.store.update(product_id, patch)
        except Exception:
            if asset is not None:
                self._discard_asset(asset.asset_id)
            raise

        if asset is not None and previous_asset_id:
            self._discard_asset(previous_asset_id)

        logger.info(f"Product updated: {product.id}")
        return product

    def delete_product(self, product_id: Any) -> Product:
        """
        Delete a product, then its image

        Raises:
            NotFoundError, StoreError
        """
        existing = self.get_product(product_id)
        asset_id = existing.image_asset_id

        removed = self.store.delete(product_id)
        if removed is None:
            # deleted concurrently between the lookup and the delete
            raise NotFoundError("Product", product_id)

        if asset_id:
            self._discard_asset(asset_id)

        logger.info(f"Product deleted: {product_id}")
        return removed

    def _upload(self, image: ImageUpload) -> StoredAsset:
        asset = self.image_host.upload(image)
        logger.info(f"Image stored as {asset.asset_id}")
        return asset

    def _discard_asset(self, asset_id: str) -> None:
        try:
            self.image_host.delete(asset_id)
        except AssetDeleteError as e:
            logger.warning(f"Failed to delete image {asset_id}: {str(e)}")

    def _insert_with_unique_barcode(self, fields: Dict[str, Any]) -> Product:
        for attempt in range(1, self.barcode_max_attempts + 1):
            barcode = self.barcode_generator()
            if self.store.barcode_exists(barcode):
                logger.warning(f"Barcode {barcode} already taken (attempt {attempt})")
                continue
            try:
                return self.store.create(Product(barcode=barcode, **fields))
            except ConflictError:
                logger.warning(f"Barcode {barcode} collided on insert (attempt {attempt})")

        raise ConflictError(
            f"Could not allocate a unique barcode after {self.barcode_max_attempts} attempts"
        )
