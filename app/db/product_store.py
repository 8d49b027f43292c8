"""
Product persistence

A keyed table with one order index and a uniqueness constraint on barcode.
No business computation happens here; derived fields arrive fully populated.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.infrastructure.exceptions import ConflictError, NotFoundError, StoreError
from app.models.product import Product

logger = logging.getLogger(__name__)


def _parse_id(product_id: Any) -> Optional[int]:
    try:
        return int(str(product_id).strip())
    except (TypeError, ValueError):
        return None


class ProductStore:
    """CRUD access to the product table through one session"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, product: Product) -> Product:
        """
        Insert a fully populated product

        Raises:
            ConflictError: barcode (or id) already taken
            StoreError: any other database failure
        """
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            return product
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Product insert rejected by a uniqueness constraint: {e.orig}")
            raise ConflictError(f"Product with barcode {product.barcode} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to insert product: {str(e)}") from e

    def get_by_id(self, product_id: Any) -> Optional[Product]:
        pk = _parse_id(product_id)
        if pk is None:
            return None
        try:
            return self.db.get(Product, pk)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load product {product_id}: {str(e)}") from e

    def barcode_exists(self, barcode: str) -> bool:
        try:
            return self.db.query(Product.id).filter(Product.barcode == barcode).first() is not None
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to check barcode {barcode}: {str(e)}") from e

    def list_all(self) -> List[Product]:
        """All products, newest first"""
        try:
            return (
                self.db.query(Product)
                .order_by(Product.created_at.desc(), Product.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list products: {str(e)}") from e

    def update(self, product_id: Any, patch: Dict[str, Any]) -> Product:
        """
        Apply a field level patch to an existing product

        Raises:
            NotFoundError: no product with this id
            ConflictError: the patch violates a uniqueness constraint
            StoreError: any other database failure
        """
        product = self.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)

        try:
            for field, value in patch.items():
                setattr(product, field, value)
            self.db.commit()
            self.db.refresh(product)
            return product
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Update of product {product_id} violates a uniqueness constraint") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to update product {product_id}: {str(e)}") from e

    def delete(self, product_id: Any) -> Optional[Product]:
        """Remove a product and return the record as it was, or None if absent"""
        product = self.get_by_id(product_id)
        if product is None:
            return None

        try:
            # load every column now, the instance is detached after commit
            self.db.refresh(product)
            self.db.delete(product)
            self.db.commit()
            return product
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to delete product {product_id}: {str(e)}") from e
