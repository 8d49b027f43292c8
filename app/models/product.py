from datetime import timezone
from typing import Dict, Any

from sqlalchemy import Column, BIGINT, VARCHAR, Float, Boolean, Integer, TEXT, DateTime

from app.db.base import Base, get_utc_datetime
from app.utils.snowflake_id import generate_snowflake_id


class Product(Base):
    """
    Product database model

    gst_percentage, gst_amount and total_price are derived from sell_price and
    gst_enabled by the product service; nothing else writes them.
    """
    __tablename__ = "t_product"

    id = Column(BIGINT, primary_key=True, index=True, default=lambda: generate_snowflake_id())
    item_name = Column(VARCHAR(255), nullable=False)
    type = Column(VARCHAR(20), nullable=False, default="Veg")
    sell_price = Column(Float, nullable=False)
    gst_enabled = Column(Boolean, nullable=False, default=False)
    gst_percentage = Column(Integer, nullable=False, default=0)
    gst_amount = Column(Float, nullable=False, default=0)
    total_price = Column(Float, nullable=False)
    primary_unit = Column(VARCHAR(20), nullable=True)
    custom_unit = Column(VARCHAR(255), nullable=True)
    barcode = Column(VARCHAR(32), nullable=False, unique=True, index=True)
    image = Column(TEXT, nullable=True)  # public URL of the hosted image
    image_asset_id = Column(VARCHAR(512), nullable=True)  # object name on the asset host
    created_at = Column(DateTime, nullable=False, default=get_utc_datetime, index=True)

    def to_dict(self) -> Dict[str, Any]:
        """Public representation of the product"""
        return {
            "id": str(self.id),
            "itemName": self.item_name,
            "type": self.type,
            "sellPrice": self.sell_price,
            "gstEnabled": self.gst_enabled,
            "gstPercentage": self.gst_percentage,
            "gstAmount": self.gst_amount,
            "totalPrice": self.total_price,
            "primaryUnit": self.primary_unit,
            "customUnit": self.custom_unit,
            "barcode": self.barcode,
            "image": self.image,
            "createdAt": self._created_at_utc(),
        }

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.item_name!r}>"

    def _created_at_utc(self):
        if self.created_at is None:
            return None
        created_at = self.created_at
        # written as UTC; SQLite and MySQL hand it back without an offset
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at.isoformat()
