from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.infrastructure.exceptions import ProductValidationError


class ProductType(str, Enum):
    VEG = "Veg"
    NON_VEG = "Non-Veg"
    BEVERAGE = "Beverage"


class PrimaryUnit(str, Enum):
    PIECE = "piece"
    KG = "kg"
    GRAM = "gram"
    NONE = ""


# Largest accepted sell price; derived amounts stay exact to the cent in a Float column
MAX_SELL_PRICE = 1_000_000_000

# One message per field, whatever pydantic complained about
FIELD_MESSAGES = {
    "itemName": "Item name is required",
    "sellPrice": "Sell price must be a positive number",
    "type": "Invalid product type",
    "primaryUnit": "Invalid primary unit",
    "customUnit": "Custom unit must be text",
    "gstEnabled": "GST flag must be true or false",
}

LIMIT_MESSAGES = {
    ("sellPrice", "less_than_equal"): f"Sell price must not exceed {MAX_SELL_PRICE}",
}


class ProductBase(BaseModel):
    """
    Fields a caller may send for a product

    Derived fields (gstPercentage, gstAmount, totalPrice) as well as id and
    barcode are not declared, so anything sent for them is ignored.
    """
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")

    item_name: Optional[str] = Field(None, alias="itemName", min_length=1, max_length=255)
    sell_price: float = Field(..., alias="sellPrice", ge=0, le=MAX_SELL_PRICE, allow_inf_nan=False)
    type: ProductType = Field(...)
    primary_unit: Optional[PrimaryUnit] = Field(None, alias="primaryUnit")
    custom_unit: Optional[str] = Field(None, alias="customUnit", max_length=255)
    gst_enabled: Optional[bool] = Field(None, alias="gstEnabled")

    @field_validator("gst_enabled", mode="before")
    @classmethod
    def blank_flag_is_unset(cls, v: Any) -> Any:
        # HTML forms send "" for an untouched field
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ProductCreate(ProductBase):
    """Product creation payload"""
    item_name: str = Field(..., alias="itemName", min_length=1, max_length=255)

    def to_fields(self) -> Dict[str, Any]:
        return {
            "item_name": self.item_name,
            "sell_price": self.sell_price,
            "type": self.type.value,
            "primary_unit": self.primary_unit.value if self.primary_unit is not None else None,
            "custom_unit": self.custom_unit,
            "gst_enabled": bool(self.gst_enabled),
        }


class ProductUpdate(ProductBase):
    """
    Product update payload

    itemName may be left out; sellPrice and type are always required.
    """

    def to_patch(self) -> Dict[str, Any]:
        """Column values for the fields that were actually supplied"""
        patch: Dict[str, Any] = {
            "sell_price": self.sell_price,
            "type": self.type.value,
        }
        if self.item_name is not None:
            patch["item_name"] = self.item_name
        if self.primary_unit is not None:
            patch["primary_unit"] = self.primary_unit.value
        if self.custom_unit is not None:
            patch["custom_unit"] = self.custom_unit
        if self.gst_enabled is not None:
            patch["gst_enabled"] = self.gst_enabled
        return patch


def format_validation_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Turn pydantic errors into ``{field, msg, value}`` entries"""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        errors.append({
            "field": field,
            "msg": LIMIT_MESSAGES.get((field, err["type"]), FIELD_MESSAGES.get(field, err["msg"])),
            "value": None if err["type"] == "missing" else err.get("input"),
        })
    return errors


def validate_product_payload(
        payload: Mapping[str, Any],
        partial: bool = False,
) -> Union[ProductCreate, ProductUpdate]:
    """
    Validate a raw product payload

    Args:
        payload: field values keyed by their public (camelCase) names
        partial: validate as an update, where itemName is optional

    Raises:
        ProductValidationError: listing every violation at once
    """
    model = ProductUpdate if partial else ProductCreate
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ProductValidationError(format_validation_errors(exc)) from exc
