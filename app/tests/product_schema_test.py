"""Payload validation rules for create and update."""
import pytest

from app.infrastructure.exceptions import ProductValidationError
from app.schemas.product import ProductCreate, ProductUpdate, validate_product_payload


def _fields(exc_info):
    return {error["field"] for error in exc_info.value.errors}


def test_form_strings_are_parsed():
    data = validate_product_payload({
        "itemName": "  Tea  ",
        "sellPrice": "20",
        "type": "Beverage",
        "primaryUnit": "piece",
        "gstEnabled": "true",
    })
    assert isinstance(data, ProductCreate)
    assert data.to_fields() == {
        "item_name": "Tea",
        "sell_price": 20.0,
        "type": "Beverage",
        "primary_unit": "piece",
        "custom_unit": None,
        "gst_enabled": True,
    }


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_item_name_is_rejected(name):
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": name, "sellPrice": 10, "type": "Veg"})
    assert [(e["field"], e["msg"]) for e in exc_info.value.errors] == [
        ("itemName", "Item name is required"),
    ]


def test_unknown_type_is_rejected():
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": "Cake", "sellPrice": 10, "type": "Dessert"})
    assert exc_info.value.errors[0]["field"] == "type"
    assert exc_info.value.errors[0]["msg"] == "Invalid product type"
    assert exc_info.value.errors[0]["value"] == "Dessert"


def test_all_violations_reported_at_once():
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"primaryUnit": "litre"})
    assert _fields(exc_info) == {"itemName", "sellPrice", "type", "primaryUnit"}


@pytest.mark.parametrize("price", ["-1", "abc", "nan", "inf", ""])
def test_bad_sell_price_is_rejected(price):
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": "Tea", "sellPrice": price, "type": "Veg"})
    assert _fields(exc_info) == {"sellPrice"}
    assert exc_info.value.errors[0]["msg"] == "Sell price must be a positive number"


def test_zero_price_and_empty_unit_are_allowed():
    data = validate_product_payload({"itemName": "Water", "sellPrice": "0", "type": "Beverage", "primaryUnit": ""})
    assert data.sell_price == 0
    assert data.to_fields()["primary_unit"] == ""


def test_blank_gst_flag_means_disabled():
    data = validate_product_payload({"itemName": "Dal", "sellPrice": 80, "type": "Veg", "gstEnabled": ""})
    assert data.to_fields()["gst_enabled"] is False


def test_derived_and_generated_fields_are_ignored():
    data = validate_product_payload({
        "itemName": "Tea",
        "sellPrice": 20,
        "type": "Beverage",
        "totalPrice": 999,
        "gstAmount": 50,
        "gstPercentage": 28,
        "barcode": "123",
        "id": "1",
    })
    fields = data.to_fields()
    for key in ("total_price", "gst_amount", "gst_percentage", "barcode", "id"):
        assert key not in fields


def test_update_allows_missing_item_name():
    data = validate_product_payload({"sellPrice": "15.5", "type": "Non-Veg"}, partial=True)
    assert isinstance(data, ProductUpdate)
    assert data.to_patch() == {"sell_price": 15.5, "type": "Non-Veg"}


def test_update_still_requires_price_and_type():
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": "Tea"}, partial=True)
    assert _fields(exc_info) == {"sellPrice", "type"}


def test_update_rejects_blank_item_name():
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": " ", "sellPrice": 1, "type": "Veg"}, partial=True)
    assert _fields(exc_info) == {"itemName"}


def test_update_patch_carries_supplied_optionals():
    data = validate_product_payload({
        "itemName": "Masala Tea",
        "sellPrice": 25,
        "type": "Beverage",
        "primaryUnit": "kg",
        "customUnit": " cup ",
        "gstEnabled": "false",
    }, partial=True)
    assert data.to_patch() == {
        "item_name": "Masala Tea",
        "sell_price": 25.0,
        "type": "Beverage",
        "primary_unit": "kg",
        "custom_unit": "cup",
        "gst_enabled": False,
    }


@pytest.mark.parametrize("price", ["1e26", "1000000000.01"])
def test_sell_price_above_limit_is_rejected(price):
    with pytest.raises(ProductValidationError) as exc_info:
        validate_product_payload({"itemName": "Gold", "sellPrice": price, "type": "Veg"})
    assert [(e["field"], e["msg"]) for e in exc_info.value.errors] == [
        ("sellPrice", "Sell price must not exceed 1000000000"),
    ]


def test_sell_price_at_limit_is_allowed():
    data = validate_product_payload({"itemName": "Gold", "sellPrice": "1000000000", "type": "Veg"})
    assert data.sell_price == 1_000_000_000
