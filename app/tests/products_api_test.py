"""HTTP surface of the product endpoints"""
from app.core.config import settings

PRODUCTS = f"{settings.API_V1_STR}/products"

TEA = {"itemName": "Tea", "sellPrice": "20", "type": "Beverage", "gstEnabled": "true"}


def _create(client, data=None, files=None):
    response = client.post(PRODUCTS, data=data or TEA, files=files)
    assert response.status_code == 201, response.text
    return response.json()["product"]


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_create_product(client):
    response = client.post(PRODUCTS, data=TEA)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Product created successfully"
    product = body["product"]
    assert product["itemName"] == "Tea"
    assert product["sellPrice"] == 20
    assert product["gstPercentage"] == 5
    assert product["gstAmount"] == 1.0
    assert product["totalPrice"] == 21.0
    assert product["image"] is None
    assert len(product["barcode"]) == 12
    assert product["id"] and product["createdAt"]


def test_create_ignores_client_derived_fields(client):
    product = _create(client, {**TEA, "totalPrice": "1", "barcode": "000000000001"})
    assert product["totalPrice"] == 21.0
    assert product["barcode"] != "000000000001"


def test_create_rejects_invalid_fields(client):
    response = client.post(PRODUCTS, data={"itemName": "  ", "sellPrice": "abc", "type": "Dessert"})

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"itemName", "sellPrice", "type"}
    assert client.get(PRODUCTS).json() == []


def test_create_with_image(client, png_bytes, storage):
    product = _create(client, files={"image": ("tea.png", png_bytes, "image/png")})

    assert product["image"].startswith("http://assets.test/product-images/products/")
    assert len(storage.objects) == 1


def test_create_rejects_non_image_upload(client, storage):
    response = client.post(PRODUCTS, data=TEA, files={"image": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Failed to create product",
        "details": "Only image files are allowed",
    }
    assert storage.objects == {}
    assert client.get(PRODUCTS).json() == []


def test_create_reports_upload_failure(client, png_bytes, storage):
    storage.fail_uploads = True
    response = client.post(PRODUCTS, data=TEA, files={"image": ("tea.png", png_bytes, "image/png")})

    assert response.status_code == 400
    assert response.json()["error"] == "Failed to create product"
    assert client.get(PRODUCTS).json() == []


def test_list_newest_first(client):
    for name in ("A", "B", "C"):
        _create(client, {**TEA, "itemName": name})

    response = client.get(PRODUCTS)
    assert response.status_code == 200
    assert [p["itemName"] for p in response.json()] == ["C", "B", "A"]


def test_get_product(client):
    created = _create(client)

    response = client.get(f"{PRODUCTS}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_product(client):
    response = client.get(f"{PRODUCTS}/12345")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_update_product(client):
    created = _create(client)

    response = client.put(
        f"{PRODUCTS}/{created['id']}",
        data={"sellPrice": "40", "type": "Beverage", "primaryUnit": "piece"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Product updated successfully"
    product = body["product"]
    assert product["itemName"] == "Tea"
    assert product["primaryUnit"] == "piece"
    assert product["gstAmount"] == 2.0
    assert product["totalPrice"] == 42.0
    assert product["barcode"] == created["barcode"]
    assert product["createdAt"] == created["createdAt"]


def test_update_replaces_image(client, png_bytes, storage):
    created = _create(client, files={"image": ("tea.png", png_bytes, "image/png")})
    old_asset = created["image"].split("/product-images/", 1)[1]

    response = client.put(
        f"{PRODUCTS}/{created['id']}",
        data={"sellPrice": "20", "type": "Beverage"},
        files={"image": ("tea2.png", png_bytes, "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["product"]["image"] != created["image"]
    assert storage.deleted == [old_asset]


def test_update_unknown_product(client):
    response = client.put(f"{PRODUCTS}/999", data={"sellPrice": "10", "type": "Veg"})
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_update_requires_sell_price(client):
    created = _create(client)

    response = client.put(f"{PRODUCTS}/{created['id']}", data={"type": "Veg"})

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["sellPrice"]
    assert client.get(f"{PRODUCTS}/{created['id']}").json() == created


def test_delete_product(client, png_bytes, storage):
    created = _create(client, files={"image": ("tea.png", png_bytes, "image/png")})

    response = client.delete(f"{PRODUCTS}/{created['id']}")

    assert response.status_code == 200
    assert response.json()["message"] == "Product deleted successfully"
    assert response.json()["product"]["id"] == created["id"]
    assert len(storage.deleted) == 1
    assert storage.objects == {}
    assert client.get(f"{PRODUCTS}/{created['id']}").status_code == 404


def test_delete_unknown_product(client):
    kept = _create(client)

    response = client.delete(f"{PRODUCTS}/424242")

    assert response.status_code == 404
    assert [p["id"] for p in client.get(PRODUCTS).json()] == [kept["id"]]


def test_create_rejects_price_above_limit(client):
    response = client.post(PRODUCTS, data={**TEA, "sellPrice": "1e26"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "sellPrice"
    assert response.json()["errors"][0]["msg"] == "Sell price must not exceed 1000000000"


def test_created_at_carries_utc_offset(client):
    created = _create(client)
    assert created["createdAt"].endswith("+00:00")
