"""HTTP surface for products."""

from httpx import AsyncClient


async def _create(client: AsyncClient, body: dict) -> dict:
    response = await client.post("/api/products", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestProductsAPI:
    async def test_create_returns_camel_case(self, client, product_payload):
        data = await _create(client, product_payload)

        assert data["id"] > 0
        assert data["name"] == "Paracetamol 500mg"
        assert data["expirationDate"] == "2027-12-31"
        assert data["createdAt"]
        assert data["status"] in {"InStock", "Expiring"}

    async def test_create_validation_error(self, client, product_payload):
        response = await client.post("/api/products", json={**product_payload, "name": ""})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Name is required"
        assert body["error_code"] == "VALIDATION_ERROR"

    async def test_create_rejects_unknown_category(self, client, product_payload):
        response = await client.post(
            "/api/products", json={**product_payload, "category": "Snacks"}
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("category:")

    async def test_list_newest_first_with_status(self, client, product_payload):
        older = await _create(client, {**product_payload, "name": "Older", "quantity": 0})
        newer = await _create(client, {**product_payload, "name": "Newer", "quantity": 5})

        response = await client.get("/api/products")

        assert response.status_code == 200
        items = response.json()
        assert [p["id"] for p in items] == [newer["id"], older["id"]]
        assert items[0]["status"] == "LowStock"
        assert items[1]["status"] == "OutOfStock"

    async def test_get(self, client, product_payload):
        created = await _create(client, product_payload)

        response = await client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    async def test_get_missing(self, client):
        response = await client.get("/api/products/9999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    async def test_invalid_id(self, client):
        response = await client.get("/api/products/abc")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID"

    async def test_id_above_column_range(self, client):
        for method in ("get", "delete"):
            response = await getattr(client, method)("/api/products/18446744073709551616")
            assert response.status_code == 400
            assert response.json()["message"] == "Invalid ID"

        response = await client.put("/api/products/2147483648", json={"name": "Mask"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID"

    async def test_update_partial(self, client, product_payload):
        created = await _create(client, product_payload)

        response = await client.put(
            f"/api/products/{created['id']}", json={"supplier": "MedEquip"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["supplier"] == "MedEquip"
        assert data["name"] == created["name"]
        assert data["quantity"] == created["quantity"]
        assert data["createdAt"] == created["createdAt"]

    async def test_update_cannot_touch_quantity(self, client, product_payload):
        created = await _create(client, product_payload)

        response = await client.put(f"/api/products/{created['id']}", json={"quantity": 1})

        assert response.status_code == 400
        assert "stock movements" in response.json()["message"]

    async def test_update_empty_body(self, client, product_payload):
        created = await _create(client, product_payload)

        response = await client.put(f"/api/products/{created['id']}", json={})

        assert response.status_code == 400

    async def test_update_missing(self, client):
        response = await client.put("/api/products/9999", json={"name": "Nothing"})
        assert response.status_code == 404

    async def test_delete_without_history(self, client, product_payload):
        created = await _create(client, product_payload)

        response = await client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 204
        assert (await client.get(f"/api/products/{created['id']}")).status_code == 404

    async def test_delete_missing(self, client):
        response = await client.delete("/api/products/9999")
        assert response.status_code == 404

    async def test_delete_with_history_is_refused(self, client, product_payload):
        created = await _create(client, product_payload)
        await client.post(
            "/api/movements",
            json={"productId": created["id"], "type": "IN", "quantity": 3},
        )

        response = await client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "PRODUCT_HAS_MOVEMENTS"
        assert body["details"] == {"movements": 1}
        history = await client.get(f"/api/products/{created['id']}/movements")
        assert len(history.json()) == 1

    async def test_categories(self, client):
        response = await client.get("/api/categories")

        assert response.status_code == 200
        assert response.json() == [
            "Medications",
            "Surgical Materials",
            "PPE",
            "Dressing Materials",
            "Disposables",
            "Equipment",
        ]
