"""Integration tests for items endpoints.

This module covers listing creation, the catalogue filters, the featured
shelf and single item lookups through the HTTP API.
"""

from fastapi.testclient import TestClient

from rewear_api.models.item import ItemStatus


class TestCreateItem:
    """Integration tests for POST /api/items."""

    def test_create_item_success(self, client: TestClient, owner, headers_for, db_state_checker):
        """Test a new listing is stored pending with the caller as owner."""
        payload = {
            "title": "Wool Coat",
            "description": "Warm winter coat",
            "category": "Outerwear",
            "size": "L",
            "condition": "Good",
            "brand": "COS",
            "point_value": 40,
            "tags": ["wool", "winter"],
            "images": ["https://images.example.com/coat.jpg"],
        }

        response = client.post("/api/items", json=payload, headers=headers_for(owner))

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == owner.id
        assert data["status"] == "pending"
        assert data["is_available"] is True
        assert data["tags"] == ["wool", "winter"]
        assert db_state_checker.item(data["id"]).title == "Wool Coat"

    def test_create_item_requires_authentication(self, client: TestClient):
        response = client.post(
            "/api/items",
            json={"title": "Coat", "category": "Outerwear", "size": "L", "condition": "Good", "point_value": 5},
        )

        assert response.status_code == 401

    def test_create_item_validation_error(self, client: TestClient, owner, headers_for):
        """Test invalid listings are rejected with field details."""
        payload = {
            "title": "   ",
            "category": "Outerwear",
            "size": "L",
            "condition": "Good",
            "point_value": 0,
        }

        response = client.post("/api/items", json=payload, headers=headers_for(owner))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        fields = {entry["field"] for entry in error["details"]["validation_errors"]}
        assert "body -> title" in fields
        assert "body -> point_value" in fields

    def test_create_item_rejects_bad_image_url(self, client: TestClient, owner, headers_for):
        payload = {
            "title": "Coat",
            "category": "Outerwear",
            "size": "L",
            "condition": "Good",
            "point_value": 5,
            "images": ["ftp://images.example.com/coat.jpg"],
        }

        response = client.post("/api/items", json=payload, headers=headers_for(owner))

        assert response.status_code == 400


class TestListItems:
    """Integration tests for GET /api/items."""

    def test_defaults_to_approved(self, client: TestClient, factory, owner):
        factory.create_item(owner, title="Listed")
        factory.create_item(owner, title="Waiting", status=ItemStatus.PENDING)

        response = client.get("/api/items")

        assert response.status_code == 200
        data = response.json()
        assert [item["title"] for item in data] == ["Listed"]
        assert data[0]["user"]["id"] == owner.id
        assert "email" not in data[0]["user"]

    def test_status_filter(self, client: TestClient, factory, owner):
        factory.create_item(owner, title="Listed")
        factory.create_item(owner, title="Waiting", status=ItemStatus.PENDING)

        response = client.get("/api/items", params={"status": "pending"})

        assert [item["title"] for item in response.json()] == ["Waiting"]

    def test_search_and_category(self, client: TestClient, factory, owner):
        factory.create_item(owner, title="Denim Jacket", category="Outerwear")
        factory.create_item(owner, title="Denim Skirt", category="Bottoms", brand=None)
        factory.create_item(owner, title="Silk Scarf", category="Accessories", description=None, brand=None)

        by_search = client.get("/api/items", params={"search": "DENIM"}).json()
        by_both = client.get("/api/items", params={"search": "denim", "category": "Bottoms"}).json()

        assert {item["title"] for item in by_search} == {"Denim Jacket", "Denim Skirt"}
        assert [item["title"] for item in by_both] == ["Denim Skirt"]

    def test_limit_and_order(self, client: TestClient, factory, owner):
        for title in ("Oldest", "Middle", "Newest"):
            factory.create_item(owner, title=title)

        response = client.get("/api/items", params={"limit": 2})

        assert [item["title"] for item in response.json()] == ["Newest", "Middle"]

    def test_large_limit_is_accepted(self, client: TestClient, factory, owner):
        factory.create_item(owner)

        response = client.get("/api/items", params={"limit": 500})

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_invalid_status(self, client: TestClient):
        response = client.get("/api/items", params={"status": "archived"})

        assert response.status_code == 400


class TestFeaturedAndSingleItem:
    """Integration tests for GET /api/items/featured and /api/items/{id}."""

    def test_featured(self, client: TestClient, factory, owner):
        for index in range(8):
            factory.create_item(owner, title=f"Item {index}")

        response = client.get("/api/items/featured")

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()]
        assert titles == [f"Item {index}" for index in range(7, 1, -1)]

    def test_get_item(self, client: TestClient, approved_item, owner):
        response = client.get(f"/api/items/{approved_item.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == approved_item.id
        assert data["point_value"] == 50
        assert data["user"]["first_name"] == owner.first_name

    def test_get_item_not_found(self, client: TestClient):
        response = client.get("/api/items/9999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found_error"

    def test_get_item_invalid_id(self, client: TestClient):
        response = client.get("/api/items/not-a-number")

        assert response.status_code == 400
