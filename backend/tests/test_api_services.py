"""Tests for services API endpoints."""

import pytest


def titles(items):
    return [item["title"] for item in items]


@pytest.mark.unit
class TestServiceAdminAPI:
    def test_requires_auth(self, client, directory):
        response = client.post(
            "/api/services/",
            json={"category_id": directory["B"].id, "title": "X"},
        )
        assert response.status_code == 401

    def test_create(self, client, admin_headers, directory):
        response = client.post(
            "/api/services/",
            json={
                "category_id": directory["B"].id,
                "title": " Printing ",
                "description": "  ",
                "tags": ["print", " ", "copy "],
                "href": "https://example.com/print",
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Printing"
        assert data["description"] is None
        assert data["tags"] == ["print", "copy"]
        assert data["status"] == "active"

    def test_create_invalid_url(self, client, admin_headers, directory):
        response = client.post(
            "/api/services/",
            json={"category_id": directory["B"].id, "title": "X", "href": "not-a-url"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "invalid_url"

    def test_create_missing_title(self, client, admin_headers, directory):
        response = client.post(
            "/api/services/",
            json={"category_id": directory["B"].id},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "missing_title"

    def test_create_unknown_category(self, client, admin_headers):
        response = client.post(
            "/api/services/",
            json={"category_id": "ghost", "title": "X"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "category_not_found"

    def test_create_invalid_status(self, client, admin_headers, directory):
        response = client.post(
            "/api/services/",
            json={"category_id": directory["B"].id, "title": "X", "status": "retired"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "invalid_status"

    def test_update(self, client, admin_headers, directory):
        response = client.put(
            f"/api/services/{directory['S1'].id}",
            json={"status": "maintenance", "tags": ["rooms"]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "maintenance"
        assert data["tags"] == ["rooms"]
        assert data["title"] == "Room booking"

    def test_update_blank_title(self, client, admin_headers, directory):
        response = client.put(
            f"/api/services/{directory['S1'].id}",
            json={"title": ""},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_update_unknown(self, client, admin_headers):
        response = client.put(
            "/api/services/ghost", json={"title": "X"}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_delete(self, client, admin_headers, directory):
        response = client.delete(
            f"/api/services/{directory['S2'].id}", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Service deleted successfully"

        response = client.delete(
            f"/api/services/{directory['S2'].id}", headers=admin_headers
        )
        assert response.status_code == 404

    def test_admin_list_includes_inactive(self, admin_client, directory):
        admin_client.put(
            f"/api/services/{directory['S2'].id}", json={"status": "coming-soon"}
        )
        data = admin_client.get("/api/services/").json()

        assert data["total"] == 2
        assert data["limit"] == 50
        assert data["offset"] == 0


@pytest.mark.unit
class TestServicePublicAPI:
    def test_lists_active_only(self, client, admin_headers, directory):
        client.put(
            f"/api/services/{directory['S2'].id}",
            json={"status": "maintenance"},
            headers=admin_headers,
        )
        data = client.get("/api/services/public").json()

        assert titles(data["items"]) == ["Room booking"]
        assert data["total"] == 1

    def test_search(self, client, directory):
        data = client.get("/api/services/public?search=ROOM").json()
        assert titles(data["items"]) == ["Room booking"]

    def test_search_treats_wildcards_literally(self, client, admin_headers, directory):
        for title in ("50% off printing", "500 prints", "Lab_2 access", "Lab12 access"):
            client.post(
                "/api/services/",
                json={"category_id": directory["B"].id, "title": title},
                headers=admin_headers,
            )

        data = client.get("/api/services/public", params={"search": "50%"}).json()
        assert titles(data["items"]) == ["50% off printing"]

        data = client.get("/api/services/public", params={"search": "lab_"}).json()
        assert titles(data["items"]) == ["Lab_2 access"]

        data = client.get("/api/services/public", params={"search": "%"}).json()
        assert titles(data["items"]) == ["50% off printing"]

    def test_category_filter(self, client, directory):
        data = client.get(f"/api/services/public?category={directory['C'].id}").json()
        assert titles(data["items"]) == ["Wellbeing hotline"]

    def test_tags_any_of(self, client, directory):
        data = client.get("/api/services/public?tags=health,unknown").json()
        assert titles(data["items"]) == ["Wellbeing hotline"]

        data = client.get("/api/services/public?tags=health,study").json()
        assert data["total"] == 2

    def test_sort_by_title(self, client, directory):
        data = client.get("/api/services/public?sort=title").json()
        assert titles(data["items"]) == ["Room booking", "Wellbeing hotline"]

    def test_pagination(self, client, directory):
        data = client.get("/api/services/public?sort=title&page=2&limit=1").json()

        assert data["page"] == 2
        assert data["limit"] == 1
        assert data["total"] == 2
        assert titles(data["items"]) == ["Wellbeing hotline"]

    def test_limit_is_bounded(self, client):
        response = client.get("/api/services/public?limit=1000")
        assert response.status_code == 422
