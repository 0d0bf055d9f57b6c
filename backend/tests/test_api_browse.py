"""Tests for the browse endpoint (server-side navigation views)."""

import pytest


def ids(items):
    return [item["id"] for item in items]


@pytest.mark.unit
class TestBrowseAPI:
    def test_top(self, client, directory):
        response = client.get("/api/browse")

        assert response.status_code == 200
        data = response.json()
        assert data["view"] == "top"
        assert data["current"] is None
        assert data["breadcrumb"] == []
        assert ids(data["categories"]) == [directory["A"].id, directory["C"].id]
        assert data["matching_services"] == []

    def test_campus(self, client, directory):
        data = client.get(f"/api/browse?category_id={directory['A'].id}").json()

        assert data["view"] == "campus"
        assert data["current"]["id"] == directory["A"].id
        assert ids(data["categories"]) == [directory["B"].id]
        assert ids(data["breadcrumb"]) == [directory["A"].id]

    def test_section_services(self, client, directory):
        data = client.get(f"/api/browse?category_id={directory['B'].id}").json()

        assert data["view"] == "services"
        assert ids(data["services"]) == [directory["S1"].id]
        assert [item["name"] for item in data["breadcrumb"]] == ["A", "B"]

    def test_unknown_category(self, client, directory):
        response = client.get("/api/browse?category_id=ghost")
        assert response.status_code == 404

    def test_search(self, client, directory):
        data = client.get("/api/browse?q=booking").json()

        assert ids(data["categories"]) == [directory["A"].id]
        assert [m["category_path"] for m in data["matching_services"]] == ["A > B"]

    def test_facet(self, client, directory):
        data = client.get("/api/browse?facet=general").json()
        assert ids(data["categories"]) == [directory["C"].id]

    def test_invalid_facet(self, client):
        response = client.get("/api/browse?facet=section")
        assert response.status_code == 400
        assert response.json()["reason"] == "invalid_facet"
