"""Tests for the HTTP client that loads the category collection."""

import httpx
import pytest

from app.core.errors import StoreError
from app.services.directory_client import DirectoryClient
from app.services.navigation import NavigationController


COLLECTION = {
    "categories": [
        {"id": "A", "name": "A", "type": "campus", "parent_id": None},
        {
            "id": "B",
            "name": "B",
            "type": "section",
            "parent_id": "A",
            "services": [{"id": "S1", "category_id": "B", "title": "Room booking"}],
        },
    ],
    "total": 2,
}


def client_for(handler) -> DirectoryClient:
    return DirectoryClient(
        base_url="http://directory.test/", transport=httpx.MockTransport(handler)
    )


@pytest.mark.unit
class TestDirectoryClient:
    @pytest.mark.asyncio
    async def test_fetch_collection(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json=COLLECTION)

        records = await client_for(handler).fetch_collection()

        assert [r.id for r in records] == ["A", "B"]
        assert records[1].services[0].title == "Room booking"
        assert seen["url"] == (
            "http://directory.test/api/categories/public?include_services=true"
        )

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = client_for(lambda request: httpx.Response(500))
        with pytest.raises(StoreError):
            await client.fetch_collection()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreError):
            await client_for(handler).fetch_collection()

    @pytest.mark.asyncio
    async def test_not_json(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(StoreError):
            await client.fetch_collection()

    @pytest.mark.asyncio
    async def test_missing_categories_key(self):
        client = client_for(lambda request: httpx.Response(200, json=[]))
        with pytest.raises(StoreError):
            await client.fetch_collection()

    @pytest.mark.asyncio
    async def test_invalid_row(self):
        payload = {"categories": [{"id": "A", "type": "building"}]}
        client = client_for(lambda request: httpx.Response(200, json=payload))
        with pytest.raises(StoreError):
            await client.fetch_collection()

    @pytest.mark.asyncio
    async def test_loads_navigation(self):
        controller = NavigationController()
        client = client_for(lambda request: httpx.Response(200, json=COLLECTION))

        assert await controller.refresh(client.fetch_collection) is True
        assert [c.id for c in controller.state.categories] == ["A"]
        assert controller.go_to("B").view.kind == "services"
