"""Unit tests for the solution endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestSolutionEndpoints:
    async def test_val(self, client: AsyncClient):
        response = await client.get("/problems/solutions/val")

        assert response.status_code == 200
        assert response.json()["renamedTo"] == "Alice Renamed"

    async def test_immutable_collections(self, client: AsyncClient):
        response = await client.get("/problems/solutions/immutable-collections")

        assert response.status_code == 200
        body = response.json()
        assert body["declaredReadOnly"] is False
        assert body["isInstrumentedCollection"] is True

    async def test_data_class(self, client: AsyncClient):
        response = await client.get("/problems/solutions/data-class")

        assert response.status_code == 200
        assert response.json()["setContainsAfter"] is True

    async def test_all(self, client: AsyncClient):
        response = await client.get("/problems/solutions/all")

        assert response.status_code == 200
        assert set(response.json()) == {"solution1", "solution2", "solution3"}
