"""Tests for the educator operator endpoints."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient

from edusync.db.crud import create_sync_history
from edusync.models import SyncStatus
from edusync.models.base import utcnow


class TestEducatorEndpoints:
    """Tests for /api/educators."""

    @pytest.mark.asyncio
    async def test_list_educators(self, client: AsyncClient, make_educator):
        await make_educator("UCmaths", name="Maths Hub")
        await make_educator("UCart", name="Art School", sync_status=SyncStatus.FAILED)

        response = await client.get("/api/educators")

        assert response.status_code == 200
        data = response.json()
        assert [e["name"] for e in data] == ["Art School", "Maths Hub"]
        assert data[0]["sync_status"] == "failed"
        assert data[1]["sync_status"] == "pending"

    @pytest.mark.asyncio
    async def test_sync_history(self, client: AsyncClient, make_educator, session_maker):
        educator = await make_educator("UCmaths")
        async with session_maker() as db:
            await create_sync_history(db, educator.id, utcnow() - timedelta(hours=2))
            await create_sync_history(db, educator.id, utcnow())

        response = await client.get(f"/api/educators/{educator.id}/sync-history?limit=1")

        assert response.status_code == 200
        [row] = response.json()
        assert row["status"] == "running"
        assert row["creator_id"] == str(educator.id)

    @pytest.mark.asyncio
    async def test_sync_history_unknown_educator(self, client: AsyncClient):
        response = await client.get(f"/api/educators/{uuid.uuid4()}/sync-history")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_resync(self, client: AsyncClient, make_educator):
        educator = await make_educator("UCmaths", sync_status=SyncStatus.FAILED)

        response = await client.post(f"/api/educators/{educator.id}/resync")

        assert response.status_code == 200
        assert response.json()["sync_status"] == "pending"

    @pytest.mark.asyncio
    async def test_resync_recovers_stuck_in_progress(self, client: AsyncClient, make_educator):
        educator = await make_educator("UCmaths", sync_status=SyncStatus.IN_PROGRESS)

        response = await client.post(f"/api/educators/{educator.id}/resync")

        assert response.status_code == 200
        assert response.json()["sync_status"] == "pending"

    @pytest.mark.asyncio
    async def test_resync_unknown_educator(self, client: AsyncClient):
        response = await client.post(f"/api/educators/{uuid.uuid4()}/resync")

        assert response.status_code == 404
