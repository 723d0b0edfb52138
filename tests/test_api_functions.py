"""Tests for the function endpoints."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from edusync.api.functions import get_notification_service, get_sync_service
from edusync.config import Settings
from edusync.main import app
from edusync.services.educators import EducatorSyncService
from edusync.services.notifications import EmailNotificationService

CORS_ORIGIN = "Access-Control-Allow-Origin"
CORS_HEADERS = "Access-Control-Allow-Headers"


@pytest.fixture
def use_sync_service(session_maker, youtube_api, sync_config):
    """Route the sync function to the test database and fake YouTube API."""
    app.dependency_overrides[get_sync_service] = lambda: EducatorSyncService(
        sync_config, session_maker, youtube_factory=youtube_api.client
    )


@pytest.fixture
def use_logging_email():
    app.dependency_overrides[get_notification_service] = lambda: EmailNotificationService(
        Settings(resend_api_key="")
    )


class TestSyncEducatorVideos:
    """Tests for /functions/sync-educator-videos."""

    @pytest.mark.asyncio
    async def test_preflight(self, client: AsyncClient):
        response = await client.options("/functions/sync-educator-videos")

        assert response.status_code == 200
        assert response.headers[CORS_ORIGIN] == "*"
        assert response.headers[CORS_HEADERS] == "authorization, x-client-info, apikey, content-type"

    @pytest.mark.asyncio
    async def test_runs_batch(self, client: AsyncClient, use_sync_service, make_educator, youtube_api):
        await make_educator("UCmaths")
        await make_educator("UCphys")
        youtube_api.add_channel("UCmaths")
        youtube_api.add_video("UCmaths", "math1", datetime(2026, 1, 1, tzinfo=UTC))
        youtube_api.fail_video_details("UCmaths")
        # UCphys is unknown to the API and fails as well

        response = await client.post("/functions/sync-educator-videos")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Processed 2 educators"}
        assert response.headers[CORS_ORIGIN] == "*"

    @pytest.mark.asyncio
    async def test_nothing_to_do(self, client: AsyncClient, use_sync_service):
        response = await client.post("/functions/sync-educator-videos")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Processed 0 educators"}

    @pytest.mark.asyncio
    async def test_selection_failure(self, client: AsyncClient, use_sync_service):
        with patch(
            "edusync.services.educators.sync.get_educators_due_for_sync",
            AsyncMock(side_effect=RuntimeError("connection refused")),
        ):
            response = await client.post("/functions/sync-educator-videos")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "connection refused"}
        assert response.headers[CORS_ORIGIN] == "*"


class TestPartnerApplicationNotification:
    """Tests for /functions/partner-application-notification."""

    @pytest.mark.asyncio
    async def test_preflight(self, client: AsyncClient):
        response = await client.options("/functions/partner-application-notification")

        assert response.status_code == 200
        assert response.headers[CORS_ORIGIN] == "*"

    @pytest.mark.asyncio
    async def test_sends_notification(self, client: AsyncClient, use_logging_email):
        response = await client.post(
            "/functions/partner-application-notification",
            json={"to": "ada@example.com", "template": "application_received", "data": {"name": "Ada"}},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Email notification sent successfully"}
        assert response.headers[CORS_ORIGIN] == "*"

    @pytest.mark.asyncio
    async def test_unknown_template(self, client: AsyncClient, use_logging_email):
        response = await client.post(
            "/functions/partner-application-notification",
            json={"to": "ada@example.com", "template": "newsletter", "data": {}},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Unknown email template: newsletter"}

    @pytest.mark.asyncio
    async def test_malformed_body(self, client: AsyncClient, use_logging_email):
        response = await client.post(
            "/functions/partner-application-notification",
            json={"template": "application_received"},
        )

        assert response.status_code == 422
