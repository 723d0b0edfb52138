"""Pytest configuration and fixtures."""

import os

# Settings are read at import time by edusync.db and edusync.main
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("YOUTUBE_API_KEY", "test-api-key")
os.environ.setdefault("RESEND_API_KEY", "")

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from edusync.config import SyncConfig
from edusync.db.database import get_db
from edusync.main import app
from edusync.models.base import Base
from edusync.models.educator import EducationCreator, SyncStatus
from edusync.services.youtube.client import YouTubeClient


# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeYouTubeAPI:
    """In-memory YouTube Data API v3 served through ``httpx.MockTransport``.

    Channels get an uploads playlist ``UU<channel suffix>``; videos are
    listed newest first like the real uploads playlist.
    """

    def __init__(self) -> None:
        self.channels: dict[str, dict] = {}
        self.playlists: dict[str, list[str]] = {}
        self.videos: dict[str, dict] = {}
        self.failing_channels: set[str] = set()
        self.next_page_token: str | None = None
        self.requests: list[httpx.Request] = []

    def add_channel(
        self,
        channel_id: str,
        title: str = "Test Channel",
        subscribers: int = 1000,
        views: int = 50000,
        video_count: int = 10,
    ) -> str:
        playlist_id = f"UU{channel_id[2:]}"
        self.channels[channel_id] = {
            "id": channel_id,
            "snippet": {
                "title": title,
                "publishedAt": "2015-03-01T00:00:00Z",
                "country": "GB",
                "thumbnails": {"high": {"url": f"https://yt3.example/{channel_id}.jpg"}},
            },
            "statistics": {
                "viewCount": str(views),
                "subscriberCount": str(subscribers),
                "hiddenSubscriberCount": False,
                "videoCount": str(video_count),
            },
            "contentDetails": {"relatedPlaylists": {"uploads": playlist_id}},
        }
        self.playlists[playlist_id] = []
        return playlist_id

    def add_video(
        self,
        channel_id: str,
        video_id: str,
        published_at: datetime,
        views: int = 100,
        likes: int = 10,
        comments: int = 1,
    ) -> None:
        published = published_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        self.playlists[f"UU{channel_id[2:]}"].insert(0, video_id)
        self.videos[video_id] = {
            "id": video_id,
            "snippet": {
                "channelId": channel_id,
                "title": f"Lesson {video_id}",
                "description": "A lesson",
                "publishedAt": published,
                "tags": ["education"],
                "categoryId": "27",
                "defaultAudioLanguage": "en",
                "thumbnails": {
                    "default": {"url": f"https://i.ytimg.example/{video_id}/default.jpg"},
                    "high": {"url": f"https://i.ytimg.example/{video_id}/hq.jpg"},
                },
            },
            "contentDetails": {"duration": "PT12M30S", "caption": "true"},
            "statistics": {
                "viewCount": str(views),
                "likeCount": str(likes),
                "commentCount": str(comments),
            },
        }

    def fail_video_details(self, channel_id: str) -> None:
        """Make videos.list answer 500 whenever it is asked for this channel's videos."""
        self.failing_channels.add(channel_id)

    def endpoint_calls(self, endpoint: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(f"/{endpoint}"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        params = request.url.params

        if endpoint == "channels":
            channel = self.channels.get(params["id"])
            return httpx.Response(200, json={"items": [channel] if channel else []})

        if endpoint == "playlistItems":
            items = [
                {
                    "snippet": {
                        "publishedAt": self.videos[video_id]["snippet"]["publishedAt"],
                        "resourceId": {"kind": "youtube#video", "videoId": video_id},
                    },
                    "contentDetails": {
                        "videoId": video_id,
                        "videoPublishedAt": self.videos[video_id]["snippet"]["publishedAt"],
                    },
                }
                for video_id in self.playlists.get(params["playlistId"], [])[: int(params["maxResults"])]
            ]
            body = {"items": items}
            if self.next_page_token:
                body["nextPageToken"] = self.next_page_token
            return httpx.Response(200, json=body)

        if endpoint == "videos":
            ids = params["id"].split(",")
            found = [self.videos[i] for i in ids if i in self.videos]
            if any(v["snippet"]["channelId"] in self.failing_channels for v in found):
                return httpx.Response(500, json={"error": {"message": "Backend Error"}})
            return httpx.Response(200, json={"items": found})

        return httpx.Response(404, json={"error": {"message": "Not Found"}})

    def client(self) -> YouTubeClient:
        return YouTubeClient(
            "test-api-key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a fresh in-memory database."""
    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def youtube_api() -> FakeYouTubeAPI:
    return FakeYouTubeAPI()


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(platform_api_key="test-api-key", store_url=TEST_DATABASE_URL)


@pytest_asyncio.fixture
async def make_educator(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[..., EducationCreator]:
    """Factory inserting an educator in its own committed session."""

    async def _make(
        channel_id: str,
        name: str | None = None,
        sync_status: SyncStatus = SyncStatus.PENDING,
        last_synced_at: datetime | None = None,
    ) -> EducationCreator:
        name = name or f"Educator {channel_id}"
        async with session_maker() as db:
            educator = EducationCreator(
                channel_id=channel_id,
                name=name,
                slug=name.lower().replace(" ", "-"),
                sync_status=sync_status,
                last_synced_at=last_synced_at,
            )
            db.add(educator)
            await db.commit()
            return educator

    return _make


@pytest_asyncio.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
