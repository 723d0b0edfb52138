"""YouTube Data API v3 client for the educator sync.

Every call is a single request: no retry, no rate limiting and no paging
beyond the first page. Failures surface as ``YouTubeError`` subclasses and
are handled by the caller.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from edusync.constants import (
    THUMBNAIL_QUALITY_ORDER,
    YOUTUBE_API_BASE_URL,
    YOUTUBE_MAX_RESULTS,
    YOUTUBE_QUOTA_PER_LIST_CALL,
)
from edusync.services.youtube.schemas import (
    ChannelListResponse,
    PlaylistItemListResponse,
    Thumbnail,
    VideoItem,
    VideoListResponse,
    YouTubeModel,
)
from edusync.utils.http_client import get_youtube_client
from edusync.utils.metrics import metrics

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=YouTubeModel)

_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


class YouTubeError(Exception):
    """Base exception for YouTube Data API errors."""


class YouTubeAPIError(YouTubeError):
    """The API answered with an error status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class YouTubeConnectionError(YouTubeError):
    """The request never got an answer (connection failure, timeout)."""


class YouTubeResponseError(YouTubeError):
    """The API answered, but not with what the sync needs."""


@dataclass
class ChannelStats:
    """Aggregate channel metrics."""

    channel_id: str
    title: str
    subscriber_count: int | None
    view_count: int | None
    video_count: int | None
    country: str | None
    joined_at: datetime | None
    avatar_url: str | None = None


@dataclass
class VideoDetails:
    """Full metadata and statistics of one video."""

    id: str
    channel_id: str | None
    title: str
    description: str
    published_at: datetime | None
    duration: str | None
    duration_seconds: int | None
    tags: list[str] = field(default_factory=list)
    category_id: str | None = None
    default_language: str | None = None
    thumbnail_url: str | None = None
    thumbnails: dict[str, str] = field(default_factory=dict)
    view_count: int | None = None
    like_count: int | None = None
    comment_count: int | None = None
    has_captions: bool = False


def parse_duration(duration: str | None) -> int | None:
    """Convert an ISO 8601 duration (PT1H2M3S, P1DT2H) to seconds."""
    if not duration:
        return None
    match = _DURATION_RE.match(duration)
    if not match:
        return None
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def best_thumbnail(thumbnails: dict[str, Thumbnail]) -> str | None:
    """Get the best quality thumbnail URL."""
    for quality in THUMBNAIL_QUALITY_ORDER:
        if quality in thumbnails:
            return thumbnails[quality].url
    return None


class YouTubeClient:
    """API-key authenticated client for the channels, playlistItems and videos endpoints.

    ``quota_used`` counts the quota units spent by this instance, so one
    instance per educator attempt gives the per-attempt figure.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = YOUTUBE_API_BASE_URL,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = http_client
        self.quota_used = 0

    async def _get(
        self,
        endpoint: str,
        params: dict[str, Any],
        response_model: type[ResponseT],
    ) -> ResponseT:
        """GET an endpoint and validate the payload.

        Raises:
            YouTubeConnectionError: On transport errors
            YouTubeAPIError: On non-2xx responses
            YouTubeResponseError: On payloads that fail validation
        """
        client = self._http or get_youtube_client()
        try:
            response = await client.get(
                f"{self.base_url}/{endpoint}",
                params={**params, "key": self.api_key},
            )
        except httpx.TransportError as e:
            metrics.youtube_api_requests_total.inc(endpoint=endpoint, status="error")
            raise YouTubeConnectionError(f"YouTube {endpoint} request failed: {e}") from e

        self.quota_used += YOUTUBE_QUOTA_PER_LIST_CALL
        metrics.youtube_quota_units_total.inc(YOUTUBE_QUOTA_PER_LIST_CALL)
        metrics.youtube_api_requests_total.inc(endpoint=endpoint, status=str(response.status_code))

        if response.status_code >= 400:
            raise YouTubeAPIError(
                f"YouTube {endpoint} error {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response_model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise YouTubeResponseError(f"Unexpected YouTube {endpoint} response: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.text[:200]

    # ==================== Channels ====================

    async def get_channel_stats(self, channel_id: str) -> ChannelStats:
        """Fetch subscriber/view/video counts, country and join date of a channel."""
        data = await self._get(
            "channels",
            {"part": "snippet,statistics", "id": channel_id},
            ChannelListResponse,
        )
        if not data.items or data.items[0].statistics is None:
            raise YouTubeResponseError(f"Channel not found: {channel_id}")

        item = data.items[0]
        snippet = item.snippet
        statistics = item.statistics
        return ChannelStats(
            channel_id=item.id,
            title=snippet.title if snippet else "",
            subscriber_count=None if statistics.hidden_subscriber_count else statistics.subscriber_count,
            view_count=statistics.view_count,
            video_count=statistics.video_count,
            country=snippet.country if snippet else None,
            joined_at=snippet.published_at if snippet else None,
            avatar_url=best_thumbnail(snippet.thumbnails) if snippet else None,
        )

    async def get_uploads_playlist_id(self, channel_id: str) -> str:
        """Resolve the channel's uploads playlist."""
        data = await self._get(
            "channels",
            {"part": "contentDetails", "id": channel_id},
            ChannelListResponse,
        )
        uploads = None
        if data.items and data.items[0].content_details:
            uploads = data.items[0].content_details.related_playlists.uploads

        if not uploads:
            logger.error(f"Could not find uploads playlist for channel: {channel_id}")
            raise YouTubeResponseError("Could not find uploads playlist for channel")
        return uploads

    # ==================== Playlist items ====================

    async def list_uploads_since(
        self,
        playlist_id: str,
        published_after: datetime | None = None,
    ) -> list[str]:
        """List video ids in the uploads playlist published after the watermark.

        Only the first page (up to 50 items) is read. With no watermark every
        item on that page is returned.
        """
        data = await self._get(
            "playlistItems",
            {
                "part": "snippet,contentDetails",
                "playlistId": playlist_id,
                "maxResults": YOUTUBE_MAX_RESULTS,
            },
            PlaylistItemListResponse,
        )

        video_ids: list[str] = []
        for item in data.items:
            video_id = item.video_id
            if not video_id or video_id in video_ids:
                continue
            if published_after is not None:
                if item.published_at is None or item.published_at <= published_after:
                    continue
            video_ids.append(video_id)

        if data.next_page_token and video_ids and len(video_ids) == len(data.items):
            # Every item on the page is new, so older new uploads may sit on page two
            logger.warning(
                f"Playlist {playlist_id}: first page is entirely new uploads, later pages are not read"
            )
        return video_ids

    # ==================== Videos ====================

    async def get_video_details(self, video_ids: list[str]) -> list[VideoDetails]:
        """Fetch snippet, content details and statistics for the given ids."""
        details: list[VideoDetails] = []
        for i in range(0, len(video_ids), YOUTUBE_MAX_RESULTS):
            batch = video_ids[i:i + YOUTUBE_MAX_RESULTS]
            data = await self._get(
                "videos",
                {"part": "snippet,contentDetails,statistics", "id": ",".join(batch)},
                VideoListResponse,
            )
            details.extend(self._to_video_details(item) for item in data.items)
        return details

    @staticmethod
    def _to_video_details(item: VideoItem) -> VideoDetails:
        snippet = item.snippet
        return VideoDetails(
            id=item.id,
            channel_id=snippet.channel_id,
            title=snippet.title,
            description=snippet.description,
            published_at=snippet.published_at,
            duration=item.content_details.duration,
            duration_seconds=parse_duration(item.content_details.duration),
            tags=snippet.tags,
            category_id=snippet.category_id,
            default_language=snippet.default_language or snippet.default_audio_language,
            thumbnail_url=best_thumbnail(snippet.thumbnails),
            thumbnails={quality: thumb.url for quality, thumb in snippet.thumbnails.items()},
            view_count=item.statistics.view_count,
            like_count=item.statistics.like_count,
            comment_count=item.statistics.comment_count,
            has_captions=item.content_details.caption == "true",
        )
