"""YouTube Data API client."""

from edusync.services.youtube.client import (
    ChannelStats,
    VideoDetails,
    YouTubeAPIError,
    YouTubeClient,
    YouTubeConnectionError,
    YouTubeError,
    YouTubeResponseError,
    best_thumbnail,
    parse_duration,
)

__all__ = [
    "ChannelStats",
    "VideoDetails",
    "YouTubeAPIError",
    "YouTubeClient",
    "YouTubeConnectionError",
    "YouTubeError",
    "YouTubeResponseError",
    "best_thumbnail",
    "parse_duration",
]
