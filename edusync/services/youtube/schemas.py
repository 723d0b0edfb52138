"""Response models for the YouTube Data API v3 endpoints used by the sync.

Raw JSON is validated against these at the fetch boundary; anything the
sync reads is guaranteed to have the declared shape. Unknown fields are
ignored, numeric strings (the API sends counts as strings) are coerced.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class YouTubeModel(BaseModel):
    """Base model mapping snake_case attributes to the API's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Thumbnail(YouTubeModel):
    url: str
    width: int | None = None
    height: int | None = None


# channels.list
class ChannelSnippet(YouTubeModel):
    title: str = ""
    description: str = ""
    published_at: datetime | None = None
    country: str | None = None
    thumbnails: dict[str, Thumbnail] = Field(default_factory=dict)


class ChannelStatistics(YouTubeModel):
    view_count: int | None = None
    subscriber_count: int | None = None
    hidden_subscriber_count: bool = False
    video_count: int | None = None


class RelatedPlaylists(YouTubeModel):
    uploads: str | None = None


class ChannelContentDetails(YouTubeModel):
    related_playlists: RelatedPlaylists = Field(default_factory=RelatedPlaylists)


class ChannelItem(YouTubeModel):
    id: str
    snippet: ChannelSnippet | None = None
    statistics: ChannelStatistics | None = None
    content_details: ChannelContentDetails | None = None


class ChannelListResponse(YouTubeModel):
    items: list[ChannelItem] = Field(default_factory=list)


# playlistItems.list
class ResourceId(YouTubeModel):
    kind: str | None = None
    video_id: str | None = None


class PlaylistItemSnippet(YouTubeModel):
    published_at: datetime | None = None
    resource_id: ResourceId = Field(default_factory=ResourceId)


class PlaylistItemContentDetails(YouTubeModel):
    video_id: str | None = None
    video_published_at: datetime | None = None


class PlaylistItem(YouTubeModel):
    id: str | None = None
    snippet: PlaylistItemSnippet = Field(default_factory=PlaylistItemSnippet)
    content_details: PlaylistItemContentDetails = Field(default_factory=PlaylistItemContentDetails)

    @property
    def video_id(self) -> str | None:
        return self.content_details.video_id or self.snippet.resource_id.video_id

    @property
    def published_at(self) -> datetime | None:
        return self.content_details.video_published_at or self.snippet.published_at


class PlaylistItemListResponse(YouTubeModel):
    items: list[PlaylistItem] = Field(default_factory=list)
    next_page_token: str | None = None


# videos.list
class VideoSnippet(YouTubeModel):
    channel_id: str | None = None
    title: str = ""
    description: str = ""
    published_at: datetime | None = None
    tags: list[str] = Field(default_factory=list)
    category_id: str | None = None
    default_language: str | None = None
    default_audio_language: str | None = None
    thumbnails: dict[str, Thumbnail] = Field(default_factory=dict)


class VideoContentDetails(YouTubeModel):
    duration: str | None = None
    caption: str | None = None


class VideoStatistics(YouTubeModel):
    view_count: int | None = None
    like_count: int | None = None
    comment_count: int | None = None


class VideoItem(YouTubeModel):
    id: str
    snippet: VideoSnippet = Field(default_factory=VideoSnippet)
    content_details: VideoContentDetails = Field(default_factory=VideoContentDetails)
    statistics: VideoStatistics = Field(default_factory=VideoStatistics)


class VideoListResponse(YouTubeModel):
    items: list[VideoItem] = Field(default_factory=list)
