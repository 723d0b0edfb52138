"""CRUD operations for mirrored videos and their engagement history."""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from edusync.constants import YOUTUBE_WATCH_URL
from edusync.models.base import utcnow
from edusync.models.video import VideoEngagementSnapshot, YouTubeVideo
from edusync.services.youtube.client import VideoDetails

# Columns a re-sync overwrites; id, channel_id and created_at are kept
_UPSERT_COLUMNS = (
    "url",
    "title",
    "description",
    "tags",
    "category_id",
    "default_language",
    "duration",
    "duration_seconds",
    "thumbnail_url",
    "thumbnails",
    "has_captions",
    "view_count",
    "like_count",
    "comment_count",
    "published_at",
)


def _video_row(channel_id: str, video: VideoDetails) -> dict:
    return {
        "id": video.id,
        "channel_id": channel_id,
        "url": YOUTUBE_WATCH_URL.format(video_id=video.id),
        "title": video.title,
        "description": video.description,
        "tags": list(video.tags),
        "category_id": video.category_id,
        "default_language": video.default_language,
        "duration": video.duration,
        "duration_seconds": video.duration_seconds,
        "thumbnail_url": video.thumbnail_url,
        "thumbnails": dict(video.thumbnails),
        "has_captions": video.has_captions,
        "view_count": video.view_count,
        "like_count": video.like_count,
        "comment_count": video.comment_count,
        "published_at": video.published_at,
    }


async def upsert_videos(
    db: AsyncSession,
    channel_id: str,
    videos: Sequence[VideoDetails],
) -> int:
    """Insert or overwrite one row per video and append one engagement snapshot each.

    Video rows are written with a single ``INSERT ... ON CONFLICT (id) DO
    UPDATE``, so overlapping syncs of the same video both succeed and the
    row count stays unchanged; snapshots are appended on every call.

    Returns:
        Number of videos written
    """
    # One row per id; ON CONFLICT cannot touch the same row twice in a statement
    videos = list({video.id: video for video in videos}.values())
    if not videos:
        return 0

    insert = postgresql.insert if db.bind.dialect.name == "postgresql" else sqlite.insert
    stmt = insert(YouTubeVideo).values([_video_row(channel_id, video) for video in videos])
    stmt = stmt.on_conflict_do_update(
        index_elements=[YouTubeVideo.id],
        set_={
            **{column: stmt.excluded[column] for column in _UPSERT_COLUMNS},
            "updated_at": utcnow(),
        },
    )
    await db.execute(stmt)

    db.add_all(
        VideoEngagementSnapshot(
            video_id=video.id,
            view_count=video.view_count,
            like_count=video.like_count,
            comment_count=video.comment_count,
        )
        for video in videos
    )
    await db.commit()
    return len(videos)


async def get_channel_videos(db: AsyncSession, channel_id: str) -> Sequence[YouTubeVideo]:
    result = await db.execute(
        select(YouTubeVideo)
        .where(YouTubeVideo.channel_id == channel_id)
        .order_by(YouTubeVideo.published_at.desc())
    )
    return result.scalars().all()


async def get_engagement_history(db: AsyncSession, video_id: str) -> Sequence[VideoEngagementSnapshot]:
    result = await db.execute(
        select(VideoEngagementSnapshot)
        .where(VideoEngagementSnapshot.video_id == video_id)
        .order_by(VideoEngagementSnapshot.id)
    )
    return result.scalars().all()


async def count_channel_videos(db: AsyncSession, channel_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(YouTubeVideo).where(YouTubeVideo.channel_id == channel_id)
    )
    return result.scalar_one()
