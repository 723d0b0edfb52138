"""CRUD operations for education creators."""

import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edusync.models.base import as_utc
from edusync.models.educator import EducationCreator, SyncStatus
from edusync.models.video import YouTubeVideo
from edusync.services.youtube.client import ChannelStats


async def get_educators_due_for_sync(
    db: AsyncSession,
    batch_size: int,
    stale_before: datetime,
) -> Sequence[EducationCreator]:
    """Select the next batch of educators to sync.

    Pending educators and educators whose watermark is older than
    ``stale_before`` qualify; the least recently synced come first and
    never-synced ones lead.
    """
    query = (
        select(EducationCreator)
        .where(
            or_(
                EducationCreator.sync_status == SyncStatus.PENDING,
                EducationCreator.last_synced_at < stale_before,
            )
        )
        .order_by(EducationCreator.last_synced_at.asc().nulls_first(), EducationCreator.created_at)
        .limit(batch_size)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def get_educator(db: AsyncSession, educator_id: uuid.UUID) -> EducationCreator | None:
    return await db.get(EducationCreator, educator_id)


async def list_educators(db: AsyncSession) -> Sequence[EducationCreator]:
    result = await db.execute(select(EducationCreator).order_by(EducationCreator.name))
    return result.scalars().all()


async def mark_sync_started(db: AsyncSession, educator: EducationCreator, started_at: datetime) -> None:
    educator.sync_status = SyncStatus.IN_PROGRESS
    educator.sync_started_at = started_at
    await db.commit()


async def update_channel_stats(
    db: AsyncSession,
    educator: EducationCreator,
    stats: ChannelStats,
    recorded_at: datetime,
) -> None:
    """Overwrite the aggregate channel columns and append to the subscriber history."""
    educator.number_of_subscribers = stats.subscriber_count
    educator.total_view_count = stats.view_count
    educator.total_video_count = stats.video_count
    educator.country = stats.country
    educator.channel_joined_at = stats.joined_at
    if stats.avatar_url and not educator.channel_avatar_url:
        educator.channel_avatar_url = stats.avatar_url
    # Reassign so the JSON column is flagged dirty
    educator.subscriber_history = [
        *(educator.subscriber_history or []),
        {"recorded_at": recorded_at.isoformat(), "subscriber_count": stats.subscriber_count},
    ]
    await db.commit()


async def refresh_upload_cadence(db: AsyncSession, educator: EducationCreator) -> float | None:
    """Recompute the average number of days between the educator's uploads.

    Returns None (and stores None) when fewer than two dated videos are known.
    """
    result = await db.execute(
        select(YouTubeVideo.published_at)
        .where(
            YouTubeVideo.channel_id == educator.channel_id,
            YouTubeVideo.published_at.isnot(None),
        )
        .order_by(YouTubeVideo.published_at)
    )
    published = [as_utc(row[0]) for row in result.all()]

    cadence = None
    if len(published) >= 2:
        span_days = (published[-1] - published[0]).total_seconds() / 86400
        cadence = round(span_days / (len(published) - 1), 2)

    educator.avg_upload_frequency_days = cadence
    await db.commit()
    return cadence


async def mark_sync_completed(
    db: AsyncSession,
    educator: EducationCreator,
    watermark: datetime,
    completed_at: datetime,
) -> None:
    educator.sync_status = SyncStatus.COMPLETED
    educator.sync_completed_at = completed_at
    educator.last_synced_at = watermark
    educator.last_sync_error = None
    await db.commit()


async def mark_sync_failed(db: AsyncSession, educator: EducationCreator, error: str) -> None:
    """Flag the educator as failed. The watermark is left where it was."""
    educator.sync_status = SyncStatus.FAILED
    educator.last_sync_error = error
    await db.commit()


async def reset_educator_sync(db: AsyncSession, educator: EducationCreator) -> EducationCreator:
    """Put the educator back in the queue for the next run."""
    educator.sync_status = SyncStatus.PENDING
    await db.commit()
    await db.refresh(educator)
    return educator
