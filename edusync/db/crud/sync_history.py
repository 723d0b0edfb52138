"""CRUD operations for the sync audit trail."""

import uuid
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edusync.constants import SYNC_HISTORY_DEFAULT_LIMIT
from edusync.models.sync_history import SyncRunStatus, VideoSyncHistory


async def create_sync_history(
    db: AsyncSession,
    creator_id: uuid.UUID,
    started_at: datetime,
) -> VideoSyncHistory:
    history = VideoSyncHistory(
        creator_id=creator_id,
        status=SyncRunStatus.RUNNING,
        started_at=started_at,
    )
    db.add(history)
    await db.commit()
    return history


async def complete_sync_history(
    db: AsyncSession,
    history: VideoSyncHistory,
    videos_synced: int,
    quota_used: int,
    completed_at: datetime,
) -> None:
    history.status = SyncRunStatus.COMPLETED
    history.completed_at = completed_at
    history.videos_synced = videos_synced
    history.api_quota_used = quota_used
    await db.commit()


async def fail_sync_history(
    db: AsyncSession,
    history: VideoSyncHistory,
    error: str,
    quota_used: int,
    completed_at: datetime,
) -> None:
    history.status = SyncRunStatus.FAILED
    history.completed_at = completed_at
    history.api_quota_used = quota_used
    history.error_message = error
    await db.commit()


async def get_sync_history(
    db: AsyncSession,
    creator_id: uuid.UUID,
    limit: int = SYNC_HISTORY_DEFAULT_LIMIT,
) -> Sequence[VideoSyncHistory]:
    """Most recent attempts first."""
    result = await db.execute(
        select(VideoSyncHistory)
        .where(VideoSyncHistory.creator_id == creator_id)
        .order_by(VideoSyncHistory.started_at.desc())
        .limit(limit)
    )
    return result.scalars().all()
