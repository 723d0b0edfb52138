"""Incremental YouTube synchronization for education creators.

One invocation claims a small batch of educators that are pending or whose
watermark went stale, and syncs them one after another:

    history row (running) -> educator in_progress
    -> channel stats -> uploads playlist -> new video ids since watermark
    -> video details -> upsert videos + engagement snapshots
    -> history completed / educator completed, watermark advanced

A failing educator is recorded as failed and the batch moves on. Nothing is
retried within a run; a failed educator is picked up again by a later run
once it is pending or its watermark is stale.
"""

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edusync.config import SyncConfig
from edusync.db.crud import (
    complete_sync_history,
    create_sync_history,
    fail_sync_history,
    get_educator,
    get_educators_due_for_sync,
    mark_sync_completed,
    mark_sync_failed,
    mark_sync_started,
    refresh_upload_cadence,
    update_channel_stats,
    upsert_videos,
)
from edusync.models.base import as_utc, utcnow
from edusync.models.educator import EducationCreator
from edusync.models.sync_history import SyncRunStatus, VideoSyncHistory
from edusync.services.youtube.client import YouTubeClient
from edusync.utils.logging import LogContext
from edusync.utils.metrics import metrics

logger = logging.getLogger(__name__)


@dataclass
class EducatorSyncOutcome:
    """Result of syncing one educator."""

    educator_id: uuid.UUID
    name: str
    status: SyncRunStatus
    videos_synced: int = 0
    quota_used: int = 0
    error: str | None = None


@dataclass
class SyncRunResult:
    """Result of one orchestrator invocation."""

    outcomes: list[EducatorSyncOutcome] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def completed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SyncRunStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SyncRunStatus.FAILED)

    @property
    def videos_synced(self) -> int:
        return sum(o.videos_synced for o in self.outcomes)

    @property
    def message(self) -> str:
        return f"Processed {self.processed} educators"

    def __str__(self) -> str:
        return (
            f"processed={self.processed}, completed={self.completed}, "
            f"failed={self.failed}, videos={self.videos_synced}"
        )


def _error_text(error: Exception) -> str:
    """Error text stored on failure; never empty."""
    return str(error) or type(error).__name__


class EducatorSyncService:
    """Orchestrates the per-educator sync for one batch.

    Usage:
        service = EducatorSyncService(SyncConfig.from_settings(settings), async_session_maker)
        result = await service.run()
    """

    def __init__(
        self,
        config: SyncConfig,
        session_maker: async_sessionmaker[AsyncSession],
        youtube_factory: Callable[[], YouTubeClient] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: API key, store location and batch settings
            session_maker: Session factory bound to the store
            youtube_factory: Builds one YouTube client per educator attempt
                (default: API-key client from ``config``)
        """
        self.config = config
        self.session_maker = session_maker
        self.youtube_factory = youtube_factory or (lambda: YouTubeClient(config.platform_api_key))

    async def run(self) -> SyncRunResult:
        """Sync one batch of educators.

        Raises:
            Exception: Only when selecting the batch fails; per-educator
                failures are recorded and do not propagate.
        """
        start = time.monotonic()
        stale_before = utcnow() - timedelta(hours=self.config.stale_after_hours)

        async with self.session_maker() as db:
            educators = await get_educators_due_for_sync(db, self.config.batch_size, stale_before)

        logger.info(f"Processing {len(educators)} educators")

        result = SyncRunResult()
        for educator in educators:
            result.outcomes.append(await self._sync_isolated(educator))

        metrics.sync_run_duration_seconds.observe(time.monotonic() - start)
        logger.info(f"Educator sync run finished: {result}")
        return result

    async def _sync_isolated(self, educator: EducationCreator) -> EducatorSyncOutcome:
        """Sync one educator; even failing to record a failure must not stop the batch."""
        try:
            return await self.sync_educator(educator)
        except Exception as e:
            logger.exception(f"Could not record sync outcome for educator {educator.id}: {e}")
            metrics.educator_syncs_total.inc(status=SyncRunStatus.FAILED.value)
            return EducatorSyncOutcome(
                educator_id=educator.id,
                name=educator.name,
                status=SyncRunStatus.FAILED,
                error=_error_text(e),
            )

    async def sync_educator(self, educator: EducationCreator) -> EducatorSyncOutcome:
        """Run the full sync sequence for one educator.

        ``educator`` may be detached; it is re-read in a fresh session. Writes
        are committed step by step, so a failure part way keeps the earlier
        steps (e.g. refreshed channel stats) in the store.
        """
        educator_id = educator.id
        name = educator.name
        channel_id = educator.channel_id
        watermark = as_utc(educator.last_synced_at)
        log = LogContext(logger, educator=name)

        youtube = self.youtube_factory()
        started_at = utcnow()
        history_id: uuid.UUID | None = None

        try:
            async with self.session_maker() as db:
                current = await get_educator(db, educator_id)
                if current is None:
                    raise LookupError(f"Educator {educator_id} no longer exists")

                history = await create_sync_history(db, educator_id, started_at)
                history_id = history.id
                await mark_sync_started(db, current, started_at)

                stats = await youtube.get_channel_stats(channel_id)
                await update_channel_stats(db, current, stats, utcnow())
                log.debug(f"Channel stats: subscribers={stats.subscriber_count}, videos={stats.video_count}")

                playlist_id = await youtube.get_uploads_playlist_id(channel_id)
                video_ids = await youtube.list_uploads_since(playlist_id, watermark)
                videos = await youtube.get_video_details(video_ids) if video_ids else []
                log.info(f"Fetched {len(videos)} videos")

                written = await upsert_videos(db, channel_id, videos)
                await refresh_upload_cadence(db, current)

                await complete_sync_history(
                    db,
                    history,
                    videos_synced=written,
                    quota_used=youtube.quota_used,
                    completed_at=utcnow(),
                )
                await mark_sync_completed(db, current, watermark=started_at, completed_at=utcnow())

        except Exception as e:
            error = _error_text(e)
            log.error(f"Error syncing educator: {error}")
            await self._record_failure(educator_id, history_id, error, youtube.quota_used)
            metrics.educator_syncs_total.inc(status=SyncRunStatus.FAILED.value)
            return EducatorSyncOutcome(
                educator_id=educator_id,
                name=name,
                status=SyncRunStatus.FAILED,
                quota_used=youtube.quota_used,
                error=error,
            )

        metrics.educator_syncs_total.inc(status=SyncRunStatus.COMPLETED.value)
        metrics.videos_synced_total.inc(written)
        return EducatorSyncOutcome(
            educator_id=educator_id,
            name=name,
            status=SyncRunStatus.COMPLETED,
            videos_synced=written,
            quota_used=youtube.quota_used,
        )

    async def _record_failure(
        self,
        educator_id: uuid.UUID,
        history_id: uuid.UUID | None,
        error: str,
        quota_used: int,
    ) -> None:
        """Finalize the history row and flag the educator, in a fresh session."""
        async with self.session_maker() as db:
            if history_id is not None:
                history = await db.get(VideoSyncHistory, history_id)
                if history is not None:
                    await fail_sync_history(db, history, error, quota_used, completed_at=utcnow())

            current = await get_educator(db, educator_id)
            if current is not None:
                await mark_sync_failed(db, current, error)
