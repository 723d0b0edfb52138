"""CRUD operations module."""

from edusync.db.crud.educators import (
    get_educator,
    get_educators_due_for_sync,
    list_educators,
    mark_sync_completed,
    mark_sync_failed,
    mark_sync_started,
    refresh_upload_cadence,
    reset_educator_sync,
    update_channel_stats,
)
from edusync.db.crud.sync_history import (
    complete_sync_history,
    create_sync_history,
    fail_sync_history,
    get_sync_history,
)
from edusync.db.crud.videos import (
    count_channel_videos,
    get_channel_videos,
    get_engagement_history,
    upsert_videos,
)

__all__ = [
    "complete_sync_history",
    "count_channel_videos",
    "create_sync_history",
    "fail_sync_history",
    "get_channel_videos",
    "get_educator",
    "get_educators_due_for_sync",
    "get_engagement_history",
    "get_sync_history",
    "list_educators",
    "mark_sync_completed",
    "mark_sync_failed",
    "mark_sync_started",
    "refresh_upload_cadence",
    "reset_educator_sync",
    "update_channel_stats",
    "upsert_videos",
]
