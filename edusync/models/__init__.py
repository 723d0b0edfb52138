"""SQLAlchemy models."""

from edusync.models.base import Base
from edusync.models.educator import EducationCreator, SyncStatus
from edusync.models.sync_history import SyncRunStatus, VideoSyncHistory
from edusync.models.video import VideoEngagementSnapshot, YouTubeVideo

__all__ = [
    "Base",
    "EducationCreator",
    "SyncStatus",
    "VideoSyncHistory",
    "SyncRunStatus",
    "YouTubeVideo",
    "VideoEngagementSnapshot",
]
