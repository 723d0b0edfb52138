"""Educator YouTube sync."""

from edusync.services.educators.sync import (
    EducatorSyncOutcome,
    EducatorSyncService,
    SyncRunResult,
)

__all__ = [
    "EducatorSyncOutcome",
    "EducatorSyncService",
    "SyncRunResult",
]
