"""Pydantic schemas for API validation and serialization."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Re-export enums from the models (avoid duplication)
from edusync.models.educator import SyncStatus as SyncStatusEnum
from edusync.models.sync_history import SyncRunStatus as SyncRunStatusEnum


# Function responses
class FunctionResponse(BaseModel):
    """JSON body returned by the function endpoints."""

    success: bool
    message: str | None = None
    error: str | None = None


# Email notification
class EmailNotificationRequest(BaseModel):
    """Body of the partner application notification function."""

    to: str = Field(..., min_length=3)
    template: str = Field(..., description="application_received, application_approved or commission_earned")
    data: dict[str, Any] = Field(default_factory=dict)


# Educator schemas
class EducatorRead(BaseModel):
    """Educator read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    channel_id: str
    name: str
    slug: str
    sync_status: SyncStatusEnum
    sync_started_at: datetime | None = None
    sync_completed_at: datetime | None = None
    last_synced_at: datetime | None = None
    last_sync_error: str | None = None
    number_of_subscribers: int | None = None
    total_view_count: int | None = None
    total_video_count: int | None = None
    country: str | None = None
    avg_upload_frequency_days: float | None = None


class SyncHistoryRead(BaseModel):
    """Sync history read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    creator_id: uuid.UUID
    status: SyncRunStatusEnum
    started_at: datetime
    completed_at: datetime | None = None
    videos_synced: int
    api_quota_used: int
    error_message: str | None = None
