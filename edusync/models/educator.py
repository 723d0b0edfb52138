"""Education creator model and sync bookkeeping."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, BigInteger, DateTime, Enum, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edusync.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from edusync.models.sync_history import VideoSyncHistory


class SyncStatus(str, enum.Enum):
    """Sync state of an educator record."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class EducationCreator(Base, TimestampMixin):
    """An educator whose YouTube channel is mirrored into the store.

    Rows are created by admins; only the sync job mutates the sync and stats
    columns, and it never deletes rows.
    """

    __tablename__ = "education_creators"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    channel_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    channel_avatar_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    specialization: Mapped[list | None] = mapped_column(JSON, nullable=True)

    # Sync bookkeeping
    sync_status: Mapped[SyncStatus] = mapped_column(
        Enum(
            SyncStatus,
            name="sync_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=SyncStatus.PENDING,
        index=True,
    )
    sync_started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sync_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    last_sync_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Channel statistics
    number_of_subscribers: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    total_view_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    total_video_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    channel_joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # [{"recorded_at": iso8601, "subscriber_count": int | None}, ...], append only
    subscriber_history: Mapped[list] = mapped_column(JSON, default=list)
    avg_upload_frequency_days: Mapped[float | None] = mapped_column(Float, nullable=True)

    sync_history: Mapped[list["VideoSyncHistory"]] = relationship(
        "VideoSyncHistory",
        back_populates="creator",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<EducationCreator(id={self.id}, channel_id={self.channel_id}, status={self.sync_status})>"
