"""Audit trail of per-educator sync attempts."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edusync.models.base import Base, utcnow

if TYPE_CHECKING:
    from edusync.models.educator import EducationCreator


class SyncRunStatus(str, enum.Enum):
    """Status of one sync attempt."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class VideoSyncHistory(Base):
    """Created as ``running`` when an attempt starts, finalized when it ends."""

    __tablename__ = "video_sync_history"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    creator_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("education_creators.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[SyncRunStatus] = mapped_column(
        Enum(
            SyncRunStatus,
            name="sync_run_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=SyncRunStatus.RUNNING,
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    videos_synced: Mapped[int] = mapped_column(Integer, default=0)
    api_quota_used: Mapped[int] = mapped_column(Integer, default=0)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    creator: Mapped["EducationCreator"] = relationship(
        "EducationCreator", back_populates="sync_history"
    )

    def __repr__(self) -> str:
        return f"<VideoSyncHistory(id={self.id}, creator_id={self.creator_id}, status={self.status})>"
