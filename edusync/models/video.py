"""YouTube video mirror and engagement time series."""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from edusync.models.base import Base, TimestampMixin, utcnow


class YouTubeVideo(Base, TimestampMixin):
    """Latest known state of a video, keyed by the YouTube video id.

    Re-syncs overwrite the statistics columns in place; the time dimension
    lives in ``VideoEngagementSnapshot``.
    """

    __tablename__ = "youtube_videos"

    id: Mapped[str] = mapped_column(String(20), primary_key=True)
    channel_id: Mapped[str] = mapped_column(String(50), index=True)
    url: Mapped[str] = mapped_column(String(255))

    # Descriptive
    title: Mapped[str] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    category_id: Mapped[str | None] = mapped_column(String(10), nullable=True)
    default_language: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Media
    duration: Mapped[str | None] = mapped_column(String(30), nullable=True)  # ISO 8601
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    thumbnails: Mapped[dict] = mapped_column(JSON, default=dict)
    has_captions: Mapped[bool] = mapped_column(default=False)

    # Point-in-time statistics
    view_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    like_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    comment_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_youtube_videos_channel_published", "channel_id", "published_at"),)

    def __repr__(self) -> str:
        return f"<YouTubeVideo(id={self.id}, title={self.title!r})>"


class VideoEngagementSnapshot(Base):
    """One row per video per sync pass. Never updated or deleted."""

    __tablename__ = "video_engagement_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    video_id: Mapped[str] = mapped_column(
        ForeignKey("youtube_videos.id", ondelete="CASCADE"), index=True
    )
    view_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    like_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    comment_count: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    captured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<VideoEngagementSnapshot(video_id={self.video_id}, views={self.view_count})>"
