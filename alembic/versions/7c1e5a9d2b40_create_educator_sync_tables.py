"""create educator sync tables

Revision ID: 7c1e5a9d2b40
Revises:
Create Date: 2026-10-19 09:12:41.318204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c1e5a9d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'education_creators',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('channel_id', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('channel_avatar_url', sa.String(1000), nullable=True),
        sa.Column('specialization', sa.JSON(), nullable=True),
        sa.Column('sync_status', sa.String(11), nullable=False, server_default='pending'),
        sa.Column('sync_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sync_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_sync_error', sa.Text(), nullable=True),
        sa.Column('number_of_subscribers', sa.BigInteger(), nullable=True),
        sa.Column('total_view_count', sa.BigInteger(), nullable=True),
        sa.Column('total_video_count', sa.BigInteger(), nullable=True),
        sa.Column('country', sa.String(2), nullable=True),
        sa.Column('channel_joined_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('subscriber_history', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('avg_upload_frequency_days', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('slug', name='uq_education_creators_slug'),
    )
    op.create_index('ix_education_creators_channel_id', 'education_creators', ['channel_id'], unique=True)
    op.create_index('ix_education_creators_sync_status', 'education_creators', ['sync_status'])
    op.create_index('ix_education_creators_last_synced_at', 'education_creators', ['last_synced_at'])

    op.create_table(
        'youtube_videos',
        sa.Column('id', sa.String(20), primary_key=True),
        sa.Column('channel_id', sa.String(50), nullable=False),
        sa.Column('url', sa.String(255), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False, server_default='[]'),
        sa.Column('category_id', sa.String(10), nullable=True),
        sa.Column('default_language', sa.String(20), nullable=True),
        sa.Column('duration', sa.String(30), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('thumbnail_url', sa.String(1000), nullable=True),
        sa.Column('thumbnails', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('has_captions', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('view_count', sa.BigInteger(), nullable=True),
        sa.Column('like_count', sa.BigInteger(), nullable=True),
        sa.Column('comment_count', sa.BigInteger(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_youtube_videos_channel_id', 'youtube_videos', ['channel_id'])
    op.create_index('ix_youtube_videos_channel_published', 'youtube_videos', ['channel_id', 'published_at'])

    op.create_table(
        'video_engagement_history',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('video_id', sa.String(20), sa.ForeignKey('youtube_videos.id', ondelete='CASCADE'), nullable=False),
        sa.Column('view_count', sa.BigInteger(), nullable=True),
        sa.Column('like_count', sa.BigInteger(), nullable=True),
        sa.Column('comment_count', sa.BigInteger(), nullable=True),
        sa.Column('captured_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_video_engagement_history_video_id', 'video_engagement_history', ['video_id'])

    op.create_table(
        'video_sync_history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('creator_id', sa.Uuid(), sa.ForeignKey('education_creators.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(9), nullable=False, server_default='running'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('videos_synced', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('api_quota_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('error_message', sa.Text(), nullable=True),
    )
    op.create_index('ix_video_sync_history_creator_id', 'video_sync_history', ['creator_id'])


def downgrade() -> None:
    op.drop_index('ix_video_sync_history_creator_id', table_name='video_sync_history')
    op.drop_table('video_sync_history')
    op.drop_index('ix_video_engagement_history_video_id', table_name='video_engagement_history')
    op.drop_table('video_engagement_history')
    op.drop_index('ix_youtube_videos_channel_published', table_name='youtube_videos')
    op.drop_index('ix_youtube_videos_channel_id', table_name='youtube_videos')
    op.drop_table('youtube_videos')
    op.drop_index('ix_education_creators_last_synced_at', table_name='education_creators')
    op.drop_index('ix_education_creators_sync_status', table_name='education_creators')
    op.drop_index('ix_education_creators_channel_id', table_name='education_creators')
    op.drop_table('education_creators')
