"""Tests for settings and store URL handling."""

import pytest
from pydantic import ValidationError

from edusync.api.functions import get_sync_service
from edusync.config import Settings, SyncConfig, get_settings
from edusync.db.database import async_session_maker, build_store_url, session_maker_for
from edusync.utils.metrics import MetricsMiddleware


class TestSettings:
    """Tests for Settings."""

    def test_sync_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.sync_batch_size == 5
        assert settings.sync_stale_after_hours == 24
        assert settings.sync_scheduler_enabled is False

    def test_batch_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, sync_batch_size=0)

    def test_email_enabled(self):
        assert Settings(_env_file=None, resend_api_key="").email_enabled is False
        assert Settings(_env_file=None, resend_api_key="re_x").email_enabled is True

    def test_sync_config_from_settings(self):
        settings = Settings(
            _env_file=None,
            youtube_api_key="yt-key",
            database_url="postgresql://svc@db.example:5432/app",
            database_credential="s3cret",
            sync_batch_size=3,
        )

        config = SyncConfig.from_settings(settings)

        assert config.platform_api_key == "yt-key"
        assert config.store_url == "postgresql://svc@db.example:5432/app"
        assert config.store_credential == "s3cret"
        assert config.batch_size == 3
        assert config.stale_after_hours == 24


class TestBuildStoreUrl:
    """Tests for build_store_url."""

    def test_plain_postgres_gets_asyncpg(self):
        url = build_store_url("postgres://svc:pw@db.example:5432/app")

        assert url.drivername == "postgresql+asyncpg"
        assert url.password == "pw"

    def test_credential_replaces_password(self):
        url = build_store_url("postgresql://svc@db.example:5432/app", "s3cret")

        assert url.drivername == "postgresql+asyncpg"
        assert url.username == "svc"
        assert url.password == "s3cret"

    def test_explicit_driver_untouched(self):
        url = build_store_url("sqlite+aiosqlite:///:memory:")

        assert url.drivername == "sqlite+aiosqlite"


class TestSessionMakerFor:
    """Tests for session_maker_for."""

    def test_app_store_shares_session_maker(self):
        assert session_maker_for(SyncConfig.from_settings(get_settings())) is async_session_maker

    def test_other_store_gets_own_engine(self):
        config = SyncConfig(platform_api_key="k", store_url="sqlite+aiosqlite:///other.db")

        maker = session_maker_for(config)

        assert maker is not async_session_maker
        assert maker.kw["bind"].url.database == "other.db"

    def test_function_service_uses_configured_store(self):
        assert get_sync_service().session_maker is async_session_maker


class TestPathNormalization:
    """Tests for metrics path labels."""

    def test_ids_are_collapsed(self):
        middleware = MetricsMiddleware(app=None)

        assert (
            middleware._normalize_path("/api/educators/0b7e2a1c-4f5d-4c36-9f7e-2d1f6c3a9b10/sync-history")
            == "/api/educators/:id/sync-history"
        )
        assert middleware._normalize_path("/functions/sync-educator-videos") == "/functions/sync-educator-videos"
