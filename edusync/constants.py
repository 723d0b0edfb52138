"""Application constants - centralized configuration values."""

# =============================================================================
# Educator Sync
# =============================================================================
SYNC_BATCH_SIZE = 5  # Educators claimed per invocation
SYNC_STALE_AFTER_HOURS = 24  # Watermark age that makes an educator eligible again
SYNC_INTERVAL_EDUCATORS = 60 * 60  # 1 hour, when the in-process scheduler is enabled
MAX_CONSECUTIVE_FAILURES = 5  # For background tasks
SYNC_HISTORY_DEFAULT_LIMIT = 20

# =============================================================================
# YouTube Data API
# =============================================================================
YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"
YOUTUBE_WATCH_URL = "https://youtube.com/watch?v={video_id}"
YOUTUBE_MAX_RESULTS = 50  # Platform page size and ids-per-request limit
YOUTUBE_QUOTA_PER_LIST_CALL = 1  # channels/playlistItems/videos .list cost
THUMBNAIL_QUALITY_ORDER = ("maxres", "standard", "high", "medium", "default")

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
API_TIMEOUT_DEFAULT = 10.0
API_TIMEOUT_EXTERNAL = 15.0

# =============================================================================
# Function endpoints
# =============================================================================
FUNCTION_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# =============================================================================
# Email
# =============================================================================
RESEND_API_URL = "https://api.resend.com/emails"
PARTNER_DASHBOARD_PATH = "/partnership/dashboard"
