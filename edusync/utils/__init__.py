"""Utility modules for edusync."""

from edusync.utils.logging import LogContext, get_logger, setup_logging
from edusync.utils.metrics import MetricsMiddleware, metrics
from edusync.utils.retry import RetryConfig, retry_async

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Metrics
    "metrics",
    "MetricsMiddleware",
    # Retry
    "retry_async",
    "RetryConfig",
]
