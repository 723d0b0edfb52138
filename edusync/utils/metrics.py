"""Prometheus-format metrics for the sync job and HTTP functions."""

import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


def _label_key(names: tuple[str, ...], labels: dict[str, str]) -> tuple:
    return tuple(labels.get(n, "") for n in names)


def _format_labels(names: tuple[str, ...], values: tuple) -> str:
    return ",".join(f'{n}="{v}"' for n, v in zip(names, values))


@dataclass
class Counter:
    """Monotonic counter."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] += amount

    def get(self, **labels: str) -> float:
        return self._values[_label_key(self.labels, labels)]


@dataclass
class Gauge:
    """Gauge that can go up and down."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def set(self, value: float, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] = value

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] += amount

    def dec(self, amount: float = 1.0, **labels: str) -> None:
        self._values[_label_key(self.labels, labels)] -= amount

    def get(self, **labels: str) -> float:
        return self._values[_label_key(self.labels, labels)]


@dataclass
class Histogram:
    """Histogram with fixed buckets."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        key = _label_key(self.labels, labels)
        self._sums[key] += value
        self._totals[key] += 1
        # Buckets are stored non-cumulative and summed on export
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[key][bucket] += 1
                break


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self) -> None:
        # HTTP
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )
        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )
        self.http_requests_in_progress = Gauge(
            name="http_requests_in_progress",
            help="Number of HTTP requests in progress",
            labels=("method",),
        )

        # Educator sync
        self.educator_syncs_total = Counter(
            name="educator_syncs_total",
            help="Per-educator sync attempts by outcome",
            labels=("status",),
        )
        self.videos_synced_total = Counter(
            name="videos_synced_total",
            help="Video rows written by the sync job",
        )
        self.sync_run_duration_seconds = Histogram(
            name="sync_run_duration_seconds",
            help="Duration of one sync invocation in seconds",
        )

        # YouTube Data API
        self.youtube_api_requests_total = Counter(
            name="youtube_api_requests_total",
            help="YouTube Data API requests",
            labels=("endpoint", "status"),
        )
        self.youtube_quota_units_total = Counter(
            name="youtube_quota_units_total",
            help="YouTube Data API quota units consumed",
        )

        # Email
        self.email_notifications_total = Counter(
            name="email_notifications_total",
            help="Email notifications by template and delivery mode",
            labels=("template", "delivery"),
        )

        # Background tasks
        self.background_task_runs_total = Counter(
            name="background_task_runs_total",
            help="Total number of background task runs",
            labels=("task", "status"),
        )

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines = []

        for metric in self.__dict__.values():
            if isinstance(metric, (Counter, Gauge)):
                kind = "counter" if isinstance(metric, Counter) else "gauge"
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} {kind}")
                for label_values, value in metric._values.items():
                    if metric.labels:
                        lines.append(
                            f"{metric.name}{{{_format_labels(metric.labels, label_values)}}} {value}"
                        )
                    else:
                        lines.append(f"{metric.name} {value}")

            elif isinstance(metric, Histogram):
                lines.append(f"# HELP {metric.name} {metric.help}")
                lines.append(f"# TYPE {metric.name} histogram")
                for label_values in metric._sums.keys():
                    labels_str = _format_labels(metric.labels, label_values)
                    prefix = f"{labels_str}," if labels_str else ""
                    cumulative = 0
                    for bucket in metric.buckets:
                        cumulative += metric._counts[label_values].get(bucket, 0)
                        lines.append(f'{metric.name}_bucket{{{prefix}le="{bucket}"}} {cumulative}')
                    lines.append(
                        f'{metric.name}_bucket{{{prefix}le="+Inf"}} {metric._totals[label_values]}'
                    )
                    suffix = f"{{{labels_str}}}" if labels_str else ""
                    lines.append(f"{metric.name}_sum{suffix} {metric._sums[label_values]}")
                    lines.append(f"{metric.name}_count{suffix} {metric._totals[label_values]}")

        return "\n".join(lines) + "\n"


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        metrics.http_requests_in_progress.inc(method=method)

        start_time = time.monotonic()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)
            metrics.http_requests_in_progress.dec(method=method)

        return response

    def _normalize_path(self, path: str) -> str:
        """Replace ids in the path with a placeholder so label cardinality stays bounded."""
        normalized = []
        for part in path.split("/"):
            if part.isdigit() or (len(part) == 36 and part.count("-") == 4):
                normalized.append(":id")
            else:
                normalized.append(part)
        return "/".join(normalized)
