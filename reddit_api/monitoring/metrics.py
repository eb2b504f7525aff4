"""Prometheus metrics for monitoring Reddit API usage."""

import logging
import time
from typing import Optional

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

REQUESTS = Counter(
    "reddit_api_requests_total",
    "Number of HTTP requests sent to Reddit",
    ["method", "endpoint"],
)

API_ERRORS = Counter(
    "reddit_api_errors_total",
    "Number of failed Reddit requests",
    ["error_type"],
)

TOKEN_EXCHANGES = Counter(
    "reddit_api_token_exchanges_total",
    "Number of OAuth token exchanges",
    ["grant_type", "outcome"],
)

PAGES_FETCHED = Counter(
    "reddit_api_pages_fetched_total",
    "Number of listing pages fetched by pagination streams",
)

REQUEST_DURATION = Histogram(
    "reddit_api_request_duration_seconds",
    "Duration of Reddit API requests in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)


class PrometheusExporter:
    """Prometheus metrics exporter for the Reddit API client."""

    def __init__(self, port: int = 8000):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
        """
        self.port = port
        self.server_started = False

    def start_server(self) -> None:
        """Start the Prometheus metrics server."""
        if not self.server_started:
            try:
                start_http_server(self.port)
                self.server_started = True
                logger.info(f"Started Prometheus metrics server on port {self.port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus metrics server: {str(e)}")

    def record_request(self, method: str, endpoint: str) -> None:
        """
        Record an outgoing request.

        Args:
            method: HTTP method
            endpoint: Request path without host or query string
        """
        REQUESTS.labels(method=method, endpoint=endpoint).inc()

    def record_api_error(self, error_type: str) -> None:
        """
        Record a failed request.

        Args:
            error_type: Kind of failure (e.g. '5xx', '401', 'transport', 'deserialization')
        """
        API_ERRORS.labels(error_type=error_type).inc()

    def record_token_exchange(self, grant_type: str, success: bool) -> None:
        TOKEN_EXCHANGES.labels(grant_type=grant_type, outcome="success" if success else "failure").inc()

    def record_page_fetched(self) -> None:
        PAGES_FETCHED.inc()

    def time_request(self) -> "RequestTimer":
        """
        Create a context manager for timing API requests.

        Returns:
            RequestTimer context manager
        """
        return RequestTimer()


class RequestTimer:
    """Context manager for timing API requests."""

    def __init__(self):
        self.start_time: Optional[float] = None

    def __enter__(self) -> "RequestTimer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.start_time is not None:
            REQUEST_DURATION.observe(time.perf_counter() - self.start_time)
