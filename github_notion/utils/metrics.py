"""
Metrics collection and emission for observability.

This module provides per-invocation metrics for:
- Remote API call counts and latency
- Number of tasks updated by a delivery

Metrics are emitted as structured log records; there is no metrics backend.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from github_notion.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class RequestMetrics:
    """
    Collects metrics during a single webhook invocation.

    Tracks:
    - API call counts per service
    - API call latencies per service
    - Failed API calls per service
    """

    def __init__(self) -> None:
        self.api_calls: Dict[str, int] = {}
        self.api_latencies: Dict[str, List[float]] = {}
        self.api_errors: Dict[str, int] = {}

    def record_api_call(self, service: str, duration_ms: float, failed: bool = False) -> None:
        """
        Record an API call.

        Args:
            service: Service name (e.g., 'notion')
            duration_ms: Call duration in milliseconds
            failed: Whether the call failed
        """
        self.api_calls[service] = self.api_calls.get(service, 0) + 1
        self.api_latencies.setdefault(service, []).append(duration_ms)
        if failed:
            self.api_errors[service] = self.api_errors.get(service, 0) + 1

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary with call counts, error counts and average latencies
        """
        avg_latencies = {
            service: round(sum(latencies) / len(latencies), 2)
            for service, latencies in self.api_latencies.items()
            if latencies
        }
        return {
            "api_calls": dict(self.api_calls),
            "api_errors": dict(self.api_errors),
            "avg_api_latency_ms": avg_latencies,
        }


@asynccontextmanager
async def track_api_call(
    metrics_collector: Optional[RequestMetrics],
    service: str,
    endpoint: str,
    method: str,
    logger_adapter=None,
) -> AsyncIterator[None]:
    """
    Context manager to track API call timing.

    Usage:
        async with track_api_call(metrics, "notion", "pages/abc", "PATCH", logger):
            response = await http_client.patch(url, json=payload)

    Args:
        metrics_collector: Metrics collector (optional)
        service: Service name
        endpoint: API endpoint
        method: HTTP method
        logger_adapter: Logger for logging API calls

    Yields:
        None
    """
    start_time = time.perf_counter()
    error = None

    try:
        yield
    except Exception as e:
        error = e
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000

        if metrics_collector:
            metrics_collector.record_api_call(service, duration_ms, failed=error is not None)

        log_api_call(
            logger_adapter or logger,
            service=service,
            endpoint=endpoint,
            method=method,
            duration_ms=duration_ms,
            error=str(error) if error else None
        )


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric as a structured log record.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.info(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
