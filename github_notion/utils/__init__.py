"""
Utility modules for the webhook bridge.
"""

from github_notion.utils.logging import (
    get_logger,
    setup_logging,
    log_webhook_event,
    log_api_call,
    log_error_with_context,
)
from github_notion.utils.metrics import (
    RequestMetrics,
    track_api_call,
    emit_metric,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_webhook_event",
    "log_api_call",
    "log_error_with_context",
    "RequestMetrics",
    "track_api_call",
    "emit_metric",
]
