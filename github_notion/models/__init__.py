"""Data models for the GitHub to Notion webhook bridge."""

from .api_response import (
    ErrorResponse,
    HealthResponse,
    InfoResponse,
    LinksUpdateResult,
    NotionOutcome,
    StatusUpdateResult,
    UpdatedTask,
    WebhookOutcome,
)
from .github import (
    GitHubLabel,
    GitHubPullRequest,
    GitHubPullRequestRef,
    GitHubPullRequestWebhook,
    GitHubRepository,
    GitHubUser,
    PullRequestAction,
)
from .notion import (
    NotionDatabase,
    NotionExternalFile,
    NotionFilesProperty,
    NotionHostedFile,
    NotionPage,
    NotionQueryResult,
    WorkflowStatus,
)
from .request import (
    GetQuery,
    GetRequest,
    PostHeaders,
    PostRequest,
    ValidatedRequest,
    decode_pull_request_webhook,
    decode_request_envelope,
    parse_body,
)

__all__ = [
    # Request envelope models
    "GetQuery",
    "GetRequest",
    "PostHeaders",
    "PostRequest",
    "ValidatedRequest",
    "decode_request_envelope",
    "decode_pull_request_webhook",
    "parse_body",
    # GitHub payload models
    "PullRequestAction",
    "GitHubUser",
    "GitHubRepository",
    "GitHubPullRequestRef",
    "GitHubLabel",
    "GitHubPullRequest",
    "GitHubPullRequestWebhook",
    # Notion models
    "WorkflowStatus",
    "NotionDatabase",
    "NotionQueryResult",
    "NotionPage",
    "NotionFilesProperty",
    "NotionExternalFile",
    "NotionHostedFile",
    # API response models
    "UpdatedTask",
    "NotionOutcome",
    "WebhookOutcome",
    "StatusUpdateResult",
    "LinksUpdateResult",
    "HealthResponse",
    "InfoResponse",
    "ErrorResponse",
]
