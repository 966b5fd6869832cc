"""API response data models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .notion import WorkflowStatus


class UpdatedTask(BaseModel):
    """One Notion task touched by a delivery."""

    model_config = ConfigDict(populate_by_name=True)

    identifier: str
    remote_page_id: str = Field(alias="remotePageId")
    new_status: WorkflowStatus = Field(alias="newStatus")


class NotionOutcome(BaseModel):
    """Notion side of a webhook outcome."""

    model_config = ConfigDict(populate_by_name=True)

    updated_tasks: List[UpdatedTask] = Field(default_factory=list, alias="updatedTasks")


class WebhookOutcome(BaseModel):
    """Successful POST outcome envelope."""

    notion: NotionOutcome


class StatusUpdateResult(BaseModel):
    """Result of setting a task's status."""

    page_id: str
    new_status: WorkflowStatus


class LinksUpdateResult(BaseModel):
    """Result of merging a task's link list."""

    page_id: str
    links: List[str]


class HealthResponse(BaseModel):
    """GET ?health response; diagnostics only when detailed."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "healthy"
    timestamp: str
    version: str
    environment: str
    uptime: Optional[float] = None
    memory: Optional[Dict[str, int]] = None
    python_version: Optional[str] = Field(default=None, alias="pythonVersion")


class InfoResponse(BaseModel):
    """Plain GET response describing the API."""

    message: str = "GitHub Webhook Handler API"
    version: str
    environment: str
    endpoints: Dict[str, str]
    timestamp: str


class ErrorResponse(BaseModel):
    """Body of a classified failure response."""

    error: str
    details: Optional[Any] = None
