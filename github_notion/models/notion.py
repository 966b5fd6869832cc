"""Notion workflow status and API response models."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WorkflowStatus(str, Enum):
    """Task status option names in the Notion tasks database."""

    IN_PROGRESS = "In progress"
    IN_REVIEW = "In review"
    PR_MERGED = "PR merged"


class NotionDataSourceRef(BaseModel):
    """Data source entry listed on a database."""

    id: str
    name: str = ""


class NotionDatabase(BaseModel):
    """Subset of `GET /databases/{id}` used for data source discovery."""

    object: Literal["database"]
    id: str
    data_sources: List[NotionDataSourceRef]


class NotionPageRef(BaseModel):
    """Query result entry; only the page id is needed."""

    id: str


class NotionQueryResult(BaseModel):
    """Response of `POST /data_sources/{id}/query`."""

    object: Literal["list"]
    results: List[NotionPageRef]


class ExternalFileUrl(BaseModel):
    url: str


class HostedFileUrl(BaseModel):
    url: str
    expiry_time: Optional[str] = None


class NotionExternalFile(BaseModel):
    """Link attachment on a files property."""

    model_config = ConfigDict(extra="allow")

    type: Literal["external"] = "external"
    name: str
    external: ExternalFileUrl


class NotionHostedFile(BaseModel):
    """Notion-hosted upload on a files property."""

    model_config = ConfigDict(extra="allow")

    type: Literal["file"] = "file"
    name: str
    file: HostedFileUrl


NotionFileAttachment = Annotated[
    Union[NotionExternalFile, NotionHostedFile], Field(discriminator="type")
]


class NotionFilesProperty(BaseModel):
    """A `files` typed page property."""

    model_config = ConfigDict(extra="allow")

    type: Literal["files"] = "files"
    files: List[NotionFileAttachment] = []


class NotionPage(BaseModel):
    """Subset of `GET /pages/{id}`."""

    object: Literal["page"]
    id: str
    properties: Dict[str, Any]


def attachment_url(attachment: Union[NotionExternalFile, NotionHostedFile]) -> str:
    """Return the URL an attachment points at."""
    if isinstance(attachment, NotionExternalFile):
        return attachment.external.url
    return attachment.file.url


def external_attachment(url: str) -> NotionExternalFile:
    """Build a link attachment named after its URL."""
    return NotionExternalFile(name=url, external=ExternalFileUrl(url=url))
