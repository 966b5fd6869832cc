"""
Remote task store capability backed by a Notion database.

The webhook processor only sees the ``TaskStore`` protocol (lookup,
set_status, set_links), so tests can substitute a fake.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from pydantic import ValidationError

from github_notion.config import Settings
from github_notion.errors import NotionRequestFailureError
from github_notion.models.api_response import LinksUpdateResult, StatusUpdateResult
from github_notion.models.notion import (
    NotionFilesProperty,
    WorkflowStatus,
    attachment_url,
    external_attachment,
)
from github_notion.services.notion_client import NotionClient
from github_notion.services.task_ids import task_id_number
from github_notion.utils.logging import get_logger
from github_notion.utils.metrics import RequestMetrics

logger = get_logger(__name__)


class TaskStore(Protocol):
    """Operations the webhook processor needs from the task tracker."""

    async def lookup(self, task_id: str) -> str:
        """Return the page id of the task with the given identifier."""
        ...

    async def set_status(self, page_id: str, status: WorkflowStatus) -> StatusUpdateResult:
        """Overwrite the task's status."""
        ...

    async def set_links(self, page_id: str, urls: Sequence[str]) -> LinksUpdateResult:
        """Merge URLs into the task's link list."""
        ...


class NotionTaskStore:
    """
    Task store over a Notion tasks database.

    In dry-run mode, status and link writes are skipped before any network
    call and the would-be result is returned. Lookups still hit Notion.

    The link merge is read-then-replace of the whole property; a link added
    by someone else between the read and the write is lost.
    """

    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        task_id_property: str = "Task ID",
        status_property: str = "Status",
        links_property: str = "PR links",
        dry_run: bool = False,
    ):
        self.client = client
        self.database_id = database_id
        self.task_id_property = task_id_property
        self.status_property = status_property
        self.links_property = links_property
        self.dry_run = dry_run
        self._data_source_id: Optional[str] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient,
        metrics: Optional[RequestMetrics] = None,
    ) -> "NotionTaskStore":
        """Build a store from application settings and a shared HTTP client."""
        client = NotionClient(
            token=settings.notion_token.get_secret_value(),
            http_client=http_client,
            base_url=settings.notion_api_base_url,
            api_version=settings.notion_api_version,
            timeout=settings.notion_timeout_seconds,
            metrics=metrics,
        )
        return cls(
            client,
            database_id=settings.notion_database_id,
            task_id_property=settings.notion_task_id_property,
            status_property=settings.notion_status_property,
            links_property=settings.notion_pr_links_property,
            dry_run=settings.notion_dry_run,
        )

    async def get_data_source_id(self) -> str:
        """
        Discover the data source of the configured database.

        Queries run against data sources rather than databases; the first
        data source listed is used. The result is cached on this instance.
        """
        if self._data_source_id is None:
            database = await self.client.retrieve_database(self.database_id)
            if not database.data_sources:
                raise NotionRequestFailureError(
                    f"Notion database {self.database_id} has no data sources"
                )
            self._data_source_id = database.data_sources[0].id
            logger.debug(f"Resolved data source {self._data_source_id} for database {self.database_id}")
        return self._data_source_id

    async def lookup(self, task_id: str) -> str:
        """
        Find the page of a task by its unique id number.

        Raises:
            NotionRequestFailureError: If the request fails or nothing matches
        """
        try:
            number = task_id_number(task_id)
        except ValueError as e:
            raise NotionRequestFailureError(str(e)) from e

        data_source_id = await self.get_data_source_id()
        result = await self.client.query_data_source(
            data_source_id,
            filter={
                "and": [
                    {
                        "property": self.task_id_property,
                        "unique_id": {"equals": number},
                    }
                ]
            },
        )
        if not result.results:
            raise NotionRequestFailureError(f"No Notion task found for {task_id}")

        page_id = result.results[0].id
        logger.info(f"Resolved {task_id} to Notion page {page_id}", extra={"task_id": task_id, "page_id": page_id})
        return page_id

    async def set_status(self, page_id: str, status: WorkflowStatus) -> StatusUpdateResult:
        """Set the status property of a page."""
        if self.dry_run:
            logger.info(
                "[dry-run] Status update skipped",
                extra={"page_id": page_id, "status": status.value},
            )
            return StatusUpdateResult(page_id=page_id, new_status=status)

        await self.client.update_page_properties(
            page_id,
            {self.status_property: {"status": {"name": status.value}}},
        )
        logger.info(f"Status set to '{status.value}'", extra={"page_id": page_id})
        return StatusUpdateResult(page_id=page_id, new_status=status)

    async def set_links(self, page_id: str, urls: Sequence[str]) -> LinksUpdateResult:
        """
        Merge URLs into the page's link list.

        Existing links keep their order and new URLs are appended once each.
        The property is written back whole, and only if something was added.
        """
        requested = list(dict.fromkeys(urls))
        if self.dry_run:
            logger.info(
                "[dry-run] Link update skipped",
                extra={"page_id": page_id, "links": requested},
            )
            return LinksUpdateResult(page_id=page_id, links=requested)

        page = await self.client.retrieve_page(page_id)
        existing = self._parse_links_property(page_id, page.properties)
        existing_urls = [attachment_url(attachment) for attachment in existing.files]

        known = set(existing_urls)
        to_add = [url for url in requested if url not in known]
        if not to_add:
            logger.info("Links already present, nothing to write", extra={"page_id": page_id})
            return LinksUpdateResult(page_id=page_id, links=existing_urls)

        files_payload: List[Dict[str, Any]] = [
            attachment.model_dump(mode="json", exclude_none=True) for attachment in existing.files
        ]
        files_payload += [external_attachment(url).model_dump(mode="json") for url in to_add]

        await self.client.update_page_properties(
            page_id,
            {self.links_property: {"files": files_payload}},
        )
        logger.info(
            f"Added {len(to_add)} link(s) to '{self.links_property}'",
            extra={"page_id": page_id, "links": to_add},
        )
        return LinksUpdateResult(page_id=page_id, links=existing_urls + to_add)

    def _parse_links_property(self, page_id: str, properties: Dict[str, Any]) -> NotionFilesProperty:
        raw = properties.get(self.links_property)
        if raw is None:
            raise NotionRequestFailureError(
                f"Notion page {page_id} has no '{self.links_property}' property"
            )
        try:
            return NotionFilesProperty.model_validate(raw)
        except ValidationError as e:
            raise NotionRequestFailureError(
                f"Failed to parse Notion '{self.links_property}' property"
            ) from e
