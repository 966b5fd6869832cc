"""
Notion REST API client.

Only HTTP calls, error translation and response validation live here. Every
failure (transport error, HTTP error status, unexpected response shape) is
raised as ``NotionRequestFailureError`` carrying Notion's own message.
"""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from github_notion.errors import NotionRequestFailureError
from github_notion.models.notion import NotionDatabase, NotionPage, NotionQueryResult
from github_notion.utils.logging import get_logger
from github_notion.utils.metrics import RequestMetrics, track_api_call

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_API_VERSION = "2025-09-03"

ModelT = TypeVar("ModelT", bound=BaseModel)


class NotionClient:
    """Minimal async Notion client (databases, data source queries, pages)."""

    def __init__(
        self,
        token: str,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 30.0,
        metrics: Optional[RequestMetrics] = None,
    ):
        self._token = token
        self._http_client = http_client
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._metrics = metrics

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Notion-Version": self._api_version,
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}/{path}"
        async with track_api_call(self._metrics, "notion", path, method, logger):
            try:
                response = await self._http_client.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=json,
                    timeout=self._timeout,
                )
            except httpx.HTTPError as e:
                raise NotionRequestFailureError(str(e) or type(e).__name__) from e

            if response.status_code >= 400:
                raise NotionRequestFailureError(_error_message(response))

            try:
                return response.json()
            except ValueError as e:
                raise NotionRequestFailureError("Notion returned a non-JSON response") from e

    async def retrieve_database(self, database_id: str) -> NotionDatabase:
        """Fetch database metadata, including its data sources."""
        data = await self._request("GET", f"databases/{database_id}")
        return _parse(NotionDatabase, data)

    async def query_data_source(self, data_source_id: str, filter: Dict[str, Any]) -> NotionQueryResult:
        """Query the pages of a data source."""
        data = await self._request("POST", f"data_sources/{data_source_id}/query", json={"filter": filter})
        return _parse(NotionQueryResult, data)

    async def retrieve_page(self, page_id: str) -> NotionPage:
        """Fetch a page with its properties."""
        data = await self._request("GET", f"pages/{page_id}")
        return _parse(NotionPage, data)

    async def update_page_properties(self, page_id: str, properties: Dict[str, Any]) -> None:
        """Patch page properties; each given property is replaced as a whole."""
        await self._request("PATCH", f"pages/{page_id}", json={"properties": properties})


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return f"Notion API error {response.status_code}: {response.text}"


def _parse(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise NotionRequestFailureError(
            f"Unexpected Notion response for {model.__name__}: {e.error_count()} validation error(s)"
        ) from e
