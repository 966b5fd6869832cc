"""
Request Router.

Dispatches a validated envelope on its method: GET builds the info or health
response, POST goes to the webhook processor.
"""

from datetime import datetime, timezone
from typing import Union

from github_notion.errors import UnsupportedMethodError
from github_notion.models.api_response import HealthResponse, InfoResponse, WebhookOutcome
from github_notion.models.request import SUPPORTED_METHODS, GetRequest, PostRequest
from github_notion.services.system_info import SystemInfo
from github_notion.services.webhook_processor import WebhookProcessor
from github_notion.utils.logging import get_logger

logger = get_logger(__name__)

MAX_USER_AGENT_LENGTH = 200

ENDPOINTS = {
    "GET /": "API information",
    "GET /?health=true": "Health check",
    "GET /?health=true&detailed=true": "Detailed health check",
    "POST /": "GitHub webhook endpoint",
}

RouteResult = Union[HealthResponse, InfoResponse, WebhookOutcome]


class RequestRouter:
    """Routes validated requests to the GET handlers or the webhook processor."""

    def __init__(
        self,
        processor: WebhookProcessor,
        system_info: SystemInfo,
        api_version: str,
        environment: str,
    ):
        self.processor = processor
        self.system_info = system_info
        self.api_version = api_version
        self.environment = environment

    async def route(self, request: Union[GetRequest, PostRequest], raw_body: bytes = b"") -> RouteResult:
        """
        Dispatch a request by method.

        Raises:
            UnsupportedMethodError: If the envelope is neither GET nor POST
        """
        if isinstance(request, GetRequest):
            return self.handle_get(request)
        if isinstance(request, PostRequest):
            logger.info("Processing POST request - GitHub webhook")
            return await self.processor.process(request, raw_body)

        # Unreachable after envelope decoding
        method = str(getattr(request, "method", type(request).__name__))
        raise UnsupportedMethodError(method=method, supported=SUPPORTED_METHODS)

    def handle_get(self, request: GetRequest) -> Union[HealthResponse, InfoResponse]:
        """Build the health response when ``health`` is present, else the API info."""
        query = request.query
        user_agent = request.headers.get("user-agent", "")[:MAX_USER_AGENT_LENGTH]
        logger.info(
            "Processing GET request",
            extra={
                "query": query.model_dump(exclude_none=True) if query else {},
                "user_agent": user_agent,
            },
        )

        timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

        if query is not None and query.health is not None:
            detailed = query.detailed is True
            health = HealthResponse(
                timestamp=timestamp,
                version=self.api_version,
                environment=self.environment,
            )
            if detailed:
                health.uptime = self.system_info.get_uptime()
                health.memory = self.system_info.get_memory_usage()
                health.python_version = self.system_info.get_python_version()
            logger.info("Health check completed", extra={"detailed": detailed})
            return health

        return InfoResponse(
            version=self.api_version,
            environment=self.environment,
            endpoints=dict(ENDPOINTS),
            timestamp=timestamp,
        )
