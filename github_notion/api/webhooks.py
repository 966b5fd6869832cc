"""
Webhook endpoint: adapts FastAPI requests to the program entrypoint.

Every HTTP method is accepted and handed to the program so that unsupported
methods fail request decoding (400) rather than framework routing.
"""

from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from github_notion.config import Settings, get_settings
from github_notion.models.api_response import ErrorResponse
from github_notion.services.program import (
    HttpContext,
    IncomingRequest,
    ResponseWriter,
    SettingsProvider,
    TaskStoreFactory,
    handle_exit,
    run_program,
)
from github_notion.services.system_info import ProcessSystemInfo, SystemInfo
from github_notion.services.task_store import NotionTaskStore, TaskStore
from github_notion.utils.logging import get_logger
from github_notion.utils.metrics import RequestMetrics

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

ACCEPTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def get_settings_provider() -> SettingsProvider:
    """Settings are resolved inside the program so failures are classified."""
    return get_settings


def get_system_info() -> SystemInfo:
    return ProcessSystemInfo()


async def get_request_metrics() -> AsyncIterator[RequestMetrics]:
    """Per-request metrics, summarized once the response is sent."""
    metrics = RequestMetrics()
    yield metrics
    if metrics.api_calls:
        logger.info("Notion API usage", extra=metrics.get_metrics_summary())


def get_task_store_factory(
    request: Request,
    metrics: RequestMetrics = Depends(get_request_metrics),
) -> TaskStoreFactory:
    """Build Notion task stores on the application's shared HTTP client."""
    http_client = request.app.state.http_client

    def factory(settings: Settings) -> TaskStore:
        return NotionTaskStore.from_settings(settings, http_client, metrics)

    return factory


@router.api_route(
    "/",
    methods=ACCEPTED_METHODS,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}},
)
@router.api_route(
    "/api/webhook",
    methods=ACCEPTED_METHODS,
    responses={400: {"model": ErrorResponse}, 405: {"model": ErrorResponse}},
)
async def handle_webhook(
    request: Request,
    settings_provider: SettingsProvider = Depends(get_settings_provider),
    task_store_factory: TaskStoreFactory = Depends(get_task_store_factory),
    system_info: SystemInfo = Depends(get_system_info),
) -> JSONResponse:
    """
    Receive GitHub deliveries (POST) and info/health checks (GET).

    The raw body is passed through untouched; the signature is computed over
    those exact bytes.
    """
    incoming = IncomingRequest(
        method=request.method,
        headers={name.lower(): value for name, value in request.headers.items()},
        query=dict(request.query_params),
        raw_body=await request.body(),
    )
    context = HttpContext(request=incoming, response=ResponseWriter())

    program_exit = await run_program(
        context,
        settings_provider=settings_provider,
        task_store_factory=task_store_factory,
        system_info=system_info,
    )
    handle_exit(program_exit, context.response)

    response = context.response
    return JSONResponse(status_code=response.status_code, content=response.body, headers=response.headers)
