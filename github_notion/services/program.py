"""
Program entrypoint.

Wires the pipeline behind a single HTTP context: decode the incoming request,
resolve settings, build the processor and router, route, and return a
``ProgramExit``. Expected failures come back as ``ProgramFailure`` and
anything else as ``ProgramDefect``; nothing is raised to the platform adapter.
``handle_exit`` renders an exit onto the context's response writer.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from github_notion.config import Settings
from github_notion.errors import (
    BridgeError,
    ResponseAlreadySentError,
    UnsupportedMethodError,
    describe_failure,
)
from github_notion.models.request import SUPPORTED_METHODS, GetRequest, PostRequest, decode_request_envelope
from github_notion.services.router import RequestRouter
from github_notion.services.system_info import SystemInfo
from github_notion.services.task_store import TaskStore
from github_notion.services.webhook_processor import WebhookProcessor
from github_notion.utils.logging import get_logger, log_error_with_context

logger = get_logger(__name__)

HTTP_OK = 200
HTTP_INTERNAL_SERVER_ERROR = 500
INTERNAL_ERROR_BODY = "Internal server error"

SettingsProvider = Callable[[], Settings]
TaskStoreFactory = Callable[[Settings], TaskStore]


@dataclass(frozen=True)
class IncomingRequest:
    """Platform-neutral view of an HTTP request."""

    method: str
    headers: Dict[str, str] = field(default_factory=dict)  # lower-cased names
    query: Dict[str, str] = field(default_factory=dict)
    raw_body: bytes = b""


class ResponseWriter:
    """Collects the single response of a request."""

    def __init__(self) -> None:
        self.status_code: Optional[int] = None
        self.body: Any = None
        self.headers: Dict[str, str] = {}

    @property
    def headers_sent(self) -> bool:
        return self.status_code is not None

    def send(self, status_code: int, body: Any, headers: Optional[Dict[str, str]] = None) -> None:
        """
        Record the response.

        Raises:
            ResponseAlreadySentError: If a response was already recorded
        """
        if self.headers_sent:
            raise ResponseAlreadySentError("Headers already sent")
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers or {})


@dataclass(frozen=True)
class HttpContext:
    """Request/response pair handed to the program."""

    request: IncomingRequest
    response: ResponseWriter


@dataclass(frozen=True)
class ProgramSuccess:
    value: Dict[str, Any]


@dataclass(frozen=True)
class ProgramFailure:
    error: BridgeError


@dataclass(frozen=True)
class ProgramDefect:
    exception: BaseException


ProgramExit = Union[ProgramSuccess, ProgramFailure, ProgramDefect]


def decode_request(request: IncomingRequest) -> Union[GetRequest, PostRequest]:
    """
    Decode an incoming request into a validated envelope.

    A POST body stays raw here; it is parsed only after the delivery is
    authenticated.

    Raises:
        RequestDecodeError: If the method or shape is not accepted
    """
    raw: Dict[str, Any] = {"method": request.method, "headers": dict(request.headers)}
    if request.query:
        raw["query"] = dict(request.query)
    if request.method == "POST":
        raw["body"] = request.raw_body
    return decode_request_envelope(raw)


async def run_program(
    context: HttpContext,
    settings_provider: SettingsProvider,
    task_store_factory: TaskStoreFactory,
    system_info: SystemInfo,
) -> ProgramExit:
    """
    Run the pipeline for one request.

    Args:
        context: HTTP request/response pair
        settings_provider: Resolves settings (raises ConfigurationError)
        task_store_factory: Builds the task store for the resolved settings
        system_info: Diagnostics for the detailed health check

    Returns:
        Success value, classified failure, or defect
    """
    request = context.request
    logger.info("Request received", extra={"method": request.method})

    try:
        envelope = decode_request(request)
        settings = settings_provider()

        processor = WebhookProcessor(
            task_store=task_store_factory(settings),
            webhook_secret=settings.github_webhook_secret.get_secret_value(),
            task_id_prefix=settings.notion_task_id_prefix,
            signature_required=settings.signature_required,
        )
        router = RequestRouter(
            processor=processor,
            system_info=system_info,
            api_version=settings.api_version,
            environment=settings.environment,
        )

        result = await router.route(envelope, request.raw_body)
    except BridgeError as e:
        logger.warning(
            f"Request failed: {type(e).__name__}: {e.reason}",
            extra={"failure_kind": type(e).__name__},
        )
        return ProgramFailure(e)
    except Exception as e:
        log_error_with_context(logger, "Unexpected error while processing request", e)
        return ProgramDefect(e)

    logger.info("Request routed, returning result")
    return ProgramSuccess(result.model_dump(mode="json", by_alias=True, exclude_none=True))


def handle_exit(program_exit: ProgramExit, response: ResponseWriter) -> None:
    """
    Render a program exit onto the response.

    Raises:
        ResponseAlreadySentError: If the response was already written
    """
    if response.headers_sent:
        raise ResponseAlreadySentError("Headers already sent")

    if isinstance(program_exit, ProgramSuccess):
        logger.info("Request processed successfully")
        response.send(HTTP_OK, program_exit.value)
        return

    if isinstance(program_exit, ProgramFailure):
        try:
            status_code, body = describe_failure(program_exit.error)
        except TypeError as e:
            log_error_with_context(logger, "Unclassified failure", e)
            response.send(HTTP_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_BODY)
            return
        headers = {}
        if isinstance(program_exit.error, UnsupportedMethodError):
            headers["Allow"] = ", ".join(SUPPORTED_METHODS)
        response.send(status_code, body, headers)
        return

    response.send(HTTP_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_BODY)
