"""Inbound request envelope models and decoders."""

import json
from typing import Annotated, Any, Dict, Literal, Optional, Union
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from github_notion.errors import RequestDecodeError
from github_notion.models.github import GitHubPullRequestWebhook


SUPPORTED_METHODS = ["GET", "POST"]


class GetQuery(BaseModel):
    """Query flags accepted on GET."""

    health: Optional[str] = None
    version: Optional[str] = None
    detailed: Optional[bool] = None


class GetRequest(BaseModel):
    """Info or health check request."""

    method: Literal["GET"]
    query: Optional[GetQuery] = None
    headers: Dict[str, str] = {}


class PostHeaders(BaseModel):
    """GitHub delivery headers (lower-cased names)."""

    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(alias="x-github-event")
    delivery_id: Optional[str] = Field(default=None, alias="x-github-delivery")
    signature: Optional[str] = Field(default=None, alias="x-hub-signature-256")
    content_type: Optional[str] = Field(default=None, alias="content-type")


class PostRequest(BaseModel):
    """Webhook delivery; the body is kept as received and parsed after authentication."""

    method: Literal["POST"]
    headers: PostHeaders
    body: bytes = b""


ValidatedRequest = Annotated[Union[GetRequest, PostRequest], Field(discriminator="method")]

_envelope_adapter: TypeAdapter = TypeAdapter(ValidatedRequest)


def describe_validation_error(error: ValidationError) -> str:
    """Render the first mismatch of a validation error as 'location: message'."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"


def decode_request_envelope(raw: Any) -> Union[GetRequest, PostRequest]:
    """
    Decode an untrusted request mapping into a GET or POST envelope.

    The ``method`` discriminant is checked first; unknown methods fail here
    and are never routed.

    Raises:
        RequestDecodeError: If the request does not match either shape
    """
    try:
        return _envelope_adapter.validate_python(raw)
    except ValidationError as e:
        raise RequestDecodeError(
            "Request does not match expected schema",
            details=describe_validation_error(e),
        ) from e


def decode_pull_request_webhook(body: Any) -> GitHubPullRequestWebhook:
    """
    Decode a webhook body against the pull request payload schema.

    Raises:
        RequestDecodeError: If the payload does not match
    """
    try:
        return GitHubPullRequestWebhook.model_validate(body)
    except ValidationError as e:
        raise RequestDecodeError(
            "Webhook payload does not match pull request schema",
            details=describe_validation_error(e),
        ) from e


def parse_body(raw_body: bytes, content_type: Optional[str]) -> Any:
    """
    Parse a webhook body.

    JSON bodies are decoded directly; form-encoded deliveries carry the JSON
    document in the ``payload`` field.

    Raises:
        RequestDecodeError: If the body is not valid JSON
    """
    if not raw_body:
        return None

    document: Union[bytes, str] = raw_body
    if content_type and "application/x-www-form-urlencoded" in content_type:
        form = parse_qs(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True)
        payload = form.get("payload")
        if not payload:
            raise RequestDecodeError("Invalid request format", details="Form body has no 'payload' field")
        document = payload[0]

    try:
        return json.loads(document)
    except ValueError as e:
        raise RequestDecodeError("Invalid JSON payload", details="Body is not valid JSON") from e
