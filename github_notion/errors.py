"""
Error taxonomy for the webhook bridge.

Every expected failure is a ``BridgeError`` subclass. Components raise them;
the program entrypoint turns them into a classified exit, and
``describe_failure`` maps each kind to an HTTP status and response body.
Anything that is not a ``BridgeError`` is a defect and renders as a 500.
"""

from typing import Any, Dict, List, Optional, Tuple


class BridgeError(Exception):
    """Base class for expected, request-level failures."""

    def __init__(self, reason: str, details: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.details = details


class RequestDecodeError(BridgeError):
    """Request or payload does not match the expected shape."""
    pass


class UnsupportedMethodError(BridgeError):
    """Request method outside the supported set."""

    def __init__(self, method: str, supported: List[str]):
        super().__init__(
            f"Unsupported method: {method}",
            details={"method": method, "supported": supported},
        )
        self.method = method
        self.supported = supported


class InvalidEventError(BridgeError):
    """POST delivery that is not a pull request event."""

    def __init__(self, expected: str, received: str):
        super().__init__(
            "Invalid GitHub event type",
            details={"expected": expected, "received": received},
        )
        self.expected = expected
        self.received = received


class SignatureFailureError(BridgeError):
    """Webhook signature does not match the body."""
    pass


class SignatureRequiredError(SignatureFailureError):
    """Webhook signature header absent while signatures are enforced."""
    pass


class ConfigurationError(BridgeError):
    """Required setting absent or malformed."""
    pass


class NotionRequestFailureError(BridgeError):
    """A Notion API call failed or a lookup matched nothing."""
    pass


class ResponseAlreadySentError(RuntimeError):
    """A second response was written for the same request."""
    pass


HTTP_BAD_REQUEST = 400
HTTP_METHOD_NOT_ALLOWED = 405


def describe_failure(error: BridgeError) -> Tuple[int, Dict[str, Any]]:
    """
    Map a classified failure to an HTTP status and response body.

    Signature failures never echo the secret or the computed digest; the
    body only carries a fixed marker.

    Args:
        error: Classified failure

    Returns:
        Tuple of (status code, body with ``error`` and ``details``)

    Raises:
        TypeError: If the failure kind has no mapping
    """
    # Subclasses before their bases
    if isinstance(error, RequestDecodeError):
        return HTTP_BAD_REQUEST, _body("Invalid request format", error.details or error.reason)
    if isinstance(error, UnsupportedMethodError):
        return HTTP_METHOD_NOT_ALLOWED, _body("Method Not Allowed", error.details)
    if isinstance(error, InvalidEventError):
        return HTTP_BAD_REQUEST, _body("Bad Request", error.details)
    if isinstance(error, SignatureRequiredError):
        return HTTP_BAD_REQUEST, _body("Invalid webhook signature", "Webhook signature required")
    if isinstance(error, SignatureFailureError):
        return HTTP_BAD_REQUEST, _body("Invalid webhook signature", "Invalid webhook signature")
    if isinstance(error, ConfigurationError):
        return HTTP_BAD_REQUEST, _body("Invalid config", error.details or error.reason)
    if isinstance(error, NotionRequestFailureError):
        return HTTP_BAD_REQUEST, _body("Notion request failure", error.reason)

    raise TypeError(f"Unhandled failure kind: {type(error).__name__}")


def _body(error: str, details: Optional[Any]) -> Dict[str, Any]:
    return {"error": error, "details": details}
