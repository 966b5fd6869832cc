"""
Webhook signature verification.

GitHub signs each delivery with HMAC-SHA256 over the raw body and sends
``sha256=<hex>`` in ``X-Hub-Signature-256``. The digest must be computed over
the bytes as received; re-serializing parsed JSON can change them.
"""

import hashlib
import hmac
from typing import Optional

from github_notion.errors import SignatureFailureError, SignatureRequiredError
from github_notion.utils.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the ``sha256=<hex>`` signature of a body."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes, signature: str, secret: str) -> None:
    """
    Verify a delivery signature with a constant-time comparison.

    Args:
        body: Raw request body
        signature: Value of the signature header
        secret: Shared webhook secret

    Raises:
        SignatureFailureError: If the signature is malformed or does not match
    """
    expected = compute_signature(body, secret)
    if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
        logger.warning("Invalid webhook signature received")
        raise SignatureFailureError("Invalid webhook signature")


def authenticate_delivery(
    body: bytes,
    signature: Optional[str],
    secret: str,
    signature_required: bool,
) -> None:
    """
    Apply the signature policy to a delivery.

    A present signature is always verified. An absent one is accepted only
    when ``signature_required`` is false (development environment).

    Raises:
        SignatureRequiredError: If the signature is absent but required
        SignatureFailureError: If the signature does not match
    """
    if signature:
        verify_signature(body, signature, secret)
        return

    if signature_required:
        logger.warning("Webhook signature missing")
        raise SignatureRequiredError("Webhook signature required")

    logger.info("Webhook signature absent; accepted in development environment")
