"""
Security utilities for webhook signature validation.

This module provides HMAC SHA-256 signature verification for
platform webhook payloads to ensure authenticity. The platform
signs the raw request body with the app secret and sends the
result in the X-Hub-Signature-256 header as ``sha256=<hex_digest>``.

Everything here is pure: no I/O, no logging, no shared state.
Callers decide what to log and how to answer a failed check.
"""

import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_ALGORITHM = "sha256"
SIGNATURE_PREFIX = f"{SIGNATURE_ALGORITHM}="

_DIGEST_SIZE = hashlib.sha256().digest_size


def _compute_digest(payload: bytes, secret: str) -> bytes:
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=payload,
        digestmod=hashlib.sha256,
    ).digest()


def _decode_claimed_digest(signature: str) -> Optional[bytes]:
    """Strip the algorithm prefix and decode the hex digest, or return None."""
    if signature.startswith(SIGNATURE_PREFIX):
        hex_digest = signature[len(SIGNATURE_PREFIX):]
    elif "=" in signature:
        # Some other algorithm, e.g. the legacy sha1= header format
        return None
    else:
        hex_digest = signature

    if len(hex_digest) != _DIGEST_SIZE * 2:
        return None

    try:
        return bytes.fromhex(hex_digest)
    except ValueError:
        return None


def verify_signature(
    payload: bytes,
    signature: Optional[str],
    secret: Optional[str],
) -> bool:
    """
    Verify a webhook HMAC SHA-256 signature.

    The expected signature is computed over the exact bytes received,
    never over a re-serialized JSON body, and compared against the
    claimed one with a constant-time comparison.

    Args:
        payload: The raw request body bytes.
        signature: The X-Hub-Signature-256 header value.
        secret: The app secret shared with the platform.

    Returns:
        bool: True if the signature is valid. Empty inputs, malformed
        hex and digests of the wrong length all yield False; this
        function never raises.

    Example:
        >>> body = b'{"a":1}'
        >>> verify_signature(body, sign_payload(body, "mysecret"), "mysecret")
        True
    """
    if not signature or not secret:
        return False

    claimed = _decode_claimed_digest(signature)
    if claimed is None:
        return False

    try:
        expected = _compute_digest(payload, secret)
    except UnicodeEncodeError:
        return False

    # Use constant-time comparison to prevent timing attacks
    return hmac.compare_digest(claimed, expected)


def sign_payload(payload: bytes, secret: str) -> str:
    """
    Generate a webhook signature the way the platform does.

    Args:
        payload: The request body bytes.
        secret: The app secret.

    Returns:
        str: The signature in format sha256=<hex_digest>.
    """
    return f"{SIGNATURE_PREFIX}{_compute_digest(payload, secret).hex()}"


@dataclass(frozen=True)
class SignedPayload:
    """A single delivery to be checked: body, claimed signature and secret."""

    body: bytes
    signature: Optional[str]
    secret: Optional[str]

    def verify(self) -> bool:
        """Return True if the signature matches the body under the secret."""
        return verify_signature(self.body, self.signature, self.secret)
