"""Core module containing configuration and security utilities."""

from hubhook.core.config import Settings, load_settings
from hubhook.core.security import SignedPayload, sign_payload, verify_signature

__all__ = [
    "Settings",
    "SignedPayload",
    "load_settings",
    "sign_payload",
    "verify_signature",
]
