"""
Webhook endpoint handlers.

GET  /  answers the platform's subscription handshake by echoing
        hub.challenge when hub.verify_token matches.
POST /  receives event deliveries, verifies the X-Hub-Signature-256
        HMAC over the raw body and acknowledges the event.
"""

import hmac
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse, Response

from hubhook.api.deps import get_settings
from hubhook.core.config import Settings
from hubhook.core.security import SIGNATURE_HEADER, SignedPayload
from hubhook.schemas.webhook import DeliveryReceipt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

SUBSCRIBE_MODE = "subscribe"


@router.get(
    "/",
    summary="Subscription Verification",
    description="Echoes hub.challenge when the verify token matches.",
    response_class=PlainTextResponse,
    responses={status.HTTP_403_FORBIDDEN: {"description": "Token mismatch"}},
)
async def verify_subscription(
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Handle the subscription challenge-response handshake.

    Args:
        mode: Value of hub.mode, must be "subscribe".
        token: Value of hub.verify_token, compared against VERIFY_TOKEN.
        challenge: Value of hub.challenge, echoed back on success.
        settings: Application settings.

    Returns:
        Response: 200 with the challenge as body, or an empty 403.
    """
    expected_token = settings.verify_token.get_secret_value()

    if not expected_token:
        logger.error("VERIFY_TOKEN is not configured, rejecting subscription")
        return Response(status_code=status.HTTP_403_FORBIDDEN)

    token_matches = token is not None and hmac.compare_digest(
        token.encode("utf-8"), expected_token.encode("utf-8")
    )

    if mode == SUBSCRIBE_MODE and token_matches:
        logger.info("WEBHOOK VERIFIED")
        return PlainTextResponse(challenge or "", status_code=status.HTTP_200_OK)

    logger.warning(f"Subscription verification failed: mode={mode!r}")
    return Response(status_code=status.HTTP_403_FORBIDDEN)


@router.post(
    "/",
    status_code=status.HTTP_200_OK,
    response_model=DeliveryReceipt,
    summary="Webhook Receiver",
    description="Receives event deliveries and verifies their signature.",
)
async def handle_event(
    request: Request,
    x_hub_signature_256: Optional[str] = Header(
        default=None,
        description="HMAC SHA-256 signature for payload verification",
    ),
    settings: Settings = Depends(get_settings),
) -> DeliveryReceipt:
    """
    Handle an incoming event delivery.

    This endpoint:
    1. Reads the raw body before any JSON parsing
    2. Validates the webhook signature (HMAC SHA-256)
    3. Applies the configured policy to a failed check
    4. Parses and logs the JSON payload

    Args:
        request: The FastAPI request object.
        x_hub_signature_256: The HMAC SHA-256 signature header.
        settings: Application settings.

    Returns:
        DeliveryReceipt: Acknowledgement of the delivery.

    Raises:
        HTTPException: 401 if signature validation fails and rejection is enabled.
        HTTPException: 400 if payload parsing fails.
    """
    received_at = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    logger.info(f"Webhook received {received_at}")

    # Read raw body for signature verification
    payload = await request.body()
    logger.debug(f"Raw request body: {payload.decode('utf-8', errors='replace')}")
    logger.debug(f"Request header [{SIGNATURE_HEADER}]: {x_hub_signature_256}")

    is_valid = verify_delivery(
        SignedPayload(
            body=payload,
            signature=x_hub_signature_256,
            secret=settings.app_secret.get_secret_value(),
        )
    )
    logger.info(f"verify request result: valid: {is_valid}")

    if not is_valid:
        if settings.reject_invalid_signatures:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid webhook signature",
            )
        logger.warning("Accepting delivery with invalid signature (log-only mode)")

    # Parse JSON payload
    try:
        event_payload = parse_event_body(payload)
    except (ValueError, RecursionError) as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        )

    log_event(event_payload)

    return DeliveryReceipt()


def parse_event_body(payload: bytes) -> Any:
    """
    Parse a delivery body as strict JSON.

    An empty body parses to an empty object. Only objects and arrays
    are accepted at the top level.

    Args:
        payload: The raw request body bytes.

    Returns:
        The parsed dict or list.

    Raises:
        ValueError: If the body is not JSON or the top level is a scalar.
        RecursionError: If the body nests deeper than the parser allows.
    """
    if not payload:
        return {}

    event_payload = json.loads(payload)
    if not isinstance(event_payload, (dict, list)):
        raise ValueError(
            f"Top-level JSON value must be an object or array, "
            f"got {type(event_payload).__name__}"
        )
    return event_payload


def verify_delivery(delivery: SignedPayload) -> bool:
    """
    Verify a delivery and log why a check failed.

    Args:
        delivery: Raw body, claimed signature and secret.

    Returns:
        bool: Result of the signature check.
    """
    if not delivery.secret:
        logger.error("APP_SECRET is not configured, cannot verify signature")
        return False

    if not delivery.signature:
        logger.warning(f"Missing {SIGNATURE_HEADER} header")
        return False

    is_valid = delivery.verify()
    if not is_valid:
        logger.warning("Webhook signature verification failed")
    return is_valid


def log_event(event_payload: Any) -> None:
    """Log a summary of the parsed payload, and the full body in debug."""
    if isinstance(event_payload, dict):
        entries = event_payload.get("entry")
        entry_count = len(entries) if isinstance(entries, list) else 0
        logger.info(
            f"Event: object={event_payload.get('object', 'unknown')}, "
            f"entries={entry_count}"
        )

    if not logger.isEnabledFor(logging.DEBUG):
        return

    try:
        pretty = json.dumps(event_payload, indent=2)
    except RecursionError:
        logger.debug("Parsed JSON body is too deeply nested to pretty-print")
        return
    logger.debug(f"Parsed JSON body:\n{pretty}")
