"""Identity-provider webhook: keeps local users in step with sign-ups and sign-ins."""

import base64
import hashlib
import hmac
import time
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import UnauthorizedError, ValidationError
from app.core.logging import logger
from app.schemas import IdentityWebhookEvent, WebhookResponse
from app.services.user_service import profile_from_event, user_service

router = APIRouter()

SYNCED_EVENTS = ("user.created", "session.created")

# Seconds a signed delivery stays valid, either side of now
SIGNATURE_TOLERANCE = 5 * 60


def _signing_key(secret: str) -> bytes:
    if secret.startswith("whsec_"):
        return base64.b64decode(secret[len("whsec_"):])
    return secret.encode()


def sign_payload(secret: str, message_id: str, timestamp: str, body: bytes) -> str:
    """Signature for one delivery, in the ``v1,<base64>`` form the provider sends."""
    signed = f"{message_id}.{timestamp}.".encode() + body
    digest = hmac.new(_signing_key(secret), signed, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode()


def verify_signature(
    secret: str,
    message_id: Optional[str],
    timestamp: Optional[str],
    signature_header: Optional[str],
    body: bytes,
    now: Optional[float] = None,
) -> None:
    """Raise UnauthorizedError unless one of the header's signatures matches the body."""
    if not (message_id and timestamp and signature_header):
        raise UnauthorizedError("Missing webhook signature headers")
    try:
        sent_at = int(timestamp)
    except ValueError:
        raise UnauthorizedError("Invalid webhook timestamp")
    if abs((now if now is not None else time.time()) - sent_at) > SIGNATURE_TOLERANCE:
        raise UnauthorizedError("Webhook timestamp outside the allowed window")

    expected = sign_payload(secret, message_id, timestamp, body)
    for candidate in signature_header.split():
        if hmac.compare_digest(candidate, expected):
            return
    raise UnauthorizedError("Invalid webhook signature")


@router.post("/clerk", response_model=WebhookResponse)
async def identity_webhook(
    event: IdentityWebhookEvent,
    request: Request,
    svix_id: Optional[str] = Header(None),
    svix_timestamp: Optional[str] = Header(None),
    svix_signature: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
):
    """Find-or-create the local user for ``user.created`` and ``session.created`` events.

    When a signing secret is configured, deliveries must carry a valid
    ``svix-signature`` over ``{svix-id}.{svix-timestamp}.{raw body}``.
    """
    if settings.CLERK_WEBHOOK_SECRET:
        body = await request.body()
        try:
            verify_signature(
                settings.CLERK_WEBHOOK_SECRET, svix_id, svix_timestamp, svix_signature, body
            )
        except UnauthorizedError as e:
            logger.warning(f"Rejected identity webhook {svix_id}: {e.message}")
            raise

    if event.type not in SYNCED_EVENTS:
        return {"status": "ignored"}

    if event.type == "user.created":
        clerk_id = event.data.get("id")
        profile = profile_from_event(event.data)
    else:
        clerk_id = event.data.get("user_id")
        profile = {}
    if not clerk_id:
        raise ValidationError("No user ID found")

    await user_service.find_or_create(db, clerk_id, profile)
    logger.info(f"Identity webhook {event.type} synced user {clerk_id}")
    return {"status": "user synced"}
