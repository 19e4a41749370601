"""LINE webhook endpoint"""
from fastapi import APIRouter, Request, HTTPException, status, Depends
from pydantic import BaseModel, ValidationError
from typing import Any, AsyncIterator, List, Optional
from app.config import settings
from app.clients import AirtableClient, LineClient, LineAPIError
from app.domain.events import parse_event
from app.rules import get_profile
from app.services.dispatcher import Dispatcher
from app.services.property_lookup import PropertyLookupService
from app.templates.flex import CardContext
import asyncio
import base64
import hashlib
import hmac
import json
import logging
import httpx

logger = logging.getLogger(__name__)

router = APIRouter()


class WebhookBody(BaseModel):
    """LINE webhook request body"""
    destination: Optional[str] = None
    # Items stay untyped so one malformed event cannot reject the whole batch
    events: List[Any]


class WebhookResponse(BaseModel):
    """Response model for the webhook endpoint"""
    status: str
    events_processed: int


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """One HTTP client per webhook request, shared by the LINE and Airtable clients."""
    async with httpx.AsyncClient() as http_client:
        yield http_client


def build_dispatcher(http_client: httpx.AsyncClient) -> Dispatcher:
    """
    Wire a Dispatcher from settings.

    The property lookup is only configured when Airtable credentials exist;
    without them area postbacks answer "not found".
    """
    card_context = CardContext(
        base_url=settings.base_url,
        booking_form_url=settings.google_form_url,
        placeholder_image_url=settings.placeholder_image_url,
        image_version=settings.image_version
    )

    property_lookup = None
    if settings.airtable_enabled:
        airtable_client = AirtableClient(
            http_client=http_client,
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            timeout=settings.airtable_timeout
        )
        property_lookup = PropertyLookupService(
            airtable_client,
            table_name=settings.airtable_table_name,
            fallback_table_name=settings.airtable_fallback_table_name,
            max_records=settings.airtable_max_records,
            diagnostics_enabled=settings.property_lookup_diagnostics,
            demo_fallback_enabled=settings.property_demo_fallback
        )

    return Dispatcher(
        get_profile(settings.bot_profile),
        card_context,
        property_lookup=property_lookup
    )


@router.post("/webhook", response_model=WebhookResponse)
async def handle_webhook(
    request: Request,
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Webhook endpoint for receiving LINE events.

    LINE sends POST requests with a batch of events. Every event is dispatched
    concurrently and answered with its own reply token; the response waits
    until all of them are done.

    Security: Validates X-Line-Signature header to ensure requests come from LINE.
    """
    raw_body = await request.body()

    signature_header = request.headers.get("X-Line-Signature", "")
    if not _validate_webhook_signature(raw_body, signature_header):
        logger.warning("❌ Invalid webhook signature - potential security threat")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid signature"
        )

    try:
        body = WebhookBody.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        logger.warning(f"Invalid webhook payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request body"
        )

    # Log only metadata, never message content
    logger.info(f"📨 Webhook POST request received - events: {len(body.events)}")

    # LINE's "Verify" button sends an empty batch
    if not body.events:
        return WebhookResponse(status="ok", events_processed=0)

    line_client = LineClient(
        http_client=http_client,
        channel_access_token=settings.line_channel_access_token
    )
    dispatcher = build_dispatcher(http_client)

    results = await asyncio.gather(
        *(_handle_event(raw_event, dispatcher, line_client) for raw_event in body.events)
    )
    replied = sum(1 for result in results if result)

    logger.info(f"✅ Processed {len(results)} event(s), replied to {replied}")

    return WebhookResponse(status="ok", events_processed=len(results))


async def _handle_event(
    raw_event: Any,
    dispatcher: Dispatcher,
    line_client: LineClient
) -> bool:
    """
    Dispatch one event and send its replies.

    Never raises: a failure here is logged and must not affect the other
    events in the batch.

    Returns:
        True if a reply was sent, False otherwise
    """
    try:
        event = parse_event(raw_event)
        logger.info(f"Event received: {type(event).__name__}")

        messages = await dispatcher.dispatch(event)
        if not messages:
            return False

        if not event.reply_token:
            logger.warning(f"⚠️ {type(event).__name__} has replies but no reply token, dropping them")
            return False

        await line_client.reply_message(event.reply_token, messages)
        return True

    except LineAPIError as e:
        logger.error(f"❌ Failed to send reply: {e.message} (status: {e.status_code})")
        return False
    except Exception as e:
        logger.error(f"Error processing individual event: {e}", exc_info=True)
        return False


def _validate_webhook_signature(payload: bytes, signature_header: str) -> bool:
    """
    Validate the webhook signature from LINE.

    LINE signs every webhook request with HMAC-SHA256 using the channel secret
    and sends the base64-encoded digest in the X-Line-Signature header.

    Args:
        payload: Raw request body as bytes
        signature_header: Value of X-Line-Signature header

    Returns:
        True if signature is valid, False otherwise

    Security:
        - Uses constant-time comparison to prevent timing attacks
        - Always computes the digest, even for a missing header
    """
    try:
        if not signature_header:
            logger.warning("Missing signature header")
            expected_signature = "invalid"  # Will fail compare_digest below
        else:
            expected_signature = signature_header

        if not settings.line_channel_secret:
            logger.error("LINE_CHANNEL_SECRET not configured - cannot validate webhook signature")
            return False

        from app.config import DEV_SECRET_PLACEHOLDER

        if settings.line_channel_secret == DEV_SECRET_PLACEHOLDER:
            if settings.environment == "production":
                # This should never happen due to config.py validation, but double-check
                logger.error("Cannot use test secret in production - webhook validation will fail")
                return False
            logger.warning(
                "⚠️  Using test secret for webhook validation. "
                "This will fail with real LINE webhooks. "
                "Set LINE_CHANNEL_SECRET to your channel secret."
            )

        digest = hmac.new(
            settings.line_channel_secret.encode('utf-8'),
            payload,
            hashlib.sha256
        ).digest()
        computed_signature = base64.b64encode(digest).decode('utf-8')

        is_valid = hmac.compare_digest(computed_signature, expected_signature)

        if is_valid:
            logger.debug("✅ Webhook signature validated")
        else:
            logger.warning("❌ Invalid webhook signature")

        return is_valid

    except Exception as e:
        logger.error(f"Signature validation error: {e}", exc_info=True)
        return False
