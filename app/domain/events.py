"""
Inbound LINE webhook events.

One webhook delivery carries a list of event objects. parse_event() turns each
raw event into one of the variants below so the dispatcher can branch on type
instead of digging through nested dictionaries.

The reply token is a one-shot capability: it is handed to the reply API once
and never inspected.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextMessageEvent:
    reply_token: Optional[str]
    source_user_id: Optional[str]
    text: str


@dataclass(frozen=True)
class PostbackEvent:
    reply_token: Optional[str]
    source_user_id: Optional[str]
    data: str


@dataclass(frozen=True)
class FollowEvent:
    reply_token: Optional[str]
    source_user_id: Optional[str]


@dataclass(frozen=True)
class UnfollowEvent:
    """Unfollow events never carry a reply token."""

    reply_token: Optional[str]
    source_user_id: Optional[str]


@dataclass(frozen=True)
class OtherEvent:
    reply_token: Optional[str]
    source_user_id: Optional[str]
    event_type: str


InboundEvent = Union[TextMessageEvent, PostbackEvent, FollowEvent, UnfollowEvent, OtherEvent]


def parse_event(raw: Dict[str, Any]) -> InboundEvent:
    """
    Convert a single LINE webhook event object into an InboundEvent.

    Args:
        raw: One element of the webhook body's "events" array

    Returns:
        The matching event variant. Shapes we do not handle (images, stickers,
        joins, beacons, ...) become OtherEvent rather than raising.

    Example:
        parse_event({
            "type": "postback",
            "replyToken": "b60d432864f44d079f6d8efe86cf404b",
            "source": {"type": "user", "userId": "U4af4980629..."},
            "postback": {"data": "area=canggu"}
        })
        # Returns: PostbackEvent(reply_token="b60d...", source_user_id="U4af...", data="area=canggu")
    """
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring non-object webhook event: {type(raw).__name__}")
        return OtherEvent(reply_token=None, source_user_id=None, event_type="invalid")

    event_type = raw.get("type") or "unknown"
    reply_token = raw.get("replyToken")
    source = raw.get("source") or {}
    user_id = source.get("userId") if isinstance(source, dict) else None

    if event_type == "message":
        message = raw.get("message")
        if not isinstance(message, dict):
            message = {}
        if message.get("type") == "text" and isinstance(message.get("text"), str):
            return TextMessageEvent(reply_token=reply_token, source_user_id=user_id, text=message["text"])
        return OtherEvent(
            reply_token=reply_token,
            source_user_id=user_id,
            event_type=f"message:{message.get('type', 'unknown')}"
        )

    if event_type == "postback":
        postback = raw.get("postback")
        data = postback.get("data") if isinstance(postback, dict) else None
        if isinstance(data, str):
            return PostbackEvent(reply_token=reply_token, source_user_id=user_id, data=data)
        return OtherEvent(reply_token=reply_token, source_user_id=user_id, event_type="postback:invalid")

    if event_type == "follow":
        return FollowEvent(reply_token=reply_token, source_user_id=user_id)

    if event_type == "unfollow":
        return UnfollowEvent(reply_token=None, source_user_id=user_id)

    return OtherEvent(reply_token=reply_token, source_user_id=user_id, event_type=event_type)
