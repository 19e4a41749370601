"""
Event dispatcher - turns one inbound event into the replies to send.

The dispatcher never sends anything itself; the webhook hands its result to
LineClient. It is also the error boundary: anything that goes wrong while
building a reply becomes the profile's failure text, so one bad event cannot
break the rest of a webhook batch.
"""
import logging
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from app.domain.events import (
    FollowEvent,
    InboundEvent,
    PostbackEvent,
    TextMessageEvent,
    UnfollowEvent,
)
from app.domain.messages import ReplyMessage, TextMessage
from app.rules.rule_table import BotProfile, ReplyContext
from app.templates.flex import CardContext

logger = logging.getLogger(__name__)


def parse_postback_data(data: str) -> Optional[Tuple[str, Dict[str, str]]]:
    """
    Split "key=value[&key=value...]" postback data.

    Returns:
        (first key, all params) or None when the data has no key=value pair

    Example:
        parse_postback_data("action=buy&product=a")
        # Returns: ("action", {"action": "buy", "product": "a"})
    """
    if "=" not in data:
        return None
    pairs = parse_qsl(data, keep_blank_values=True)
    if not pairs or not pairs[0][0]:
        return None
    params: Dict[str, str] = {}
    for key, value in pairs:
        params.setdefault(key, value)
    return pairs[0][0], params


class Dispatcher:
    """
    Resolves inbound events against a bot profile.

    Usage:
        dispatcher = Dispatcher(BALI_PROFILE, card_context, property_lookup=service)
        replies = await dispatcher.dispatch(event)
    """

    def __init__(
        self,
        profile: BotProfile,
        card_context: CardContext,
        property_lookup=None
    ):
        """
        Initialize the dispatcher.

        Args:
            profile: Rules and fixed replies for this bot
            card_context: Deployment values used by the card templates
            property_lookup: Optional PropertyLookupService for area postbacks
        """
        self.profile = profile
        self.card_context = card_context
        self.reply_context = ReplyContext(cards=card_context, property_lookup=property_lookup)

    async def dispatch(self, event: InboundEvent) -> List[ReplyMessage]:
        """
        Build the replies for one event.

        Args:
            event: Parsed inbound event

        Returns:
            Messages to send with the event's reply token, in order. Empty
            for unfollow and unsupported events (nothing to reply to).
        """
        try:
            if isinstance(event, TextMessageEvent):
                return [self._reply_to_text(event.text)]

            if isinstance(event, PostbackEvent):
                logger.info("📨 Postback received")
                return [await self._reply_to_postback(event.data)]

            if isinstance(event, FollowEvent):
                logger.info(f"👋 New follower: {event.source_user_id}")
                return [TextMessage(self.profile.welcome_text)]

            if isinstance(event, UnfollowEvent):
                logger.info(f"User {event.source_user_id} unfollowed")
                return []

            if event.event_type == "postback:invalid":
                logger.warning("⚠️ Postback event without data")
                return [TextMessage(self.profile.unknown_postback_text)]

            logger.info(f"ℹ️ Skipped unsupported event type: {event.event_type}")
            return []

        except Exception as e:
            # Log error but still answer the user
            logger.error(f"❌ Error building reply for {type(event).__name__}: {e}", exc_info=True)
            return [TextMessage(self.profile.failure_text)]

    def _reply_to_text(self, text: str) -> ReplyMessage:
        rule = self.profile.text_rules.first_match(text)
        if rule is None:
            logger.info("No reply rule matched, echoing message")
            return TextMessage(f"{self.profile.echo_prefix}{text}")
        return rule.produce(self.card_context)

    async def _reply_to_postback(self, data: str) -> ReplyMessage:
        # Exact action labels take priority over key=value routes
        rule = self.profile.action_rules.first_match(data)
        if rule is not None:
            return rule.produce(self.card_context)

        parsed = parse_postback_data(data)
        if parsed is not None:
            key, params = parsed
            route = self.profile.postback_routes.get(key)
            if route is not None:
                logger.info(f"🔀 Routing postback to '{key}' handler")
                return await route(params[key], params, self.reply_context)

        logger.warning("⚠️ Postback data did not match any action or route")
        return TextMessage(self.profile.unknown_postback_text)
