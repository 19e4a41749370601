"""
LINE Messaging API client for sending replies.

Only the reply endpoint is used: every message we send answers an inbound
event and consumes that event's reply token.
"""
import httpx
import logging
from typing import Optional, Sequence

from app.domain.messages import ReplyMessage

logger = logging.getLogger(__name__)

LINE_API_BASE_URL = "https://api.line.me/v2/bot"

# LINE accepts at most 5 message objects per reply
MAX_REPLY_MESSAGES = 5


class LineAPIError(Exception):
    """Exception raised when a LINE API request fails"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[dict] = None):
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(self.message)


class LineClient:
    """
    Client for the LINE Messaging API.

    Without a channel access token the client runs in dry-run mode: replies
    are logged instead of sent, which keeps local development usable.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        channel_access_token: str,
        logger_instance: logging.Logger = logger
    ):
        """
        Initialize LINE API client.

        Args:
            http_client: httpx AsyncClient for making HTTP requests
            channel_access_token: Long-lived channel access token
            logger_instance: Logger for tracking API calls
        """
        self._http_client = http_client
        self._channel_access_token = channel_access_token
        self._logger = logger_instance

    @property
    def enabled(self) -> bool:
        return bool(self._channel_access_token)

    async def reply_message(self, reply_token: str, messages: Sequence[ReplyMessage]) -> None:
        """
        Send reply messages for an inbound event.

        Args:
            reply_token: One-time token from the inbound event
            messages: 1 to MAX_REPLY_MESSAGES payloads, delivered in order

        Raises:
            ValueError: If reply_token is empty or messages is empty/too long
            LineAPIError: If the API request fails

        Example:
            await client.reply_message(event.reply_token, [TextMessage("Thanks!")])
        """
        if not reply_token or not reply_token.strip():
            raise ValueError("reply_token cannot be empty")

        if not messages:
            raise ValueError("messages cannot be empty")

        if len(messages) > MAX_REPLY_MESSAGES:
            raise ValueError(
                f"messages exceeds {MAX_REPLY_MESSAGES} message limit (got {len(messages)})"
            )

        payload = {
            "replyToken": reply_token,
            "messages": [message.to_dict() for message in messages]
        }

        if not self.enabled:
            # Only message types: replies may quote the user's text
            message_types = ", ".join(message["type"] for message in payload["messages"])
            self._logger.info(f"[dry-run] Reply not sent (no access token) - {len(messages)} message(s): {message_types}")
            return

        self._logger.info(f"Sending reply with {len(messages)} message(s)")

        try:
            response = await self._http_client.post(
                f"{LINE_API_BASE_URL}/message/reply",
                json=payload,
                headers={"Authorization": f"Bearer {self._channel_access_token}"},
                timeout=10.0
            )
        except httpx.TimeoutException as e:
            self._logger.error(f"❌ Request timeout sending reply: {e}")
            raise LineAPIError(f"Request timeout: {str(e)}") from e
        except httpx.RequestError as e:
            self._logger.error(f"❌ Request error sending reply: {e}")
            raise LineAPIError(f"Request error: {str(e)}") from e

        if response.status_code == 200:
            self._logger.info("✅ Reply sent successfully")
            return

        try:
            error_data = response.json() if response.text else {}
        except ValueError:
            error_data = {}
        if not isinstance(error_data, dict):
            error_data = {}
        error_message = error_data.get("message", "Unknown error")

        self._logger.error(
            f"❌ LINE API error - "
            f"status: {response.status_code}, "
            f"message: {error_message}, "
            f"details: {error_data.get('details')}"
        )

        raise LineAPIError(
            message=f"LINE API error: {error_message}",
            status_code=response.status_code,
            response_body=error_data
        )
