"""
Airtable REST API client for reading property listings.

Read-only: the bot never writes back to Airtable.
"""
import httpx
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

AIRTABLE_API_BASE_URL = "https://api.airtable.com/v0"


class AirtableAPIError(Exception):
    """Exception raised when an Airtable request fails"""
    def __init__(self, message: str, status_code: Optional[int] = None, error_type: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(self.message)


class AirtableAuthorizationError(AirtableAPIError):
    """The token is missing, invalid or lacks access to the base (HTTP 401/403)"""


class AirtableNotFoundError(AirtableAPIError):
    """The base or table does not exist (HTTP 404)"""


def equals_formula(column: str, value: str) -> str:
    """
    Build a filterByFormula expression matching one column exactly.

    Example:
        equals_formula("area", "Nusa Dua")
        # Returns: "{area} = 'Nusa Dua'"
    """
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"{{{column}}} = '{escaped}'"


class AirtableClient:
    """
    Client for the Airtable REST API.

    Handles listing records from a table with an optional filter formula.
    Errors are classified by HTTP status so callers can react to an
    authorization failure differently from a network failure.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        base_id: str,
        timeout: float = 10.0,
        logger_instance: logging.Logger = logger
    ):
        """
        Initialize Airtable API client.

        Args:
            http_client: httpx AsyncClient for making HTTP requests
            api_key: Airtable personal access token
            base_id: Airtable base ID (app...)
            timeout: Per-request timeout in seconds
            logger_instance: Logger for tracking API calls
        """
        self._http_client = http_client
        self._api_key = api_key
        self._base_id = base_id
        self._timeout = timeout
        self._logger = logger_instance

    async def list_records(
        self,
        table: str,
        filter_formula: Optional[str] = None,
        max_records: int = 10
    ) -> List[Dict[str, Any]]:
        """
        List records from a table.

        Args:
            table: Table name or ID
            filter_formula: Optional filterByFormula expression
            max_records: Upper bound on returned records

        Returns:
            Raw records in the order Airtable returned them:
            [{"id": "rec...", "createdTime": "...", "fields": {...}}, ...]

        Raises:
            AirtableAuthorizationError: On HTTP 401/403
            AirtableNotFoundError: On HTTP 404
            AirtableAPIError: On any other failure, including timeouts
        """
        if not table or not table.strip():
            raise ValueError("table cannot be empty")

        url = f"{AIRTABLE_API_BASE_URL}/{quote(self._base_id, safe='')}/{quote(table, safe='')}"
        params: Dict[str, Any] = {"maxRecords": max_records}
        if filter_formula:
            params["filterByFormula"] = filter_formula

        self._logger.info(f"Querying Airtable table '{table}' (maxRecords={max_records}, filtered={bool(filter_formula)})")

        try:
            response = await self._http_client.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout
            )
        except httpx.TimeoutException as e:
            self._logger.error(f"❌ Airtable request timeout for table '{table}': {e}")
            raise AirtableAPIError(f"Request timeout: {str(e)}") from e
        except httpx.RequestError as e:
            self._logger.error(f"❌ Airtable request error for table '{table}': {e}")
            raise AirtableAPIError(f"Request error: {str(e)}") from e

        if response.status_code == 200:
            try:
                data = response.json()
            except ValueError as e:
                raise AirtableAPIError("Invalid API response: body is not JSON", status_code=200) from e

            records = data.get("records") if isinstance(data, dict) else None
            if not isinstance(records, list):
                raise AirtableAPIError("Invalid API response: missing records", status_code=200)

            self._logger.info(f"✅ Airtable returned {len(records)} record(s) from '{table}'")
            return records

        error_type, error_message = self._parse_error(response)
        self._logger.error(
            f"❌ Airtable API error - "
            f"status: {response.status_code}, "
            f"type: {error_type}, "
            f"message: {error_message}, "
            f"table: {table}"
        )

        if response.status_code in (401, 403):
            error_class = AirtableAuthorizationError
        elif response.status_code == 404:
            error_class = AirtableNotFoundError
        else:
            error_class = AirtableAPIError

        raise error_class(
            f"Airtable API error: {error_message}",
            status_code=response.status_code,
            error_type=error_type
        )

    @staticmethod
    def _parse_error(response: httpx.Response):
        """Extract (type, message) from an Airtable error body.

        Airtable returns either {"error": {"type": ..., "message": ...}}
        or {"error": "NOT_FOUND"}.
        """
        try:
            body = response.json() if response.text else None
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None

        if isinstance(error, dict):
            return error.get("type"), error.get("message", "Unknown error")
        if isinstance(error, str):
            return error, error
        return None, "Unknown error"
