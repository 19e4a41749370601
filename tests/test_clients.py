"""
Tests for the LINE and Airtable HTTP clients.

Requests are answered by httpx.MockTransport; nothing leaves the process.
"""
import json
import logging

import httpx
import pytest

from app.clients.airtable_client import (
    AirtableAPIError,
    AirtableAuthorizationError,
    AirtableClient,
    AirtableNotFoundError,
    equals_formula,
)
from app.clients.line_client import LineAPIError, LineClient
from app.domain.messages import TextMessage


def _http_client(handler, requests):
    def record(request):
        requests.append(request)
        return handler(request)
    return httpx.AsyncClient(transport=httpx.MockTransport(record))


class TestLineClient:
    """Test reply API calls"""

    @pytest.mark.asyncio
    async def test_reply_payload(self):
        requests = []
        async with _http_client(lambda request: httpx.Response(200, json={}), requests) as http_client:
            client = LineClient(http_client, channel_access_token="line-token")
            await client.reply_message("reply-1", [TextMessage("one"), TextMessage("two")])

        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == "https://api.line.me/v2/bot/message/reply"
        assert request.headers["Authorization"] == "Bearer line-token"
        assert json.loads(request.content) == {
            "replyToken": "reply-1",
            "messages": [{"type": "text", "text": "one"}, {"type": "text", "text": "two"}],
        }

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        requests = []
        response = httpx.Response(400, json={"message": "Invalid reply token", "details": []})
        async with _http_client(lambda request: response, requests) as http_client:
            client = LineClient(http_client, channel_access_token="line-token")

            with pytest.raises(LineAPIError) as exc_info:
                await client.reply_message("expired", [TextMessage("hi")])

        assert exc_info.value.status_code == 400
        assert "Invalid reply token" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _http_client(handler, []) as http_client:
            client = LineClient(http_client, channel_access_token="line-token")

            with pytest.raises(LineAPIError):
                await client.reply_message("reply-1", [TextMessage("hi")])

    @pytest.mark.asyncio
    async def test_dry_run_without_token(self):
        requests = []
        async with _http_client(lambda request: httpx.Response(200), requests) as http_client:
            client = LineClient(http_client, channel_access_token="")
            await client.reply_message("reply-1", [TextMessage("hi")])

        assert not client.enabled
        assert requests == []

    @pytest.mark.asyncio
    async def test_rejects_invalid_arguments(self):
        async with _http_client(lambda request: httpx.Response(200), []) as http_client:
            client = LineClient(http_client, channel_access_token="line-token")

            with pytest.raises(ValueError):
                await client.reply_message("", [TextMessage("hi")])
            with pytest.raises(ValueError):
                await client.reply_message("reply-1", [])
            with pytest.raises(ValueError):
                await client.reply_message("reply-1", [TextMessage(str(i)) for i in range(6)])


class TestEqualsFormula:
    """Test filterByFormula construction"""

    def test_simple_value(self):
        assert equals_formula("area", "Nusa Dua") == "{area} = 'Nusa Dua'"

    def test_quotes_are_escaped(self):
        assert equals_formula("area", "O'Hara") == "{area} = 'O\\'Hara'"


class TestAirtableClient:
    """Test record listing and error classification"""

    @pytest.mark.asyncio
    async def test_list_records_request(self):
        requests = []
        rows = [{"id": "rec1", "fields": {"Name": "Villa A"}}, {"id": "rec2", "fields": {"Name": "Villa B"}}]
        async with _http_client(lambda request: httpx.Response(200, json={"records": rows}), requests) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")
            records = await client.list_records("Properties", filter_formula="{area} = 'Kuta'", max_records=5)

        assert records == rows
        request = requests[0]
        assert request.url.path == "/v0/appBASE/Properties"
        assert request.url.params["filterByFormula"] == "{area} = 'Kuta'"
        assert request.url.params["maxRecords"] == "5"
        assert request.headers["Authorization"] == "Bearer pat-key"

    @pytest.mark.asyncio
    async def test_unfiltered_request_has_no_formula(self):
        requests = []
        async with _http_client(lambda request: httpx.Response(200, json={"records": []}), requests) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")
            assert await client.list_records("Properties") == []

        assert "filterByFormula" not in requests[0].url.params

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code,error_class", [
        (401, AirtableAuthorizationError),
        (403, AirtableAuthorizationError),
        (404, AirtableNotFoundError),
    ])
    async def test_error_classification(self, status_code, error_class):
        body = {"error": {"type": "AUTHENTICATION_REQUIRED", "message": "Authentication required"}}
        async with _http_client(lambda request: httpx.Response(status_code, json=body), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(error_class) as exc_info:
                await client.list_records("Properties")

        assert exc_info.value.status_code == status_code
        assert exc_info.value.error_type == "AUTHENTICATION_REQUIRED"

    @pytest.mark.asyncio
    async def test_string_error_body(self):
        async with _http_client(lambda request: httpx.Response(404, json={"error": "NOT_FOUND"}), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(AirtableNotFoundError) as exc_info:
                await client.list_records("Missing")

        assert exc_info.value.error_type == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_other_status_is_generic_error(self):
        body = {"error": {"type": "INVALID_FILTER_BY_FORMULA", "message": "Invalid formula"}}
        async with _http_client(lambda request: httpx.Response(422, json=body), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(AirtableAPIError) as exc_info:
                await client.list_records("Properties")

        assert type(exc_info.value) is AirtableAPIError
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_timeout_is_generic_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _http_client(handler, []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(AirtableAPIError) as exc_info:
                await client.list_records("Properties")

        assert not isinstance(exc_info.value, AirtableAuthorizationError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_malformed_success_body(self):
        async with _http_client(lambda request: httpx.Response(200, json={"rows": []}), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(AirtableAPIError):
                await client.list_records("Properties")

    @pytest.mark.asyncio
    async def test_empty_table_name_rejected(self):
        async with _http_client(lambda request: httpx.Response(200), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(ValueError):
                await client.list_records("  ")


class TestMalformedResponses:
    """Test error bodies that are not JSON objects"""

    @pytest.mark.asyncio
    async def test_airtable_error_body_that_is_a_list(self):
        async with _http_client(lambda request: httpx.Response(502, json=["bad gateway"]), []) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")

            with pytest.raises(AirtableAPIError) as exc_info:
                await client.list_records("Properties")

        assert type(exc_info.value) is AirtableAPIError
        assert exc_info.value.status_code == 502
        assert exc_info.value.error_type is None

    @pytest.mark.asyncio
    async def test_line_error_body_that_is_a_list(self):
        async with _http_client(lambda request: httpx.Response(500, json=["oops"]), []) as http_client:
            client = LineClient(http_client, channel_access_token="line-token")

            with pytest.raises(LineAPIError) as exc_info:
                await client.reply_message("reply-1", [TextMessage("hi")])

        assert exc_info.value.status_code == 500
        assert exc_info.value.response_body == {}


class TestAirtableTableNames:
    """Test table names are escaped into a single path segment"""

    @pytest.mark.asyncio
    async def test_reserved_characters_are_quoted(self):
        requests = []
        async with _http_client(lambda request: httpx.Response(200, json={"records": []}), requests) as http_client:
            client = AirtableClient(http_client, api_key="pat-key", base_id="appBASE")
            await client.list_records("Sales/Rentals #2?", max_records=1)

        raw_path = requests[0].url.raw_path.split(b"?")[0]
        assert raw_path == b"/v0/appBASE/Sales%2FRentals%20%232%3F"
        assert requests[0].url.params["maxRecords"] == "1"


class TestLineDryRunLogging:
    """Test dry-run mode keeps message content out of the logs"""

    @pytest.mark.asyncio
    async def test_reply_text_not_logged(self, caplog):
        caplog.set_level(logging.DEBUG)
        async with _http_client(lambda request: httpx.Response(200), []) as http_client:
            client = LineClient(http_client, channel_access_token="")
            await client.reply_message("reply-1", [TextMessage("メッセージを受信しました: my secret plans")])

        assert "my secret plans" not in caplog.text
        assert "[dry-run]" in caplog.text
