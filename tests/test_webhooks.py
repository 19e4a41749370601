"""
Tests for the LINE webhook endpoint.

Tests signature validation, payload validation and per-event reply fan-out.
"""
import base64
import hashlib
import hmac
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.webhooks import _validate_webhook_signature, get_http_client
from app.config import settings
from app.main import app

CHANNEL_SECRET = "test-channel-secret"


def _sign(body: bytes, secret: str = CHANNEL_SECRET) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def _text_event(reply_token, text):
    return {
        "type": "message",
        "replyToken": reply_token,
        "source": {"type": "user", "userId": "U123"},
        "timestamp": 1700000000000,
        "message": {"id": "1", "type": "text", "text": text},
    }


def _post(client, payload, signature=None):
    body = json.dumps(payload).encode("utf-8") if not isinstance(payload, bytes) else payload
    headers = {"Content-Type": "application/json"}
    headers["X-Line-Signature"] = signature if signature is not None else _sign(body)
    return client.post("/webhook", content=body, headers=headers)


@pytest.fixture
def line_api():
    """
    Fake LINE reply API.

    Yields a dict with the captured reply payloads; reply tokens listed in
    "fail_tokens" get a 400 response.
    """
    state = {"replies": [], "fail_tokens": set()}

    def handler(request):
        payload = json.loads(request.content)
        state["replies"].append(payload)
        if payload["replyToken"] in state["fail_tokens"]:
            return httpx.Response(400, json={"message": "Invalid reply token"})
        return httpx.Response(200, json={})

    async def override():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = override
    yield state
    app.dependency_overrides.pop(get_http_client, None)


@pytest.fixture
def client(monkeypatch, line_api):
    monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)
    monkeypatch.setattr(settings, "line_channel_access_token", "line-token")
    monkeypatch.setattr(settings, "airtable_api_key", "")
    monkeypatch.setattr(settings, "bot_profile", "bali")
    return TestClient(app)


class TestSignatureValidation:
    """Test X-Line-Signature checks"""

    def test_valid_signature(self, monkeypatch):
        monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)
        body = b'{"events":[]}'

        assert _validate_webhook_signature(body, _sign(body)) is True

    def test_signature_from_other_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)
        body = b'{"events":[]}'

        assert _validate_webhook_signature(body, _sign(body, "other-secret")) is False

    def test_tampered_body(self, monkeypatch):
        monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)

        assert _validate_webhook_signature(b'{"events":[1]}', _sign(b'{"events":[]}')) is False

    def test_missing_signature(self, monkeypatch):
        monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)

        assert _validate_webhook_signature(b"{}", "") is False

    def test_missing_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "line_channel_secret", "")

        assert _validate_webhook_signature(b"{}", _sign(b"{}", "")) is False


class TestWebhookRequests:
    """Test request handling"""

    def test_invalid_signature_rejected(self, client, line_api):
        response = _post(client, {"events": [_text_event("r1", "hello")]}, signature="bogus")

        assert response.status_code == 401
        assert line_api["replies"] == []

    def test_missing_signature_rejected(self, client):
        response = client.post("/webhook", json={"events": []})
        assert response.status_code == 401

    def test_invalid_json_rejected(self, client):
        response = _post(client, b"not json")
        assert response.status_code == 400

    def test_non_object_body_rejected(self, client):
        response = _post(client, [1, 2, 3])
        assert response.status_code == 400

    def test_missing_events_rejected(self, client):
        response = _post(client, {"destination": "U0"})
        assert response.status_code == 400

    def test_empty_batch(self, client, line_api):
        response = _post(client, {"destination": "U0", "events": []})

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "events_processed": 0}
        assert line_api["replies"] == []

    def test_text_event_gets_reply(self, client, line_api):
        response = _post(client, {"events": [_text_event("r1", "投資")]})

        assert response.status_code == 200
        assert response.json()["events_processed"] == 1
        assert len(line_api["replies"]) == 1
        reply = line_api["replies"][0]
        assert reply["replyToken"] == "r1"
        assert reply["messages"][0]["type"] == "flex"
        assert reply["messages"][0]["altText"] == "投資案件 - バイク・車レンタル事業"

    def test_each_event_uses_its_own_reply_token(self, client, line_api):
        events = [_text_event("r1", "hello"), _text_event("r2", "会社概要"), _text_event("r3", "world")]

        response = _post(client, {"events": events})

        assert response.json()["events_processed"] == 3
        replies = {reply["replyToken"]: reply["messages"] for reply in line_api["replies"]}
        assert set(replies) == {"r1", "r2", "r3"}
        assert replies["r1"] == [{"type": "text", "text": "メッセージを受信しました: hello"}]
        assert replies["r3"] == [{"type": "text", "text": "メッセージを受信しました: world"}]
        assert replies["r2"][0]["altText"] == "会社概要 - Ciputra"

    def test_failed_reply_does_not_affect_other_events(self, client, line_api):
        line_api["fail_tokens"].add("r1")
        events = [_text_event("r1", "hello"), _text_event("r2", "hello again")]

        response = _post(client, {"events": events})

        assert response.status_code == 200
        assert response.json()["events_processed"] == 2
        assert sorted(reply["replyToken"] for reply in line_api["replies"]) == ["r1", "r2"]

    def test_malformed_event_does_not_affect_other_events(self, client, line_api):
        events = [
            {"type": "message", "replyToken": "r1", "message": "not-an-object"},
            _text_event("r2", "hello"),
        ]

        response = _post(client, {"events": events})

        assert response.status_code == 200
        assert [reply["replyToken"] for reply in line_api["replies"]] == ["r2"]

    def test_unfollow_sends_nothing(self, client, line_api):
        response = _post(client, {"events": [{"type": "unfollow", "source": {"type": "user", "userId": "U1"}}]})

        assert response.status_code == 200
        assert line_api["replies"] == []

    def test_area_postback_without_airtable(self, client, line_api):
        event = {
            "type": "postback",
            "replyToken": "r1",
            "source": {"type": "user", "userId": "U1"},
            "postback": {"data": "area=kuta"},
        }

        _post(client, {"events": [event]})

        message = line_api["replies"][0]["messages"][0]
        assert message["type"] == "text"
        assert message["text"].startswith("クタエリアの物件が見つかりませんでした。")


class TestServiceEndpoints:
    """Test root and health endpoints"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["webhook_url"] == "/webhook"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
