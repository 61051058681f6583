"""Tests for the push bridge client."""

import json
import logging

import httpx
import pytest

from subwatch.notify.bridge import BridgeClient
from subwatch.tracking.errors import TransportError
from subwatch.tracking.types import BridgeAlert

ALERTS = {
    "10-0": BridgeAlert(
        title="Nautilus (+1) returned",
        message="Nautilus (Alyx Example «MOON») + 1 others returned on Nov 14, 2024, 04:59PM",
        timestamp=1731603540000,
    )
}


def recording_transport(requests: list[httpx.Request], status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json={"ok": status_code < 400})

    return httpx.MockTransport(handler)


class TestBridgeClient:
    async def test_posts_alerts_with_bearer_token(self):
        requests: list[httpx.Request] = []
        client = BridgeClient(
            "https://push.example.com/subs",
            token="bridge-secret-token",
            transport=recording_transport(requests),
        )
        try:
            response = await client.send(ALERTS)
        finally:
            await client.aclose()

        assert response is not None and response.status_code == 200
        (request,) = requests
        assert request.method == "POST"
        assert str(request.url) == "https://push.example.com/subs"
        assert request.headers["Authorization"] == "Bearer bridge-secret-token"
        assert json.loads(request.content) == {
            "10-0": {
                "title": "Nautilus (+1) returned",
                "message": ALERTS["10-0"].message,
                "timestamp": 1731603540000,
            }
        }

    async def test_without_token_sends_no_authorization(self):
        requests: list[httpx.Request] = []
        client = BridgeClient(
            "https://push.example.com/subs", transport=recording_transport(requests)
        )
        try:
            await client.send(ALERTS)
        finally:
            await client.aclose()

        assert "Authorization" not in requests[0].headers

    async def test_empty_alerts_make_no_request(self):
        requests: list[httpx.Request] = []
        client = BridgeClient(
            "https://push.example.com/subs", transport=recording_transport(requests)
        )
        try:
            assert await client.send({}) is None
        finally:
            await client.aclose()

        assert requests == []

    async def test_non_2xx_is_logged_not_raised(self, caplog):
        requests: list[httpx.Request] = []
        client = BridgeClient(
            "https://push.example.com/subs",
            transport=recording_transport(requests, status_code=503),
        )
        try:
            with caplog.at_level(logging.WARNING, logger="subwatch.notify.bridge"):
                response = await client.send(ALERTS)
        finally:
            await client.aclose()

        assert response is not None and response.status_code == 503
        assert "bridge_rejected_alerts" in caplog.messages

    async def test_connection_error_raises_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = BridgeClient(
            "https://push.example.com/subs", transport=httpx.MockTransport(handler)
        )
        try:
            with pytest.raises(TransportError, match="connection refused"):
                await client.send(ALERTS)
        finally:
            await client.aclose()

    async def test_timeout_raises_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = BridgeClient(
            "https://push.example.com/subs",
            timeout=0.1,
            transport=httpx.MockTransport(handler),
        )
        try:
            with pytest.raises(TransportError):
                await client.send(ALERTS)
        finally:
            await client.aclose()
