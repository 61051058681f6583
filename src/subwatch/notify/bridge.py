"""Push bridge client.

Batched alerts are POSTed as one JSON object whose keys are synthetic group
ids and whose values are ``{title, message, timestamp}``.
"""

import logging

import httpx

from subwatch.tracking.errors import TransportError
from subwatch.tracking.types import BridgeAlert

logger = logging.getLogger(__name__)


class BridgeClient:
    """Authenticated HTTP client for the push bridge.

    Delivery is fire-and-forget: non-2xx responses are logged, not retried.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._url = url
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._url

    async def send(self, alerts: dict[str, BridgeAlert]) -> httpx.Response | None:
        """POST the alerts; an empty mapping makes no request.

        Raises:
            TransportError: On connection failures and timeouts.
        """
        if not alerts:
            return None

        payload = {key: alert.to_dict() for key, alert in alerts.items()}
        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Bridge request failed: {e}") from e

        if response.is_success:
            logger.info("bridge_alerts_sent", extra={"bridge.alert_count": len(alerts)})
        else:
            logger.warning(
                "bridge_rejected_alerts",
                extra={
                    "http.status_code": response.status_code,
                    "bridge.alert_count": len(alerts),
                },
            )
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
