"""
Send customer SMS through an HTTP gateway: POST {"to", "subject", "message"} to NOTIFY_WEBHOOK_URL.
"""
import logging

import httpx

from tablebook.services.notifications.text_sink import TextNotificationSink

logger = logging.getLogger(__name__)


class WebhookNotificationSink(TextNotificationSink):
    def __init__(self, url: str, *, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self._url, json=payload, timeout=self._timeout)
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(self._url, json=payload)

    def deliver(self, phone: str, subject: str, message: str) -> bool:
        resp = self._post({"to": phone, "subject": subject, "message": message})
        if resp.is_success:
            return True
        logger.warning("SMS gateway returned %s for %s...: %s", resp.status_code, phone[:4], resp.text[:200])
        return False
