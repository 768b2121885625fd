"""ntfy implementation of the notifier interface."""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.ports.notifier import Notification, Notifier

logger = logging.getLogger(__name__)


class NtfyConfig(BaseModel):
    """Configuration for ntfy push notifications."""

    base_url: str = Field(default="https://ntfy.sh", description="ntfy server URL")
    priority: str = Field(default="default", description="Message priority")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class NtfyNotifier(Notifier):
    """Publishes notifications to an ntfy topic."""

    def __init__(
        self,
        config: Optional[NtfyConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = config or NtfyConfig()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
        return self._client

    async def send(self, notification: Notification) -> None:
        """Publish ``notification``; delivery errors are logged, never raised."""
        if not notification.topic:
            return

        url = f"{self._config.base_url.rstrip('/')}/{notification.topic}"
        try:
            response = await self._get_client().post(
                url,
                content=notification.message.encode("utf-8"),
                headers={
                    "Title": notification.title,
                    "Priority": self._config.priority,
                    "Tags": notification.tags,
                    "Click": notification.click_url,
                },
            )
            response.raise_for_status()
            logger.info(f"🔔 Notification sent to topic {notification.topic}")
        except httpx.HTTPError as e:
            logger.error(f"Error sending notification: {e}")

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
