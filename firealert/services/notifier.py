# firealert/services/notifier.py
"""
Outbound WhatsApp notification for stored alerts.

The request path only calls ``schedule``; the HTTP call runs in its own task
and its outcome is visible in the logs only.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set
import httpx
from ..config import Settings
from ..errors import NotificationError

logger = logging.getLogger(__name__)

PLACEHOLDER = "N/A"


@dataclass
class DispatchResult:
    sent: bool = False
    skipped: bool = False
    status_code: Optional[int] = None
    message_id: Optional[str] = None
    error: Optional[str] = None


def _label(best: Any) -> str:
    if isinstance(best, dict) and best.get("label") not in (None, ""):
        return str(best["label"])
    return PLACEHOLDER


def _conf(best: Any) -> str:
    if not isinstance(best, dict):
        return PLACEHOLDER
    conf = best.get("conf")
    if isinstance(conf, bool) or not isinstance(conf, (int, float)):
        return PLACEHOLDER
    return f"{conf:.2f}"


def build_message(event: Dict[str, Any]) -> str:
    best = event.get("best")
    image = event.get("image_url") or event.get("snapshot_filename") or PLACEHOLDER
    return (
        "🔥 FIRE ALERT\n"
        f"Time: {event.get('timestamp') or PLACEHOLDER}\n"
        f"Score: {event.get('score') or PLACEHOLDER}\n"
        f"Label: {_label(best)}\n"
        f"Confidence: {_conf(best)}\n"
        f"Image: {image}"
    )


class NotificationDispatcher:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.client = client or httpx.AsyncClient()
        self._pending: Set[asyncio.Task] = set()

    @property
    def is_configured(self) -> bool:
        return self.settings.notifications_enabled

    @property
    def url(self) -> str:
        s = self.settings
        return f"{s.WHATSAPP_API_BASE.rstrip('/')}/{s.WHATSAPP_API_VERSION}/{s.WHATSAPP_PHONE_NUMBER_ID}/messages"

    async def _send(self, text: str) -> DispatchResult:
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": self.settings.WHATSAPP_TO,
            "type": "text",
            "text": {"preview_url": True, "body": text},
        }
        headers = {"Authorization": f"Bearer {self.settings.WHATSAPP_ACCESS_TOKEN}"}
        try:
            resp = await self.client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise NotificationError(f"request failed: {e!r}") from e

        if not resp.is_success:
            raise NotificationError(f"API returned {resp.status_code}: {resp.text[:200]}")
        try:
            message_id = resp.json()["messages"][0]["id"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise NotificationError(f"unexpected response body: {resp.text[:200]}") from e
        return DispatchResult(sent=True, status_code=resp.status_code, message_id=message_id)

    async def notify(self, event: Dict[str, Any]) -> DispatchResult:
        event_id = event.get("id") or event.get("_id")
        if not self.is_configured:
            logger.info("WhatsApp not configured; skipping notification for event %s", event_id)
            return DispatchResult(skipped=True)

        try:
            result = await self._send(build_message(event))
        except NotificationError as e:
            logger.error("WhatsApp notification failed for event %s: %s", event_id, e)
            return DispatchResult(error=str(e))
        except Exception as e:
            logger.exception("Unexpected error while notifying for event %s", event_id)
            return DispatchResult(error=repr(e))
        logger.info("WhatsApp notification sent for event %s (message %s)", event_id, result.message_id)
        return result

    def schedule(self, event: Dict[str, Any]) -> asyncio.Task:
        """Fire and forget: start notify() without waiting for it."""
        task = asyncio.create_task(self.notify(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self):
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self):
        await self.drain()
        await self.client.aclose()
