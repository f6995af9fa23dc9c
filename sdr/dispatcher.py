"""
Outbound delivery boundary.

The engine never talks to a carrier or voice provider directly. It hands
rendered content to a ``Dispatcher`` and gets back a result envelope:

    {"ok": bool, "channel": "sms", "destination": "+1...", "duration_ms": int, ...}
"""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional

from sdr.models import EventType, Prospect
from sdr.runtime import get_logger, iso_now

logger = get_logger(__name__)


def _std_envelope(ok: bool, channel: EventType, destination: str, started_at: float, **extra: Any) -> Dict[str, Any]:
    return {
        "ok": ok,
        "channel": channel.value,
        "destination": destination,
        "duration_ms": int((time.time() - started_at) * 1000),
        **extra,
    }


def destination_for(channel: EventType, prospect: Prospect) -> str:
    """Email address for email events, phone for everything else."""
    return prospect.email if channel is EventType.EMAIL else prospect.phone


class Dispatcher:
    """Delivery capability. Subclasses implement ``deliver``."""

    def send(self, channel: EventType, destination: str, content: str, subject: Optional[str] = None) -> Dict[str, Any]:
        started = time.time()
        extra = self.deliver(channel, destination, content, subject) or {}
        return _std_envelope(True, channel, destination, started, **extra)

    def deliver(
        self, channel: EventType, destination: str, content: str, subject: Optional[str]
    ) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class LoggingDispatcher(Dispatcher):
    """Default for local runs: log instead of delivering."""

    def deliver(self, channel, destination, content, subject):
        if subject:
            logger.info("📤 [%s] -> %s | %s | %s", channel.value, destination, subject, content)
        else:
            logger.info("📤 [%s] -> %s | %s", channel.value, destination, content)
        return None


class OutboxDispatcher(Dispatcher):
    """Keeps every send in memory; used by the demo and tests."""

    def __init__(self) -> None:
        self.outbox: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def deliver(self, channel, destination, content, subject):
        entry = {
            "channel": channel,
            "destination": destination,
            "content": content,
            "subject": subject,
            "sent_at": iso_now(),
        }
        with self._lock:
            self.outbox.append(entry)
        return {"outbox_size": len(self.outbox)}

    def for_destination(self, destination: str) -> List[Dict[str, Any]]:
        return [e for e in self.outbox if e["destination"] == destination]

    def clear(self) -> None:
        with self._lock:
            self.outbox.clear()
