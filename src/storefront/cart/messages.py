"""Transient per-item status messages shown after a cart mutation.

Each cart item shows at most one message. A message disappears on its own
after ``MESSAGE_TTL_SECONDS``; posting a newer message for the same item
cancels the older message's expiry task before scheduling its own, so a stale
timer can never clear the newer text.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import structlog

logger = structlog.get_logger(__name__)

MESSAGE_TTL_SECONDS = 3.0


class MessageKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class PendingMessage:
    item_id: str
    text: str
    kind: MessageKind


class MessageBoard:
    """Holds the visible message per item and the timer that will expire it."""

    def __init__(self, ttl: float = MESSAGE_TTL_SECONDS) -> None:
        self.ttl = ttl
        self._messages: dict[str, PendingMessage] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    @property
    def messages(self) -> MappingProxyType:
        return MappingProxyType(self._messages)

    def get(self, item_id: str) -> PendingMessage | None:
        return self._messages.get(item_id)

    def post(self, item_id: str, text: str, kind: MessageKind) -> PendingMessage:
        """Show ``text`` for ``item_id``, replacing any message already shown.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._cancel(item_id)

        message = PendingMessage(item_id=item_id, text=text, kind=kind)
        self._messages[item_id] = message
        self._timers[item_id] = loop.call_later(self.ttl, self._expire, item_id)
        return message

    def clear(self) -> None:
        """Drop every message and cancel every pending expiry."""
        for item_id in list(self._timers):
            self._cancel(item_id)
        self._messages.clear()

    def _cancel(self, item_id: str) -> None:
        timer = self._timers.pop(item_id, None)
        if timer is not None:
            timer.cancel()

    def _expire(self, item_id: str) -> None:
        self._timers.pop(item_id, None)
        message = self._messages.pop(item_id, None)
        if message is not None:
            logger.debug("Cart message expired", item_id=item_id, kind=message.kind.value)
