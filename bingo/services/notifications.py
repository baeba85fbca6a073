"""
Live notifications for match and message events.

Each logged-in user may hold one open event stream. The registry maps a user id
to the queue feeding that stream; a new connection from the same user evicts the
previous one. Delivery is best-effort: events for users without an open stream
are dropped, and nothing is persisted for later delivery.

Mutations run on the request threadpool while streams live on the event loop, so
events are handed to a stream's queue with `call_soon_threadsafe`.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy.orm import Session

from bingo.config import settings
from bingo.core.encryption import get_message_cipher
from bingo.repos import match_repo, message_repo, user_repo

logger = logging.getLogger(__name__)

EVENT_MATCH = "match"
EVENT_MESSAGE = "message"


@dataclass(eq=False)
class Channel:
    """One open stream. `None` on the queue tells the stream to close."""

    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)

    def push(self, item: dict[str, Any] | None) -> None:
        self.loop.call_soon_threadsafe(self.queue.put_nowait, item)

    def close(self) -> None:
        self.push(None)


class ConnectionRegistry:
    """user id -> currently open Channel. Last connection wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: dict[str, Channel] = {}

    def register(self, user_id: str) -> Channel:
        """Open a channel for the user. Must be called from the event loop serving the stream."""
        channel = Channel(loop=asyncio.get_running_loop())
        with self._lock:
            previous = self._channels.get(user_id)
            self._channels[user_id] = channel
        if previous is not None:
            logger.info("Notification stream replaced for user=%s", user_id)
            try:
                previous.close()
            except RuntimeError:
                # Loop of the old stream is already gone
                pass
        return channel

    def unregister(self, user_id: str, channel: Channel) -> None:
        """Drop the mapping, unless a newer connection has already replaced it."""
        with self._lock:
            if self._channels.get(user_id) is channel:
                del self._channels[user_id]

    def get(self, user_id: str) -> Channel | None:
        with self._lock:
            return self._channels.get(user_id)

    def is_connected(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def send(self, user_id: str, event: dict[str, Any]) -> bool:
        """Queue an event for the user's open stream. Returns False when no stream is open."""
        channel = self.get(user_id)
        if channel is None:
            return False
        channel.push(event)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)


def _user_summary(user) -> dict[str, Any] | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


class NotificationDispatcher:
    def __init__(self, registry: ConnectionRegistry, catchup_seconds: int = 5):
        self.registry = registry
        self.catchup_seconds = catchup_seconds

    def notify(self, user_id: str, event_type: str, data: dict[str, Any]) -> bool:
        """Push one event. Never raises; returns whether a stream accepted it."""
        try:
            delivered = self.registry.send(user_id, {"type": event_type, "data": data})
            if delivered:
                logger.debug("Notification %s queued for user=%s", event_type, user_id)
            return delivered
        except Exception as e:
            logger.warning("Notification %s to user=%s failed: %s", event_type, user_id, e)
            return False

    def check_for_new_notifications(self, db: Session, user_id: str, is_coach: bool) -> int:
        """
        Catch-up sweep run after a mutation that concerns `user_id`: re-send every pending
        match and every message received within the trailing window. May repeat events
        across overlapping sweeps. Returns the number of events queued; never raises.
        """
        if not self.registry.is_connected(user_id):
            return 0
        sent = 0
        try:
            matches = (
                match_repo.get_for_coach(db, user_id, status="pending")
                if is_coach
                else match_repo.get_for_seeker(db, user_id, status="pending")
            )
            for match in matches:
                other_id = match.seeker_id if is_coach else match.coach_id
                data = {
                    "match_id": match.id,
                    "status": match.status,
                    "other_user": _user_summary(user_repo.get_by_id(db, other_id)),
                }
                sent += self.notify(user_id, EVENT_MATCH, data)

            since = datetime.now(timezone.utc) - timedelta(seconds=self.catchup_seconds)
            recent = message_repo.get_recent_received(db, user_id, since)
            if recent:
                cipher = get_message_cipher()
                for message in recent:
                    data = {
                        "conversation_id": message.conversation_id,
                        "message": {
                            "id": message.id,
                            "type": message.type,
                            "content": cipher.decrypt_or_placeholder(message.content, message.id),
                            "sender_id": message.sender_id,
                            "created_at": message.created_at.isoformat() if message.created_at else None,
                        },
                    }
                    sent += self.notify(user_id, EVENT_MESSAGE, data)
        except Exception as e:
            logger.exception("Notification sweep failed for user=%s: %s", user_id, e)
        return sent


connection_registry = ConnectionRegistry()
notification_dispatcher = NotificationDispatcher(connection_registry, settings.notification_catchup_seconds)
