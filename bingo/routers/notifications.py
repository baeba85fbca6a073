import asyncio
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from bingo.config import settings
from bingo.dependencies import get_connection_registry, get_current_user_id_for_stream
from bingo.services.notifications import Channel, ConnectionRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["notifications"])

HEARTBEAT = {"type": "heartbeat"}


def _sse(event: dict[str, Any]) -> bytes:
    return b"data: " + json.dumps(event, default=str).encode("utf-8") + b"\n\n"


async def event_stream(
    channel: Channel,
    heartbeat_seconds: float,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[bytes]:
    """Yield SSE frames from the channel until it is closed or the client goes away."""
    yield _sse(HEARTBEAT)
    while True:
        try:
            event = await asyncio.wait_for(channel.queue.get(), timeout=heartbeat_seconds)
        except asyncio.TimeoutError:
            if await is_disconnected():
                break
            yield _sse(HEARTBEAT)
            continue
        if event is None:
            # Replaced by a newer connection from the same user
            break
        yield _sse(event)


@router.get("")
async def stream_notifications(
    request: Request,
    user_id: str = Depends(get_current_user_id_for_stream),
    registry: ConnectionRegistry = Depends(get_connection_registry),
):
    """Open the caller's live event stream (match and message events)."""
    channel = registry.register(user_id)
    logger.info("Notification stream opened for user=%s", user_id)

    async def _gen() -> AsyncIterator[bytes]:
        try:
            async for frame in event_stream(channel, settings.notification_heartbeat_seconds, request.is_disconnected):
                yield frame
        finally:
            registry.unregister(user_id, channel)
            logger.info("Notification stream closed for user=%s", user_id)

    return StreamingResponse(
        _gen(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
