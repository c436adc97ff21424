"""
Event stream route: hub events as Server-Sent Events.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from loom.events import EventHub
from loom.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_hub(request: Request) -> EventHub:
    """The hub owned by the running application."""
    return request.app.state.hub


@router.get("/events")
async def stream_events(request: Request, hub: EventHub = Depends(get_hub)):
    """
    Stream store changes using Server-Sent Events.

    Sends ``connected`` first, then one event per mutation
    (``task_created``, ``goal_linked``, ...) and a periodic ``heartbeat``.
    """

    async def event_generator():
        # Nothing is registered until the body is actually iterated
        subscription = hub.subscribe()
        logger.info(f"Event stream opened ({hub.subscriber_count} subscribers)")
        try:
            async for event in subscription.stream(hub.heartbeat_interval):
                # Check if client disconnected
                if await request.is_disconnected():
                    break
                yield event.to_sse()
        finally:
            hub.unsubscribe(subscription)
            logger.info(f"Event stream closed ({hub.subscriber_count} subscribers)")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
