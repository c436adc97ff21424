"""
Change Notification Hub

Fans "an entity changed" events out to every live subscriber, for the
Server-Sent Events stream and anything else that wants to watch the store.

Delivery is best-effort: each subscriber owns a small bounded queue and a
publish that finds it full drops the message for that subscriber only.
Publishing never blocks and never raises into the caller that triggered
the mutation.
"""

import asyncio
import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from fastapi.encoders import jsonable_encoder

from loom.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 10
DEFAULT_HEARTBEAT_INTERVAL = 30.0


@dataclass(frozen=True)
class ChangeEvent:
    """An event with its payload already serialized to JSON."""
    event_type: str
    data: str

    def to_sse(self) -> str:
        """Format as an SSE frame."""
        return f"event: {self.event_type}\ndata: {self.data}\n\n"

    def json(self) -> Any:
        return json.loads(self.data)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def heartbeat_event() -> ChangeEvent:
    return ChangeEvent("heartbeat", json.dumps({"time": _now_iso()}))


def connected_event() -> ChangeEvent:
    return ChangeEvent("connected", json.dumps({"status": "connected"}))


@dataclass(eq=False)
class Subscription:
    """
    A subscriber's handle: its bounded queue plus the loop that drains it.

    Registered -> (Delivering -> Registered)* -> Closed. Once closed the
    subscription receives nothing and its stream ends.
    """
    queue: asyncio.Queue
    loop: asyncio.AbstractEventLoop
    closed: bool = False
    dropped: int = 0
    _wakeup: asyncio.Event = field(default_factory=asyncio.Event)

    def offer(self, event: ChangeEvent) -> bool:
        """Non-blocking send. Must run on the subscription's loop."""
        if self.closed:
            return False
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.debug(f"Subscriber queue full, dropped {event.event_type} (total dropped={self.dropped})")
            return False
        return True

    def close(self) -> None:
        """Close the subscription. Safe to call from any thread."""
        if self.closed:
            return
        self.closed = True

        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if current_loop is self.loop:
            self._wakeup.set()
        elif not self.loop.is_closed():
            try:
                self.loop.call_soon_threadsafe(self._wakeup.set)
            except RuntimeError:
                # Loop closed between the check and the call
                pass

    async def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """
        Wait for the next event.

        Returns None on timeout or when the subscription is closed.
        """
        if self.closed:
            return None
        get_task = asyncio.ensure_future(self.queue.get())
        closed_task = asyncio.ensure_future(self._wakeup.wait())
        try:
            done, _ = await asyncio.wait(
                {get_task, closed_task},
                timeout=timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            closed_task.cancel()
            if not get_task.done():
                get_task.cancel()
        if get_task in done and not get_task.cancelled():
            return get_task.result()
        return None

    async def stream(self, heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL) -> AsyncIterator[ChangeEvent]:
        """
        Yield events until closed.

        Starts with a ``connected`` event, then yields a ``heartbeat`` every
        heartbeat_interval seconds whether or not events are flowing.
        """
        yield connected_event()
        loop = asyncio.get_running_loop()
        deadline = loop.time() + heartbeat_interval
        while not self.closed:
            now = loop.time()
            if now >= deadline:
                yield heartbeat_event()
                deadline += heartbeat_interval
                if deadline <= now:
                    # Consumer stalled past a whole tick
                    deadline = now + heartbeat_interval
                continue
            event = await self.get(timeout=deadline - now)
            if event is not None:
                yield event


class EventHub:
    """
    Owns the subscriber set and fans published events out to it.

    Usage:
        hub = EventHub()

        # Event-stream endpoint
        subscription = hub.subscribe()
        try:
            async for event in subscription.stream():
                yield event.to_sse()
        finally:
            hub.unsubscribe(subscription)

        # After a successful mutation
        hub.publish("task_created", task)

    The set is copy-on-write: subscribe/unsubscribe swap in a new frozenset
    under the lock, publish reads whatever snapshot is current. Publishers
    therefore never wait on each other and always see a consistent set.
    """

    def __init__(
        self,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
    ):
        self.queue_size = queue_size
        self.heartbeat_interval = heartbeat_interval
        self._subscribers: frozenset[Subscription] = frozenset()
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        """Register a new subscriber on the running event loop."""
        subscription = Subscription(
            queue=asyncio.Queue(maxsize=self.queue_size),
            loop=asyncio.get_running_loop(),
        )
        with self._lock:
            self._subscribers = self._subscribers | {subscription}
        logger.debug(f"Subscriber registered ({len(self._subscribers)} total)")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove and close a subscriber. Safe to call more than once."""
        with self._lock:
            self._subscribers = self._subscribers - {subscription}
        subscription.close()
        logger.debug(f"Subscriber removed ({len(self._subscribers)} remaining)")

    def publish(self, event_type: str, payload: Any = None) -> int:
        """
        Offer an event to every current subscriber.

        Returns how many subscribers accepted it synchronously. Offers to
        subscribers living on another thread's loop are scheduled on that
        loop and not counted.
        """
        try:
            data = json.dumps(jsonable_encoder(payload))
        except (TypeError, ValueError) as e:
            logger.error(f"Error serializing {event_type} event: {e}")
            return 0

        event = ChangeEvent(event_type, data)
        subscribers = self._subscribers

        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        delivered = 0
        for subscription in subscribers:
            if subscription.loop is current_loop:
                if subscription.offer(event):
                    delivered += 1
            elif not subscription.loop.is_closed():
                try:
                    subscription.loop.call_soon_threadsafe(subscription.offer, event)
                except RuntimeError:
                    # Loop closed between the check and the call
                    pass

        logger.debug(f"Published {event_type} to {delivered}/{len(subscribers)} subscribers")
        return delivered

    def close_all(self) -> None:
        """Close every subscriber, ending their streams."""
        with self._lock:
            subscribers, self._subscribers = self._subscribers, frozenset()
        for subscription in subscribers:
            subscription.close()
