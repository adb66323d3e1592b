"""
Event Dispatcher
Publishes domain events as ARQ jobs and routes delivered events to handlers
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from .schemas import DomainEvent, PublishResult

logger = logging.getLogger(__name__)

# Name of the worker function every published event is delivered to
HANDLE_EVENT_JOB = "handle_domain_event_task"

EventHandler = Callable[[DomainEvent], Awaitable[Any]]


class EventDispatcher:
    """Fire-and-forget publisher plus handler registry for delivered events"""

    def __init__(self, pool_factory: Optional[Callable[[], Awaitable[Any]]] = None):
        self._pool_factory = pool_factory
        self._pool = None
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    async def _get_pool(self):
        if self._pool is None:
            if self._pool_factory is None:
                raise RuntimeError("Event bus not configured")
            self._pool = await self._pool_factory()
        return self._pool

    async def publish(
        self,
        name: str,
        payload: dict[str, Any],
        idempotency_key: Optional[str] = None,
    ) -> PublishResult:
        """
        Enqueue an event for asynchronous delivery. Does not wait for handlers.

        Args:
            name: Event name
            payload: Event data
            idempotency_key: ARQ job id for the event. Publishing again with the
                same key while the job or its result is retained queues nothing.
                Defaults to the event id.

        Returns:
            PublishResult - failures are reported, never raised
        """
        event = DomainEvent(name=name, data=dict(payload))
        job_id = idempotency_key or event.id
        try:
            pool = await self._get_pool()
            job = await pool.enqueue_job(
                HANDLE_EVENT_JOB, event.model_dump(mode="json"), _job_id=job_id
            )
        except Exception as e:
            logger.error(f"❌ Failed to publish event {name}: {e}")
            return PublishResult(success=False, event_id=event.id, job_id=job_id, error=str(e))

        if job is None:
            logger.warning(f"⚠️ Job {job_id} ({name}) already queued, skipping")
            return PublishResult(success=True, event_id=event.id, job_id=job_id, duplicate=True)

        logger.info(f"📨 Published event {name} ({event.id}) as job {job_id}")
        return PublishResult(success=True, event_id=event.id, job_id=job_id)

    def on_event(self, name: str, handler: EventHandler) -> None:
        """Register a handler for delivered events with the given name"""
        self._handlers[name].append(handler)
        logger.debug(f"Registered handler {getattr(handler, '__qualname__', handler)} for {name}")

    def handlers_for(self, name: str) -> list[EventHandler]:
        return list(self._handlers.get(name, []))

    async def deliver(self, event: DomainEvent) -> list[Any]:
        """
        Run every handler registered for the event's name.

        A failing handler is logged and does not stop the remaining handlers.
        """
        handlers = self.handlers_for(event.name)
        if not handlers:
            logger.warning(f"⚠️ No handler registered for event {event.name}, dropping {event.id}")
            return []

        results = []
        for handler in handlers:
            try:
                results.append(await handler(event))
            except Exception as e:
                logger.error(f"❌ Handler failed for event {event.name} ({event.id}): {e}")
                results.append({"status": "failed", "error": str(e)})
        return results

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
