"""Events domain - domain event publishing and delivery"""

from .dispatcher import HANDLE_EVENT_JOB, EventDispatcher
from .schemas import NEWS_SUMMARY_REQUESTED, USER_CREATED, DomainEvent, PublishResult

__all__ = [
    "HANDLE_EVENT_JOB",
    "NEWS_SUMMARY_REQUESTED",
    "USER_CREATED",
    "DomainEvent",
    "EventDispatcher",
    "PublishResult",
]
