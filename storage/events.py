"""
storage/events.py

Synchronous in-process domain events.

The caregiver send flow publishes :class:`CaregiverMessageSent`; the ticket
queue subscribes to it.  Message threads therefore never import or call the
ticket queue, and the fan-out can be exercised on its own in tests.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class DomainEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


class CaregiverMessageSent(DomainEvent):
    caregiver_id: Optional[str] = None
    caregiver_name: str = "Caregiver"
    patient_id: Optional[str] = None
    patient_name: str = ""
    text: str


Handler = Callable[[DomainEvent], None]


class EventBus:
    """
    Deliver each published event to its subscribers, in subscription order,
    before ``publish`` returns.  A failing handler propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)
