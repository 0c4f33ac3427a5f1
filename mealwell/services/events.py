"""
In-process domain events for order lifecycle side effects
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderDelivered:
    """Published once when an order reaches the delivered status"""
    order_id: int
    chef_id: int
    item_count: int


class EventBus:
    """
    Synchronous publish/subscribe dispatcher.

    Handlers run inside the publisher's database transaction, so a failing
    handler rolls back the change that raised the event. Services that work
    on the same orders share one bus by passing it in.
    """

    def __init__(self):
        self._handlers: Dict[Type, List[Callable]] = defaultdict(list)

    def subscribe(self, event_type: Type, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event) -> None:
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.debug(f"No handlers registered for {type(event).__name__}")
        for handler in handlers:
            handler(event)
