# release_tool/core/event_bus.py
"""Event bus delivering lifecycle events to registered observers"""

import inspect
import logging
from typing import Any, Callable, List, Union

from ..models.events import Event, EventType


class EventHandler:
    """Base class for event observers

    Subclasses implement ``on_<event type value>`` methods, for example
    ``on_will_start_config(self, event)``; events without a matching method
    are ignored. Handlers may be sync or async.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    async def handle_event(self, event: Event) -> None:
        """
        Dispatch an event to its specific handler method

        Args:
            event: Lifecycle event
        """
        handler = getattr(self, f"on_{event.type.value}", None)
        if handler and callable(handler):
            result = handler(event)
            if inspect.isawaitable(result):
                await result


Observer = Union[EventHandler, Callable[[Event], Any]]


class EventBus:
    """Fan-out of events to observers in registration order

    Observer failures are logged and swallowed; they never reach the job.
    """

    def __init__(self):
        self._observers: List[Observer] = []
        self.logger = logging.getLogger("EventBus")

    def register(self, observer: Observer) -> None:
        """
        Register an observer

        Args:
            observer: EventHandler instance or callable taking an Event
        """
        if not isinstance(observer, EventHandler) and not callable(observer):
            raise TypeError(f"Observer must be an EventHandler or callable, got {type(observer).__name__}")

        self._observers.append(observer)
        self.logger.debug(f"Registered observer: {_observer_name(observer)}")

    def unregister(self, observer: Observer) -> None:
        """Remove an observer"""
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observers(self) -> List[Observer]:
        return list(self._observers)

    async def publish(self, event: Event) -> None:
        """
        Deliver an event to every observer

        Args:
            event: Lifecycle event
        """
        for observer in list(self._observers):
            try:
                if isinstance(observer, EventHandler):
                    await observer.handle_event(event)
                else:
                    result = observer(event)
                    if inspect.isawaitable(result):
                        await result

            except Exception:
                self.logger.exception(
                    f"Observer {_observer_name(observer)} failed on {event.type.value}"
                )

    async def emit(self, event_type: EventType, payload) -> Event:
        """Build and publish an event"""
        event = Event(type=event_type, payload=payload)
        await self.publish(event)
        return event


def _observer_name(observer: Observer) -> str:
    if isinstance(observer, EventHandler):
        return observer.name
    return getattr(observer, "__qualname__", None) or observer.__class__.__name__
