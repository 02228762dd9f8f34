"""Input events consumed by the dashboard loop."""

import asyncio
from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class KeyEvent:
    """A key press.

    key is the terminal layer's key name ("down", "enter", "slash", "q", ...);
    character is the printable character it produced, if any.
    """

    key: str
    character: str | None = None


@dataclass(slots=True, frozen=True)
class TickEvent:
    """The refresh timer fired."""


@dataclass(slots=True, frozen=True)
class RedrawEvent:
    """The screen changed size and must be painted again."""


Event = KeyEvent | TickEvent | RedrawEvent


class EventSource(Protocol):
    """Delivers the next input event, waiting for one if necessary."""

    async def next_event(self) -> Event:
        ...


class QueueEventSource:
    """Event source fed by callbacks of the terminal layer."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Event] = asyncio.Queue()

    def put(self, event: Event) -> None:
        """Enqueue an event without blocking."""
        self._queue.put_nowait(event)

    async def next_event(self) -> Event:
        return await self._queue.get()

