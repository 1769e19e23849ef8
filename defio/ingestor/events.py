"""
Recorded DEF callback events and their replay.

An event names one callback of the DEF database interface together with
its positional arguments, so an event stream can be stored, inspected,
and played back into any database.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from defio.ingestor.database import OPTIONAL_CALLBACKS, REQUIRED_CALLBACKS, DefDataBase

__all__ = ["DefEvent", "replay"]

_CALLBACKS = frozenset(REQUIRED_CALLBACKS + OPTIONAL_CALLBACKS)


@dataclass(slots=True, frozen=True)
class DefEvent:
    """
    One DEF callback invocation.

    :param callback: Callback name, e.g. "add_component".
    :param args: Positional arguments of the call.
    """

    callback: str
    args: tuple[Any, ...] = field(default_factory=tuple)


def replay(events: Iterable[DefEvent], database: DefDataBase) -> int:
    """
    Invokes the events on a database in order.

    :param events: Events in document order.
    :param database: Database receiving the calls.
    :return: Number of events replayed.
    :raises ValueError: If an event names an unknown callback.
    """
    count = 0
    for event in events:
        if event.callback not in _CALLBACKS:
            raise ValueError(f"Unknown DEF callback: {event.callback}")
        getattr(database, event.callback)(*event.args)
        count += 1
    return count
