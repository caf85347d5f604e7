"""
Exhaustive per-variant dispatch for engine operations.

Every rewrite or filter operation describes itself as a handler table with
one entry per EventKind. Tables are checked before use, so a new event
variant makes every operation that forgot it fail loudly instead of silently
passing the new events through.
"""

from typing import Callable, Iterable, List, Mapping

from .errors import NotSupportedError
from .models import Event, EventKind, Performance

Handler = Callable[[Event], Iterable[Event]]
IndexedHandler = Callable[[Event, int], Iterable[Event]]


def keep(event: Event, *_) -> Iterable[Event]:
    """Pass the event through unchanged."""
    return (event,)


def drop(event: Event, *_) -> Iterable[Event]:
    """Remove the event from the output."""
    return ()


def exhaustive(table: Mapping[EventKind, Callable]) -> Mapping[EventKind, Callable]:
    """
    Check that a handler table covers every event variant.

    Args:
        table: Mapping from EventKind to handler

    Returns:
        The same table

    Raises:
        NotSupportedError: If any EventKind has no handler
    """
    missing = [kind.name for kind in EventKind if kind not in table]
    if missing:
        raise NotSupportedError(f"No handler for event kinds: {', '.join(missing)}")
    return table


def rewrite(
    performance: Performance, table: Mapping[EventKind, Handler]
) -> Performance:
    """
    Apply a handler table to every event, in order, into a new Performance.

    Args:
        performance: Input performance (not modified)
        table: Exhaustive handler table

    Returns:
        New Performance holding the concatenated handler outputs
    """
    exhaustive(table)
    out: List[Event] = []
    for event in performance:
        out.extend(table[event.kind](event))
    return Performance(tuple(out))


def rewrite_indexed(
    performance: Performance, table: Mapping[EventKind, IndexedHandler]
) -> Performance:
    """Like rewrite(), but handlers also receive the event's stream index."""
    exhaustive(table)
    out: List[Event] = []
    for index, event in enumerate(performance):
        out.extend(table[event.kind](event, index))
    return Performance(tuple(out))
