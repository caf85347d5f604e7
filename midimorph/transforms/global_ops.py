"""
Global manipulation operations: change_tempo, remap_instruments, set_message.
"""

import logging
from bisect import bisect_right
from dataclasses import replace
from typing import List, Optional

from ..core.dispatch import exhaustive, keep, rewrite
from ..core.errors import InvalidArgumentError
from ..core.instruments import InstrumentLookup, lookup_instrument
from ..core.models import (
    CHANNEL_MAX,
    EVENT_TYPES,
    TEMPO_MAX,
    Event,
    EventKind,
    Performance,
)

logger = logging.getLogger(__name__)

# Fields that, together with kind and time, identify an event's timeline slot
IDENTITY_FIELDS = exhaustive(
    {
        EventKind.NOTE_ON: ("channel", "note"),
        EventKind.NOTE_OFF: ("channel", "note"),
        EventKind.CONTROL_CHANGE: ("channel", "control"),
        EventKind.PITCH_WHEEL: ("channel",),
        EventKind.AFTER_TOUCH: ("channel",),
        EventKind.POLY_TOUCH: ("channel", "note"),
        EventKind.SET_TEMPO: (),
        EventKind.TIME_SIGNATURE: (),
    }
)


def change_tempo(performance: Performance, new_tempo: int) -> Performance:
    """
    Set the tempo of every SetTempo event to `new_tempo`.

    Times are untouched and no tempo event is ever inserted, so a performance
    without SetTempo events comes back unchanged.

    Args:
        performance: Input performance
        new_tempo: Microseconds per beat (0 to 0xFFFFFF)

    Raises:
        InvalidArgumentError: If new_tempo is not an int in range
    """
    if (
        isinstance(new_tempo, bool)
        or not isinstance(new_tempo, int)
        or not 0 <= new_tempo <= TEMPO_MAX
    ):
        raise InvalidArgumentError(
            f"new_tempo must be an int in [0, {TEMPO_MAX}], got {new_tempo!r}"
        )

    def retempo(event):
        return (replace(event, tempo=new_tempo),)

    return rewrite(
        performance,
        {
            EventKind.NOTE_ON: keep,
            EventKind.NOTE_OFF: keep,
            EventKind.CONTROL_CHANGE: keep,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: retempo,
            EventKind.TIME_SIGNATURE: keep,
        },
    )


def remap_instruments(
    performance: Performance,
    channel: int,
    lookup: Optional[InstrumentLookup] = None,
) -> Performance:
    """
    Move ControlChange values on `channel` to the next program in their family.

    Args:
        performance: Input performance
        channel: Channel whose ControlChange events are remapped (0-15)
        lookup: Instrument lookup; defaults to the General MIDI table

    Returns:
        New Performance; events on other channels and other variants unchanged

    Raises:
        InvalidArgumentError: If channel is outside 0-15
    """
    if (
        isinstance(channel, bool)
        or not isinstance(channel, int)
        or not 0 <= channel <= CHANNEL_MAX
    ):
        raise InvalidArgumentError(
            f"channel must be in [0, {CHANNEL_MAX}], got {channel!r}"
        )
    lookup = lookup or lookup_instrument
    remapped = 0

    def remap(event):
        nonlocal remapped
        if event.channel != channel:
            return (event,)
        remapped += 1
        return (replace(event, value=lookup(event.value).next_program),)

    result = rewrite(
        performance,
        {
            EventKind.NOTE_ON: keep,
            EventKind.NOTE_OFF: keep,
            EventKind.CONTROL_CHANGE: remap,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: keep,
            EventKind.TIME_SIGNATURE: keep,
        },
    )
    logger.debug(
        "remap_instruments: remapped %d event(s) on channel %d", remapped, channel
    )
    return result


def identity(event: Event) -> tuple:
    """Key identifying the timeline slot an event occupies."""
    return (event.kind, event.time) + tuple(
        getattr(event, name) for name in IDENTITY_FIELDS[event.kind]
    )


def set_message(performance: Performance, msg: Event) -> Performance:
    """
    Insert `msg`, or replace the event occupying the same timeline slot.

    The result lists the timed events in ascending time order (stable), then
    the events without a time in their original order. A timed `msg` goes
    after every event at the same or an earlier time; an untimed `msg` is
    appended last.

    Untimed events occupy no timeline slot, so an untimed `msg` never
    replaces anything, even an untimed event of the same kind.

    Raises:
        InvalidArgumentError: If msg is not an event
    """
    if not isinstance(msg, EVENT_TYPES):
        raise InvalidArgumentError(f"Not an event: {msg!r}")

    timed: List[Event] = sorted(performance.timed_events(), key=lambda e: e.time)
    untimed = [e for e in performance if e.time is None]

    if msg.time is None:
        untimed.append(msg)
        return Performance(tuple(timed) + tuple(untimed))

    key = identity(msg)
    for index, event in enumerate(timed):
        if identity(event) == key:
            timed[index] = msg
            break
    else:
        position = bisect_right([e.time for e in timed], msg.time)
        timed.insert(position, msg)

    return Performance(tuple(timed) + tuple(untimed))
