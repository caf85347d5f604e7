"""
Note manipulation operations.

transpose_notes, reverse_notes, quantize_notes, extract_notes and
change_note_duration. Each takes a Performance and returns a new one.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from ..core.dispatch import drop, keep, rewrite
from ..core.errors import InvalidArgumentError
from ..core.fixed import ONE, FixedPoint, SignedInt, as_int
from ..core.models import (
    NOTE_MAX,
    NOTE_MIN,
    EventKind,
    ExtractConfig,
    Performance,
    QuantizeConfig,
    QuantizeRounding,
    RangeConfig,
    ReverseConfig,
)
from ..strategies.reversal import ReversalFactory
from .common import Clamper, range_policy

logger = logging.getLogger(__name__)


def transpose_notes(
    performance: Performance,
    semitones: Union[int, SignedInt],
    config: Optional[RangeConfig] = None,
) -> Performance:
    """
    Shift the pitch of every NoteOn/NoteOff.

    Args:
        performance: Input performance
        semitones: Signed semitone offset
        config: Out-of-range policy (clamp by default)

    Returns:
        New Performance; non-note events unchanged and in place

    Raises:
        OutOfRangeError: With the RAISE policy, if a pitch leaves 0-127
    """
    offset = as_int(semitones)
    clamp = Clamper("note", NOTE_MIN, NOTE_MAX, range_policy(config))

    def shift(event):
        return (replace(event, note=clamp(event.note + offset)),)

    result = rewrite(
        performance,
        {
            EventKind.NOTE_ON: shift,
            EventKind.NOTE_OFF: shift,
            EventKind.CONTROL_CHANGE: keep,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: keep,
            EventKind.TIME_SIGNATURE: keep,
        },
    )
    clamp.report("transpose_notes")
    return result


def reverse_notes(
    performance: Performance, config: Optional[ReverseConfig] = None
) -> Performance:
    """
    Mirror the performance in time; the timed span stays the same.

    The mirroring policy comes from `config.strategy` (see ReverseStrategy).
    """
    config = config or ReverseConfig()
    return ReversalFactory.create(config.strategy).reverse(performance)


def snap_to_grid(
    time: FixedPoint,
    grid_size: int,
    rounding: QuantizeRounding = QuantizeRounding.HALF_UP,
) -> FixedPoint:
    """
    Snap a time to the nearest multiple of grid_size ticks.

    Exact halves are resolved by `rounding`; HALF_UP goes to the later line.
    """
    step = grid_size * ONE
    index, rest = divmod(time.raw, step)
    twice = 2 * rest
    if twice > step:
        index += 1
    elif twice == step:
        if rounding == QuantizeRounding.HALF_UP or (
            rounding == QuantizeRounding.HALF_EVEN and index % 2
        ):
            index += 1
    return FixedPoint.from_raw(index * step)


def quantize_notes(
    performance: Performance,
    grid_size: int,
    config: Optional[QuantizeConfig] = None,
) -> Performance:
    """
    Snap note times to a regular grid.

    Args:
        performance: Input performance
        grid_size: Grid spacing in ticks (positive int)
        config: Tie-breaking and scope; by default only notes are snapped

    Raises:
        InvalidArgumentError: If grid_size is not a positive int
    """
    if isinstance(grid_size, bool) or not isinstance(grid_size, int) or grid_size <= 0:
        raise InvalidArgumentError(
            f"grid_size must be a positive int, got {grid_size!r}"
        )
    config = config or QuantizeConfig()

    def snap(event):
        if event.time is None:
            return (event,)
        snapped = snap_to_grid(event.time, grid_size, config.rounding)
        return (replace(event, time=snapped),)

    others = keep if config.notes_only else snap
    return rewrite(
        performance,
        {
            EventKind.NOTE_ON: snap,
            EventKind.NOTE_OFF: snap,
            EventKind.CONTROL_CHANGE: others,
            EventKind.PITCH_WHEEL: others,
            EventKind.AFTER_TOUCH: others,
            EventKind.POLY_TOUCH: others,
            EventKind.SET_TEMPO: others,
            EventKind.TIME_SIGNATURE: others,
        },
    )


def extract_notes(
    performance: Performance,
    note_range: int,
    config: Optional[ExtractConfig] = None,
) -> Performance:
    """
    Keep only notes strictly inside (center - note_range, center + note_range).

    Non-note events are dropped unless `config.keep_context` is set.

    Raises:
        InvalidArgumentError: If note_range is not a non-negative int
    """
    if (
        isinstance(note_range, bool)
        or not isinstance(note_range, int)
        or note_range < 0
    ):
        raise InvalidArgumentError(
            f"note_range must be a non-negative int, got {note_range!r}"
        )
    config = config or ExtractConfig()
    low = max(NOTE_MIN - 1, config.center - note_range)
    high = min(NOTE_MAX + 1, config.center + note_range)

    def in_band(event):
        return (event,) if low < event.note < high else ()

    context = keep if config.keep_context else drop
    result = rewrite(
        performance,
        {
            EventKind.NOTE_ON: in_band,
            EventKind.NOTE_OFF: in_band,
            EventKind.CONTROL_CHANGE: context,
            EventKind.PITCH_WHEEL: context,
            EventKind.AFTER_TOUCH: context,
            EventKind.POLY_TOUCH: context,
            EventKind.SET_TEMPO: context,
            EventKind.TIME_SIGNATURE: context,
        },
    )
    logger.debug(
        "extract_notes: kept %d of %d events in (%d, %d)",
        len(result),
        len(performance),
        low,
        high,
    )
    return result


def change_note_duration(performance: Performance, factor) -> Performance:
    """
    Scale the time of every event by `factor`.

    This stretches or compresses the whole performance: onsets move too, not
    only the gaps between a note's on and off. Tempo and time-signature
    events without a time keep no time.

    Args:
        performance: Input performance
        factor: Non-negative scale (int, float, Fraction, SignedInt, FixedPoint)

    Raises:
        InvalidArgumentError: If factor is negative
    """
    scale = FixedPoint.coerce(factor)
    if scale.negative:
        raise InvalidArgumentError(f"Duration factor must be >= 0, got {scale!r}")

    def stretch(event):
        if event.time is None:
            return (event,)
        return (replace(event, time=event.time * scale),)

    return rewrite(
        performance,
        {
            EventKind.NOTE_ON: stretch,
            EventKind.NOTE_OFF: stretch,
            EventKind.CONTROL_CHANGE: stretch,
            EventKind.PITCH_WHEEL: stretch,
            EventKind.AFTER_TOUCH: stretch,
            EventKind.POLY_TOUCH: stretch,
            EventKind.SET_TEMPO: stretch,
            EventKind.TIME_SIGNATURE: stretch,
        },
    )
