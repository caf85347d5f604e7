"""
Advanced manipulation operations.

generate_harmony, arpeggiate_chords and edit_dynamics. Like every other
operation they read one Performance and build a new one.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple, Union

from ..core.dispatch import keep, rewrite, rewrite_indexed
from ..core.errors import InvalidArgumentError
from ..core.fixed import FixedPoint
from ..core.models import (
    NOTE_MAX,
    NOTE_MIN,
    ArpeggioConfig,
    ArpeggioPattern,
    Event,
    EventKind,
    Performance,
    RangeConfig,
    is_note_start,
)
from ..core.pairing import pair_notes
from ..strategies.arpeggio import ArpeggioFactory
from ..strategies.dynamics import DynamicsCurve, VelocityFunction, as_curve
from ..strategies.scales import ScaleMode
from .common import Clamper, range_policy, round_half_up

logger = logging.getLogger(__name__)


# =============================================================================
# Harmony
# =============================================================================


def generate_harmony(
    performance: Performance, modes: Optional[ScaleMode]
) -> Performance:
    """
    Add diatonic harmony voices to every note event.

    Each NoteOn/NoteOff is followed by one copy per harmony degree of
    `modes`, sharing its channel, velocity and time. Voices that would fall
    outside 0-127 are left out.

    Args:
        performance: Input performance (the melody)
        modes: Scale/mode descriptor; None or an empty pattern is a no-op

    Returns:
        New Performance with the harmony voices inserted after each original
    """
    if modes is not None and not isinstance(modes, ScaleMode):
        raise InvalidArgumentError(f"modes must be a ScaleMode, got {modes!r}")
    if modes is None or modes.is_degenerate:
        return Performance(performance.events)

    omitted = 0

    def harmonize(event):
        nonlocal omitted
        voices = [event]
        for pitch in modes.harmonize(event.note):
            if NOTE_MIN <= pitch <= NOTE_MAX:
                voices.append(replace(event, note=pitch))
            else:
                omitted += 1
        return voices

    result = rewrite(
        performance,
        {
            EventKind.NOTE_ON: harmonize,
            EventKind.NOTE_OFF: harmonize,
            EventKind.CONTROL_CHANGE: keep,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: keep,
            EventKind.TIME_SIGNATURE: keep,
        },
    )
    if omitted:
        logger.debug("generate_harmony: omitted %d out-of-range voice(s)", omitted)
    return result


# =============================================================================
# Arpeggio
# =============================================================================


def _detect_chords(
    events: Tuple[Event, ...], pairs: Dict[int, int]
) -> List[List[int]]:
    """
    Group sounding NoteOns by (time, channel).

    Only groups of two or more whose members all have a note end count as
    chords.
    """
    groups: Dict[Tuple[FixedPoint, int], List[int]] = defaultdict(list)
    for index, event in enumerate(events):
        if is_note_start(event):
            groups[(event.time, event.channel)].append(index)

    return [
        members
        for members in groups.values()
        if len(members) >= 2 and all(i in pairs for i in members)
    ]


def arpeggiate_chords(
    performance: Performance,
    pattern: Union[ArpeggioPattern, str, None] = None,
    config: Optional[ArpeggioConfig] = None,
) -> Performance:
    """
    Replace simultaneous chord onsets with a staggered arpeggio.

    A chord is two or more sounding NoteOns on the same channel at the same
    time. Its span (onset to the latest member end) is split into equal slots,
    one per step of the pattern, and each step becomes an on/off pair. The
    pairs are emitted where the chord's first NoteOn was; the members'
    original note ends are removed. Everything else passes through.

    Args:
        performance: Input performance
        pattern: Ordering (defaults to config.pattern, then UP)
        config: Arpeggio configuration

    Raises:
        InvalidArgumentError: If pattern is an unknown name
    """
    if pattern is None:
        pattern = (config or ArpeggioConfig()).pattern
    if isinstance(pattern, str):
        try:
            pattern = ArpeggioPattern(pattern)
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown arpeggio pattern: {pattern!r}"
            ) from None
    order = ArpeggioFactory.create(pattern)

    events = performance.events
    pairs = pair_notes(events)
    generated: Dict[int, List[Event]] = {}
    removed: Set[int] = set()

    for members in _detect_chords(events, pairs):
        onset = events[members[0]].time
        end = max(events[pairs[i]].time for i in members)
        if end <= onset:
            logger.debug("arpeggiate_chords: skipping zero-length chord at %r", onset)
            continue

        ends = {id(events[i]): events[pairs[i]] for i in members}
        sequence = order.order([events[i] for i in members])
        slot = (end - onset).scale_div(len(sequence))

        steps: List[Event] = []
        for step, note_on in enumerate(sequence):
            off_time = end if step == len(sequence) - 1 else onset + slot * (step + 1)
            steps.append(replace(note_on, time=onset + slot * step))
            steps.append(replace(ends[id(note_on)], time=off_time))

        generated[members[0]] = steps
        removed.update(members)
        removed.update(pairs[i] for i in members)

    if not generated:
        return Performance(events)

    def arpeggiate(event, index):
        if index in generated:
            return generated[index]
        if index in removed:
            return ()
        return (event,)

    return rewrite_indexed(
        performance,
        {
            EventKind.NOTE_ON: arpeggiate,
            EventKind.NOTE_OFF: arpeggiate,
            EventKind.CONTROL_CHANGE: keep,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: keep,
            EventKind.TIME_SIGNATURE: keep,
        },
    )


# =============================================================================
# Dynamics
# =============================================================================


def edit_dynamics(
    performance: Performance,
    curve: Union[DynamicsCurve, VelocityFunction],
    config: Optional[RangeConfig] = None,
) -> Performance:
    """
    Rewrite the velocity of every sounding NoteOn through `curve`.

    NoteOn events with velocity 0 act as note ends and are left alone, as are
    NoteOff velocities and every other variant.

    Args:
        performance: Input performance
        curve: DynamicsCurve, or a callable (index, time, velocity) -> number
        config: Out-of-range policy for the resulting velocities

    Raises:
        OutOfRangeError: With the RAISE policy, if a velocity leaves 0-127
    """
    velocity_for = as_curve(curve).bind(performance)
    clamp = Clamper("velocity", 0, 127, range_policy(config))
    index = 0

    def shape(event):
        nonlocal index
        if not is_note_start(event):
            return (event,)
        value = round_half_up(velocity_for(index, event.time, event.velocity))
        index += 1
        return (replace(event, velocity=clamp(value)),)

    result = rewrite(
        performance,
        {
            EventKind.NOTE_ON: shape,
            EventKind.NOTE_OFF: keep,
            EventKind.CONTROL_CHANGE: keep,
            EventKind.PITCH_WHEEL: keep,
            EventKind.AFTER_TOUCH: keep,
            EventKind.POLY_TOUCH: keep,
            EventKind.SET_TEMPO: keep,
            EventKind.TIME_SIGNATURE: keep,
        },
    )
    clamp.report("edit_dynamics")
    return result
