"""
Reversal strategies for midimorph.

Implements pluggable reversal policies using Strategy pattern. Both policies
mirror times about the midpoint of the performance's timed span, so the
result covers exactly the same interval; neither moves events to a new
position in the stream.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict

from ..core.dispatch import keep, rewrite, rewrite_indexed
from ..core.fixed import FixedPoint
from ..core.models import EventKind, Performance, ReverseStrategy
from ..core.pairing import pair_notes
from ..core.errors import NotSupportedError


class ReverseStrategyABC(ABC):
    """Abstract base class for reversal strategies."""

    @abstractmethod
    def reverse(self, performance: Performance) -> Performance:
        """
        Produce the reversed performance.

        Args:
            performance: Input performance (not modified)

        Returns:
            New Performance with mirrored times
        """
        pass

    @staticmethod
    def _axis(performance: Performance) -> FixedPoint:
        return performance.start_time() + performance.end_time()


class MirrorNotesStrategy(ReverseStrategyABC):
    """
    Mirrors each note's sounding interval.

    A note sounding over [on, off] sounds over [axis - off, axis - on] after
    reversal: the NoteOn takes the mirrored off time and the note end takes
    the mirrored on time. Unpaired note events are mirrored point-wise.
    Non-note events keep their times.
    """

    def reverse(self, performance: Performance) -> Performance:
        axis = self._axis(performance)
        events = performance.events
        new_times: Dict[int, FixedPoint] = {}

        for start, end in pair_notes(events).items():
            new_times[start] = axis - events[end].time
            new_times[end] = axis - events[start].time

        def mirror_note(event, index):
            time = new_times.get(index, axis - event.time)
            return (replace(event, time=time),)

        return rewrite_indexed(
            performance,
            {
                EventKind.NOTE_ON: mirror_note,
                EventKind.NOTE_OFF: mirror_note,
                EventKind.CONTROL_CHANGE: keep,
                EventKind.PITCH_WHEEL: keep,
                EventKind.AFTER_TOUCH: keep,
                EventKind.POLY_TOUCH: keep,
                EventKind.SET_TEMPO: keep,
                EventKind.TIME_SIGNATURE: keep,
            },
        )


class MirrorAllStrategy(ReverseStrategyABC):
    """Mirrors every timed event point-wise; absent times stay absent."""

    def reverse(self, performance: Performance) -> Performance:
        axis = self._axis(performance)

        def mirror(event):
            if event.time is None:
                return (event,)
            return (replace(event, time=axis - event.time),)

        return rewrite(performance, {kind: mirror for kind in EventKind})


class ReversalFactory:
    """Factory for creating reversal strategies."""

    @staticmethod
    def create(strategy: ReverseStrategy) -> ReverseStrategyABC:
        """
        Create a reversal strategy instance.

        Args:
            strategy: ReverseStrategy enum value

        Returns:
            ReverseStrategyABC instance

        Raises:
            NotSupportedError: If strategy is not supported
        """
        if strategy == ReverseStrategy.MIRROR_NOTES:
            return MirrorNotesStrategy()
        elif strategy == ReverseStrategy.MIRROR_ALL:
            return MirrorAllStrategy()
        else:
            raise NotSupportedError(f"Reverse strategy {strategy!r} is not supported")
