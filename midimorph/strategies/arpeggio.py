"""
Arpeggio ordering strategies for midimorph.

Each strategy turns the members of a chord into the order in which they are
played back one after another. Orders may repeat members (up-down patterns).
"""

from abc import ABC, abstractmethod
from typing import List

from ..core.errors import NotSupportedError
from ..core.models import ArpeggioPattern, NoteOn


class ArpeggioOrderABC(ABC):
    """Abstract base class for arpeggio orderings."""

    @abstractmethod
    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        """
        Order chord members for playback.

        Args:
            members: Chord NoteOns in stream order

        Returns:
            Playback order (may contain repeats)
        """
        pass

    @staticmethod
    def _ascending(members: List[NoteOn]) -> List[NoteOn]:
        # sorted() is stable, so equal pitches keep stream order
        return sorted(members, key=lambda n: n.note)


class UpOrder(ArpeggioOrderABC):
    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        return self._ascending(members)


class DownOrder(ArpeggioOrderABC):
    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        return self._ascending(members)[::-1]


class UpDownOrder(ArpeggioOrderABC):
    """Lowest to highest and back, without repeating the turning points."""

    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        up = self._ascending(members)
        return up + up[-2:0:-1]


class DownUpOrder(ArpeggioOrderABC):
    """Highest to lowest and back, without repeating the turning points."""

    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        down = self._ascending(members)[::-1]
        return down + down[-2:0:-1]


class AsPlayedOrder(ArpeggioOrderABC):
    def order(self, members: List[NoteOn]) -> List[NoteOn]:
        return list(members)


class ArpeggioFactory:
    """Factory for creating arpeggio orderings."""

    _ORDERS = {
        ArpeggioPattern.UP: UpOrder,
        ArpeggioPattern.DOWN: DownOrder,
        ArpeggioPattern.UP_DOWN: UpDownOrder,
        ArpeggioPattern.DOWN_UP: DownUpOrder,
        ArpeggioPattern.AS_PLAYED: AsPlayedOrder,
    }

    @staticmethod
    def create(pattern: ArpeggioPattern) -> ArpeggioOrderABC:
        """
        Create an arpeggio ordering instance.

        Raises:
            NotSupportedError: If pattern is not supported
        """
        try:
            return ArpeggioFactory._ORDERS[pattern]()
        except KeyError:
            raise NotSupportedError(
                f"Arpeggio pattern {pattern!r} is not supported. "
                f"Use one of: {[p.value for p in ArpeggioPattern]}"
            ) from None
