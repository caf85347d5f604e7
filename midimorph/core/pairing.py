"""
Note on/off pairing.

Matches each sounding NoteOn with the next note end on the same channel and
pitch, first-in first-out, in stream order.
"""

from collections import defaultdict, deque
from typing import Deque, Dict, Sequence, Tuple

from .models import Event, is_note_end, is_note_start


def pair_notes(events: Sequence[Event]) -> Dict[int, int]:
    """
    Pair note starts with note ends.

    Args:
        events: Events in stream order

    Returns:
        Mapping from the index of each paired NoteOn to the index of its end.
        Unmatched starts and ends are absent from the mapping.
    """
    open_notes: Dict[Tuple[int, int], Deque[int]] = defaultdict(deque)
    pairs: Dict[int, int] = {}

    for index, event in enumerate(events):
        if is_note_start(event):
            open_notes[(event.channel, event.note)].append(index)
        elif is_note_end(event):
            waiting = open_notes.get((event.channel, event.note))
            if waiting:
                pairs[waiting.popleft()] = index

    return pairs

