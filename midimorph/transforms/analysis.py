"""
Analysis operations: read a Performance, return a scalar or summary.
"""

from typing import Optional, Tuple

import numpy as np

from ..core.fixed import FixedPoint
from ..core.models import Performance, SetTempo, is_note_start


def get_bpm(performance: Performance) -> int:
    """
    Return the tempo value of the last SetTempo event in stream order.

    Later tempo changes override earlier ones, so this is the tempo in force
    once every change has been applied. Returns 0 if there is none.
    """
    tempo = 0
    for event in performance:
        if isinstance(event, SetTempo):
            tempo = event.tempo
    return tempo


def get_duration(performance: Performance) -> FixedPoint:
    """Span between the earliest and latest timed event."""
    return performance.duration()


def note_count(performance: Performance) -> int:
    """Number of sounding NoteOns."""
    return sum(1 for e in performance if is_note_start(e))


def pitch_range(performance: Performance) -> Optional[Tuple[int, int]]:
    """Lowest and highest sounding pitch, or None without notes."""
    pitches = [e.note for e in performance if is_note_start(e)]
    if not pitches:
        return None
    return min(pitches), max(pitches)


def pitch_class_histogram(performance: Performance) -> np.ndarray:
    """
    Chroma profile of the sounding notes.

    Returns:
        12-dimensional pitch class profile, normalized to sum to 1
        (all zeros without notes)
    """
    pitches = np.array(
        [e.note % 12 for e in performance if is_note_start(e)], dtype=int
    )
    chroma = np.bincount(pitches, minlength=12).astype(float)

    # Normalize
    if chroma.sum() > 0:
        chroma = chroma / chroma.sum()

    return chroma
