"""
Shared fixtures for the test suite.

Small hand-built performances reused across the operation tests.
"""

import pytest

from midimorph.core.models import (
    ControlChange,
    NoteOff,
    NoteOn,
    Performance,
    SetTempo,
)


@pytest.fixture
def melody() -> Performance:
    """NoteOn(60) -> SetTempo(120) -> NoteOff(60)."""
    return Performance(
        (
            NoteOn(0, 60, 100, 0),
            SetTempo(120),
            NoteOff(0, 60, 64, 480),
        )
    )


@pytest.fixture
def c_major_chord() -> Performance:
    """C-E-G struck together at tick 0 and released at tick 300."""
    return Performance(
        (
            NoteOn(0, 60, 100, 0),
            NoteOn(0, 64, 90, 0),
            NoteOn(0, 67, 80, 0),
            NoteOff(0, 60, 0, 300),
            NoteOff(0, 64, 0, 300),
            NoteOff(0, 67, 0, 300),
        )
    )


@pytest.fixture
def two_notes() -> Performance:
    """Two consecutive notes with a control change in between."""
    return Performance(
        (
            NoteOn(0, 60, 100, 0),
            ControlChange(0, 7, 100, 50),
            NoteOff(0, 60, 0, 100),
            NoteOn(0, 62, 100, 100),
            NoteOff(0, 62, 0, 400),
        )
    )
