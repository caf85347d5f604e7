"""
General MIDI instrument lookup.

Default instrument-lookup collaborator for instrument remapping. Names and
family names come from pretty_midi's General MIDI tables; families are the
sixteen contiguous groups of eight program numbers.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

import pretty_midi

from .errors import OutOfRangeError

FAMILY_SIZE = 8
PROGRAM_COUNT = 128


@dataclass(frozen=True)
class InstrumentInfo:
    """
    Lookup result for one General MIDI program.

    Attributes:
        program: Program number (0-127)
        name: Instrument name, e.g. "Acoustic Grand Piano"
        family: Family index (0-15)
        family_name: Family name, e.g. "Piano"
        next_program: Next program in the same family, wrapping to the first
    """

    program: int
    name: str
    family: int
    family_name: str
    next_program: int


InstrumentLookup = Callable[[int], InstrumentInfo]


def family_of(program: int) -> int:
    """Return the family index of a program number."""
    _check_program(program)
    return program // FAMILY_SIZE


def next_program_in_family(program: int) -> int:
    """
    Return the next program number within the same family.

    The last member of a family wraps back to the first member.
    """
    first = family_of(program) * FAMILY_SIZE
    return first + (program - first + 1) % FAMILY_SIZE


@lru_cache(maxsize=PROGRAM_COUNT)
def lookup_instrument(program: int) -> InstrumentInfo:
    """
    Look up a General MIDI program.

    Args:
        program: Program number (0-127)

    Returns:
        InstrumentInfo for the program

    Raises:
        OutOfRangeError: If program is outside 0-127
    """
    _check_program(program)
    return InstrumentInfo(
        program=program,
        name=pretty_midi.program_to_instrument_name(program),
        family=family_of(program),
        family_name=pretty_midi.program_to_instrument_class(program),
        next_program=next_program_in_family(program),
    )


def _check_program(program: int) -> None:
    if not 0 <= program < PROGRAM_COUNT:
        raise OutOfRangeError("program", program, 0, PROGRAM_COUNT - 1)
