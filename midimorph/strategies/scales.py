"""
Scale modes for diatonic harmony generation.

Exports:
    NOTE_NAMES      12-element tuple of chromatic note names (sharps)
    SCALE_FORMULAS  semitone offsets from the tonic for each named mode
    ScaleMode       tonic + interval pattern + harmony degrees
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from ..core.errors import InvalidArgumentError, NotSupportedError

NOTE_NAMES: Tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

# Input normalisation: flat -> sharp
FLAT_TO_SHARP: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}

SCALE_FORMULAS: Dict[str, Tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "ionian": (0, 2, 4, 5, 7, 9, 11),
    "natural minor": (0, 2, 3, 5, 7, 8, 10),
    "aeolian": (0, 2, 3, 5, 7, 8, 10),
    "harmonic minor": (0, 2, 3, 5, 7, 8, 11),
    "melodic minor": (0, 2, 3, 5, 7, 9, 11),
    "dorian": (0, 2, 3, 5, 7, 9, 10),
    "phrygian": (0, 1, 3, 5, 7, 8, 10),
    "lydian": (0, 2, 4, 6, 7, 9, 11),
    "mixolydian": (0, 2, 4, 5, 7, 9, 10),
    "locrian": (0, 1, 3, 5, 6, 8, 10),
    "pentatonic major": (0, 2, 4, 7, 9),
    "pentatonic minor": (0, 3, 5, 7, 10),
}

# Third and fifth above the melody note
DEFAULT_DEGREES: Tuple[int, ...] = (2, 4)


def note_to_pitch_class(note: Union[str, int]) -> int:
    """Convert a note name ("C", "F#", "Bb") or pitch class int to 0-11."""
    if isinstance(note, int) and not isinstance(note, bool):
        if not 0 <= note <= 11:
            raise InvalidArgumentError(f"Pitch class must be 0-11, got {note}")
        return note
    name = str(note).strip()
    if name:
        name = name[0].upper() + name[1:]
    name = FLAT_TO_SHARP.get(name, name)
    if name not in NOTE_NAMES:
        raise InvalidArgumentError(f"Unknown note name: {note!r}")
    return NOTE_NAMES.index(name)


@dataclass(frozen=True)
class ScaleMode:
    """
    Scale/mode descriptor for harmony generation.

    Attributes:
        tonic: Pitch class of the tonic (0-11, 0 = C)
        steps: Ascending semitone offsets of the scale from the tonic
        degrees: Scale-degree offsets of the added voices, all positive
            (2 = a third above)
    """

    tonic: int = 0
    steps: Tuple[int, ...] = SCALE_FORMULAS["major"]
    degrees: Tuple[int, ...] = DEFAULT_DEGREES

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "degrees", tuple(self.degrees))
        if not 0 <= self.tonic <= 11:
            raise InvalidArgumentError(f"tonic must be 0-11, got {self.tonic}")
        if any(not 0 <= s <= 11 for s in self.steps):
            raise InvalidArgumentError(f"scale steps must lie in 0-11: {self.steps}")
        if any(b <= a for a, b in zip(self.steps, self.steps[1:])):
            raise InvalidArgumentError(
                f"scale steps must be strictly ascending: {self.steps}"
            )
        if any(d <= 0 for d in self.degrees):
            raise InvalidArgumentError(
                "harmony degrees must be positive (voices above the melody): "
                f"{self.degrees}"
            )

    @classmethod
    def from_name(
        cls,
        root: Union[str, int],
        mode: str = "major",
        degrees: Tuple[int, ...] = DEFAULT_DEGREES,
    ) -> "ScaleMode":
        """
        Build a ScaleMode from a root note and a named mode.

        Args:
            root: Note name or pitch class
            mode: Key of SCALE_FORMULAS (case-insensitive)
            degrees: Scale-degree offsets of the harmony voices

        Raises:
            NotSupportedError: If the mode name is unknown
        """
        key = mode.strip().lower()
        if key not in SCALE_FORMULAS:
            raise NotSupportedError(
                f"Mode {mode!r} is not supported. "
                f"Use one of: {sorted(SCALE_FORMULAS)}"
            )
        return cls(note_to_pitch_class(root), SCALE_FORMULAS[key], degrees)

    @property
    def is_degenerate(self) -> bool:
        return not self.steps or not self.degrees

    def harmonize(self, pitch: int) -> List[int]:
        """
        Return the harmony pitches for a melody pitch, one per degree.

        Pitches outside the scale harmonise from the nearest scale tone below
        and keep their chromatic offset from it. Results are not range-checked.
        """
        if self.is_degenerate:
            return []
        size = len(self.steps)
        octave, pitch_class = divmod(pitch - self.tonic, 12)
        index = bisect_right(self.steps, pitch_class) - 1
        if index < 0:
            # Below the first step: use the top step of the octave below
            index = size - 1
            octave -= 1
        base = self.tonic + octave * 12 + self.steps[index]
        offset = pitch - base

        voices = []
        for degree in self.degrees:
            octave_shift, step = divmod(index + degree, size)
            voices.append(
                self.tonic + (octave + octave_shift) * 12 + self.steps[step] + offset
            )
        return voices
