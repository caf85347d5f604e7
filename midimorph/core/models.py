"""
Data models for midimorph.

Defines the closed set of performance events, the immutable Performance
value they live in, and the configuration objects for every policy point of
the transformation engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from .errors import InvalidArgumentError, NotSupportedError, OutOfRangeError
from .fixed import ZERO, FixedPoint

MIDDLE_C = 60
NOTE_MIN = 0
NOTE_MAX = 127
CHANNEL_MAX = 15
PITCH_MIN = -8192
PITCH_MAX = 8191
TEMPO_MAX = 0xFFFFFF  # 24-bit microseconds per beat


class EventKind(Enum):
    """Event variants. Values follow the mido message type names."""

    NOTE_ON = "note_on"
    NOTE_OFF = "note_off"
    CONTROL_CHANGE = "control_change"
    PITCH_WHEEL = "pitchwheel"
    AFTER_TOUCH = "aftertouch"
    POLY_TOUCH = "polytouch"
    SET_TEMPO = "set_tempo"
    TIME_SIGNATURE = "time_signature"


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an int, got {value!r}")
    if not low <= value <= high:
        raise OutOfRangeError(name, value, low, high)


def _coerce_time(event, optional: bool = False) -> None:
    if event.time is None:
        if not optional:
            raise InvalidArgumentError(
                f"{type(event).__name__} requires a time value"
            )
        return
    object.__setattr__(event, "time", FixedPoint.coerce(event.time))


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class NoteOn:
    channel: int
    note: int
    velocity: int
    time: FixedPoint = ZERO

    kind = EventKind.NOTE_ON

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("note", self.note, NOTE_MIN, NOTE_MAX)
        _check_range("velocity", self.velocity, 0, 127)
        _coerce_time(self)


@dataclass(frozen=True)
class NoteOff:
    channel: int
    note: int
    velocity: int
    time: FixedPoint = ZERO

    kind = EventKind.NOTE_OFF

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("note", self.note, NOTE_MIN, NOTE_MAX)
        _check_range("velocity", self.velocity, 0, 127)
        _coerce_time(self)


@dataclass(frozen=True)
class ControlChange:
    channel: int
    control: int
    value: int
    time: FixedPoint = ZERO

    kind = EventKind.CONTROL_CHANGE

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("control", self.control, 0, 127)
        _check_range("value", self.value, 0, 127)
        _coerce_time(self)


@dataclass(frozen=True)
class PitchWheel:
    channel: int
    pitch: int
    time: FixedPoint = ZERO

    kind = EventKind.PITCH_WHEEL

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("pitch", self.pitch, PITCH_MIN, PITCH_MAX)
        _coerce_time(self)


@dataclass(frozen=True)
class AfterTouch:
    channel: int
    value: int
    time: FixedPoint = ZERO

    kind = EventKind.AFTER_TOUCH

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("value", self.value, 0, 127)
        _coerce_time(self)


@dataclass(frozen=True)
class PolyTouch:
    channel: int
    note: int
    value: int
    time: FixedPoint = ZERO

    kind = EventKind.POLY_TOUCH

    def __post_init__(self):
        _check_range("channel", self.channel, 0, CHANNEL_MAX)
        _check_range("note", self.note, NOTE_MIN, NOTE_MAX)
        _check_range("value", self.value, 0, 127)
        _coerce_time(self)


@dataclass(frozen=True)
class SetTempo:
    """Tempo change. `tempo` is microseconds per beat; `time` may be absent."""

    tempo: int
    time: Optional[FixedPoint] = None

    kind = EventKind.SET_TEMPO

    def __post_init__(self):
        _check_range("tempo", self.tempo, 0, TEMPO_MAX)
        _coerce_time(self, optional=True)


@dataclass(frozen=True)
class TimeSignature:
    """
    Time signature change.

    Attributes:
        numerator: Beats per bar
        denominator: Beat unit as a power of two (4 means quarter note)
        clocks_per_click: MIDI clocks per metronome click
        time: Placement on the timeline, or None when absent
        notated_32nd_notes_per_beat: 32nd notes per MIDI quarter note
    """

    numerator: int
    denominator: int
    clocks_per_click: int
    time: Optional[FixedPoint] = None
    notated_32nd_notes_per_beat: int = 8

    kind = EventKind.TIME_SIGNATURE

    def __post_init__(self):
        _check_range("numerator", self.numerator, 1, 255)
        _check_range("denominator", self.denominator, 1, 128)
        if self.denominator & (self.denominator - 1):
            raise InvalidArgumentError(
                f"denominator must be a power of two, got {self.denominator}"
            )
        _check_range("clocks_per_click", self.clocks_per_click, 0, 255)
        _check_range(
            "notated_32nd_notes_per_beat", self.notated_32nd_notes_per_beat, 0, 255
        )
        _coerce_time(self, optional=True)


Event = Union[
    NoteOn,
    NoteOff,
    ControlChange,
    PitchWheel,
    AfterTouch,
    PolyTouch,
    SetTempo,
    TimeSignature,
]

EVENT_TYPES = (
    NoteOn,
    NoteOff,
    ControlChange,
    PitchWheel,
    AfterTouch,
    PolyTouch,
    SetTempo,
    TimeSignature,
)


def is_note_event(event: Event) -> bool:
    return isinstance(event, (NoteOn, NoteOff))


def is_note_start(event: Event) -> bool:
    """A NoteOn that actually sounds (velocity > 0)."""
    return isinstance(event, NoteOn) and event.velocity > 0


def is_note_end(event: Event) -> bool:
    """A NoteOff, or a NoteOn with velocity 0 (running-status note off)."""
    return isinstance(event, NoteOff) or (
        isinstance(event, NoteOn) and event.velocity == 0
    )


# =============================================================================
# Performance
# =============================================================================


@dataclass(frozen=True)
class Performance:
    """
    Immutable, ordered sequence of events.

    Order is stream order and is not required to follow `time`. Every engine
    operation returns a new Performance and leaves its input untouched.
    """

    events: Tuple[Event, ...] = ()

    def __post_init__(self):
        events = tuple(self.events)
        for event in events:
            if not isinstance(event, EVENT_TYPES):
                raise NotSupportedError(
                    f"Unsupported event type: {type(event).__name__}"
                )
        object.__setattr__(self, "events", events)

    @classmethod
    def empty(cls) -> "Performance":
        return cls(())

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Performance(self.events[index])
        return self.events[index]

    def timed_events(self) -> Tuple[Event, ...]:
        """Events that carry a time value."""
        return tuple(e for e in self.events if e.time is not None)

    def start_time(self) -> FixedPoint:
        """Earliest time over timed events (zero if none)."""
        return min((e.time for e in self.timed_events()), default=ZERO)

    def end_time(self) -> FixedPoint:
        """Latest time over timed events (zero if none)."""
        return max((e.time for e in self.timed_events()), default=ZERO)

    def duration(self) -> FixedPoint:
        return self.end_time() - self.start_time()


# =============================================================================
# Configuration
# =============================================================================


class OutOfRangePolicy(Enum):
    """What to do when a per-event field would leave its domain."""

    CLAMP = "clamp"  # Clamp to the nearest boundary and continue
    RAISE = "raise"  # Raise OutOfRangeError


class ReverseStrategy(Enum):
    """Available reversal policies."""

    MIRROR_NOTES = "mirror_notes"  # Mirror note intervals, keep other events
    MIRROR_ALL = "mirror_all"  # Mirror every timed event point-wise


class QuantizeRounding(Enum):
    """Tie-breaking for times exactly halfway between two grid lines."""

    HALF_UP = "half_up"  # Toward the later grid line
    HALF_DOWN = "half_down"  # Toward the earlier grid line
    HALF_EVEN = "half_even"  # Toward the even grid index


class ArpeggioPattern(Enum):
    """Orderings for arpeggiated chord members."""

    UP = "up"
    DOWN = "down"
    UP_DOWN = "up_down"
    DOWN_UP = "down_up"
    AS_PLAYED = "as_played"


@dataclass
class RangeConfig:
    policy: OutOfRangePolicy = OutOfRangePolicy.CLAMP


@dataclass
class ReverseConfig:
    strategy: ReverseStrategy = ReverseStrategy.MIRROR_NOTES


@dataclass
class QuantizeConfig:
    rounding: QuantizeRounding = QuantizeRounding.HALF_UP
    notes_only: bool = True


@dataclass
class ExtractConfig:
    """
    Configuration for the note-band filter.

    Attributes:
        center: Band center pitch (middle C by default)
        keep_context: Retain non-note events instead of dropping them
    """

    center: int = MIDDLE_C
    keep_context: bool = False


@dataclass
class ArpeggioConfig:
    pattern: ArpeggioPattern = ArpeggioPattern.UP


@dataclass
class EngineConfig:
    """
    Root configuration for the transformation engine.

    Attributes:
        range_config: Out-of-range handling for per-event fields
        reverse_config: Reversal policy
        quantize_config: Quantization tie-breaking and scope
        extract_config: Note-band filter settings
        arpeggio_config: Default arpeggio pattern
    """

    range_config: RangeConfig = field(default_factory=RangeConfig)
    reverse_config: ReverseConfig = field(default_factory=ReverseConfig)
    quantize_config: QuantizeConfig = field(default_factory=QuantizeConfig)
    extract_config: ExtractConfig = field(default_factory=ExtractConfig)
    arpeggio_config: ArpeggioConfig = field(default_factory=ArpeggioConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "range_policy": self.range_config.policy.value,
            "reverse_strategy": self.reverse_config.strategy.value,
            "quantize_rounding": self.quantize_config.rounding.value,
            "quantize_notes_only": self.quantize_config.notes_only,
            "extract_center": self.extract_config.center,
            "extract_keep_context": self.extract_config.keep_context,
            "arpeggio_pattern": self.arpeggio_config.pattern.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EngineConfig":
        """Create EngineConfig from dictionary; missing keys keep defaults."""
        config = cls()
        try:
            if "range_policy" in data:
                config.range_config.policy = OutOfRangePolicy(data["range_policy"])
            if "reverse_strategy" in data:
                config.reverse_config.strategy = ReverseStrategy(
                    data["reverse_strategy"]
                )
            if "quantize_rounding" in data:
                config.quantize_config.rounding = QuantizeRounding(
                    data["quantize_rounding"]
                )
            if "arpeggio_pattern" in data:
                config.arpeggio_config.pattern = ArpeggioPattern(
                    data["arpeggio_pattern"]
                )
            if "extract_center" in data:
                center = int(data["extract_center"])
                if not NOTE_MIN <= center <= NOTE_MAX:
                    raise ValueError(
                        f"extract_center {center} is outside [{NOTE_MIN}, {NOTE_MAX}]"
                    )
                config.extract_config.center = center
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Invalid configuration value: {e}") from e
        config.quantize_config.notes_only = bool(
            data.get("quantize_notes_only", config.quantize_config.notes_only)
        )
        config.extract_config.keep_context = bool(
            data.get("extract_keep_context", config.extract_config.keep_context)
        )
        return config
