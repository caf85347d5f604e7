"""
midimorph - non-destructive transformation and analysis of MIDI performances.

A performance is an immutable, ordered sequence of MIDI-style events with
exact fixed-point times. Every operation reads one performance and returns a
new one (or a scalar), so operations chain freely and never share state.
"""

from .core.errors import (
    InvalidArgumentError,
    MidimorphError,
    NotSupportedError,
    OutOfRangeError,
)
from .core.fixed import FixedPoint, SignedInt
from .core.instruments import InstrumentInfo, lookup_instrument
from .core.models import (
    AfterTouch,
    ArpeggioConfig,
    ArpeggioPattern,
    ControlChange,
    EngineConfig,
    Event,
    EventKind,
    ExtractConfig,
    NoteOff,
    NoteOn,
    OutOfRangePolicy,
    Performance,
    PitchWheel,
    PolyTouch,
    QuantizeConfig,
    QuantizeRounding,
    RangeConfig,
    ReverseConfig,
    ReverseStrategy,
    SetTempo,
    TimeSignature,
)
from .core.observer import Notification, NotificationType, Observer
from .core.pipeline import PerformancePipeline
from .strategies.dynamics import (
    ConstantCurve,
    DynamicsCurve,
    EnvelopeCurve,
    LinearRampCurve,
    ScaleCurve,
)
from .strategies.scales import ScaleMode
from .transforms.advanced import arpeggiate_chords, edit_dynamics, generate_harmony
from .transforms.analysis import (
    get_bpm,
    get_duration,
    note_count,
    pitch_class_histogram,
    pitch_range,
)
from .transforms.global_ops import change_tempo, remap_instruments, set_message
from .transforms.notes import (
    change_note_duration,
    extract_notes,
    quantize_notes,
    reverse_notes,
    transpose_notes,
)

__version__ = "1.0.0"
__author__ = "midimorph developers"

__all__ = [
    # Errors
    "MidimorphError",
    "NotSupportedError",
    "OutOfRangeError",
    "InvalidArgumentError",
    # Numbers
    "FixedPoint",
    "SignedInt",
    # Events
    "Event",
    "EventKind",
    "NoteOn",
    "NoteOff",
    "ControlChange",
    "PitchWheel",
    "AfterTouch",
    "PolyTouch",
    "SetTempo",
    "TimeSignature",
    "Performance",
    # Configuration
    "EngineConfig",
    "RangeConfig",
    "ReverseConfig",
    "QuantizeConfig",
    "ExtractConfig",
    "ArpeggioConfig",
    "OutOfRangePolicy",
    "ReverseStrategy",
    "QuantizeRounding",
    "ArpeggioPattern",
    # Descriptors
    "ScaleMode",
    "DynamicsCurve",
    "ConstantCurve",
    "ScaleCurve",
    "LinearRampCurve",
    "EnvelopeCurve",
    "InstrumentInfo",
    "lookup_instrument",
    # Pipeline
    "PerformancePipeline",
    "Observer",
    "Notification",
    "NotificationType",
    # Operations
    "transpose_notes",
    "reverse_notes",
    "quantize_notes",
    "extract_notes",
    "change_note_duration",
    "change_tempo",
    "remap_instruments",
    "set_message",
    "get_bpm",
    "get_duration",
    "note_count",
    "pitch_range",
    "pitch_class_histogram",
    "generate_harmony",
    "arpeggiate_chords",
    "edit_dynamics",
]
