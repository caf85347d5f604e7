"""
Adapter between mido's in-memory MIDI objects and Performance.

mido owns the byte-level encoding; this module only converts its messages
(delta times in ticks) to and from midimorph events (absolute fixed-point
times in ticks).
"""

import logging
from typing import Callable, Dict, List

import mido

from .dispatch import exhaustive
from .errors import InvalidArgumentError, NotSupportedError
from .models import (
    AfterTouch,
    ControlChange,
    Event,
    EventKind,
    NoteOff,
    NoteOn,
    Performance,
    PitchWheel,
    PolyTouch,
    SetTempo,
    TimeSignature,
)

logger = logging.getLogger(__name__)

DEFAULT_TICKS_PER_BEAT = 480

# mido message -> event, keyed by mido message type
_DECODERS: Dict[str, Callable[[object, int], Event]] = {
    "note_on": lambda m, t: NoteOn(m.channel, m.note, m.velocity, t),
    "note_off": lambda m, t: NoteOff(m.channel, m.note, m.velocity, t),
    "control_change": lambda m, t: ControlChange(m.channel, m.control, m.value, t),
    "pitchwheel": lambda m, t: PitchWheel(m.channel, m.pitch, t),
    "aftertouch": lambda m, t: AfterTouch(m.channel, m.value, t),
    "polytouch": lambda m, t: PolyTouch(m.channel, m.note, m.value, t),
    "set_tempo": lambda m, t: SetTempo(m.tempo, t),
    "time_signature": lambda m, t: TimeSignature(
        m.numerator,
        m.denominator,
        m.clocks_per_click,
        t,
        m.notated_32nd_notes_per_beat,
    ),
}

# event -> mido message with the given delta time
_ENCODERS = exhaustive(
    {
        EventKind.NOTE_ON: lambda e, dt: mido.Message(
            "note_on", channel=e.channel, note=e.note, velocity=e.velocity, time=dt
        ),
        EventKind.NOTE_OFF: lambda e, dt: mido.Message(
            "note_off", channel=e.channel, note=e.note, velocity=e.velocity, time=dt
        ),
        EventKind.CONTROL_CHANGE: lambda e, dt: mido.Message(
            "control_change",
            channel=e.channel,
            control=e.control,
            value=e.value,
            time=dt,
        ),
        EventKind.PITCH_WHEEL: lambda e, dt: mido.Message(
            "pitchwheel", channel=e.channel, pitch=e.pitch, time=dt
        ),
        EventKind.AFTER_TOUCH: lambda e, dt: mido.Message(
            "aftertouch", channel=e.channel, value=e.value, time=dt
        ),
        EventKind.POLY_TOUCH: lambda e, dt: mido.Message(
            "polytouch", channel=e.channel, note=e.note, value=e.value, time=dt
        ),
        EventKind.SET_TEMPO: lambda e, dt: mido.MetaMessage(
            "set_tempo", tempo=e.tempo, time=dt
        ),
        EventKind.TIME_SIGNATURE: lambda e, dt: mido.MetaMessage(
            "time_signature",
            numerator=e.numerator,
            denominator=e.denominator,
            clocks_per_click=e.clocks_per_click,
            notated_32nd_notes_per_beat=e.notated_32nd_notes_per_beat,
            time=dt,
        ),
    }
)


def from_mido_track(track, strict: bool = False) -> Performance:
    """
    Decode a mido track into a Performance.

    Delta times are accumulated into absolute tick times. Messages with no
    matching event variant (program changes, sysex, other meta messages) are
    skipped, but their delta time still counts.

    Args:
        track: mido.MidiTrack or any iterable of mido messages
        strict: Raise instead of skipping unsupported messages

    Raises:
        NotSupportedError: With strict=True, on an unsupported message
    """
    events: List[Event] = []
    absolute = 0
    skipped = 0

    for msg in track:
        absolute += msg.time
        decode = _DECODERS.get(msg.type)
        if decode is None:
            if msg.type == "end_of_track":
                continue
            if strict:
                raise NotSupportedError(f"Unsupported MIDI message type: {msg.type}")
            skipped += 1
            continue
        events.append(decode(msg, absolute))

    if skipped:
        logger.debug("from_mido_track: skipped %d unsupported message(s)", skipped)
    return Performance(tuple(events))


def from_midi_file(midi_file, strict: bool = False) -> Performance:
    """Decode every track of a mido.MidiFile, merged in time order."""
    return from_mido_track(mido.merge_tracks(midi_file.tracks), strict=strict)


def to_mido_track(performance: Performance) -> mido.MidiTrack:
    """
    Encode a Performance as a mido track.

    Times are rounded to whole ticks. Events without a time are placed at the
    time of the preceding event.

    Raises:
        InvalidArgumentError: If times go backwards in stream order
    """
    track = mido.MidiTrack()
    previous = 0

    for index, event in enumerate(performance):
        tick = previous if event.time is None else event.time.round_ticks()
        delta = tick - previous
        if delta < 0:
            raise InvalidArgumentError(
                f"Event {index} at tick {tick} precedes tick {previous}; "
                "sort the performance before encoding"
            )
        track.append(_ENCODERS[event.kind](event, delta))
        previous = tick

    return track


def to_midi_file(
    performance: Performance, ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT
) -> mido.MidiFile:
    """Build a single-track mido.MidiFile holding the performance."""
    midi_file = mido.MidiFile(ticks_per_beat=ticks_per_beat)
    midi_file.tracks.append(to_mido_track(performance))
    return midi_file
