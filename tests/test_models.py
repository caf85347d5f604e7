"""
tests/test_models.py - Unit tests for midimorph/core/models.py

Covers:
    - Field domain validation on every event variant
    - Time coercion and optional times
    - Performance immutability, slicing and span helpers
    - EngineConfig round-trip through to_dict/from_dict
    - Exhaustive dispatch table checking
"""

from __future__ import annotations

import dataclasses

import pytest

from midimorph.core.dispatch import exhaustive, keep
from midimorph.core.errors import (
    InvalidArgumentError,
    NotSupportedError,
    OutOfRangeError,
)
from midimorph.core.fixed import FixedPoint
from midimorph.core.models import (
    AfterTouch,
    ArpeggioPattern,
    ControlChange,
    EngineConfig,
    EventKind,
    NoteOff,
    NoteOn,
    OutOfRangePolicy,
    Performance,
    PitchWheel,
    PolyTouch,
    QuantizeRounding,
    SetTempo,
    TimeSignature,
    is_note_end,
    is_note_start,
)

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEventValidation:
    def test_note_above_range(self) -> None:
        with pytest.raises(OutOfRangeError) as info:
            NoteOn(0, 128, 10)
        assert info.value.field == "note"

    def test_channel_above_range(self) -> None:
        with pytest.raises(OutOfRangeError):
            NoteOff(16, 60, 0)

    def test_bool_velocity_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            NoteOn(0, 60, True)

    def test_out_of_range_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ControlChange(0, 7, 200)

    def test_pitch_wheel_bounds(self) -> None:
        assert PitchWheel(0, -8192).pitch == -8192
        with pytest.raises(OutOfRangeError):
            PitchWheel(0, 8192)

    def test_aftertouch_and_polytouch(self) -> None:
        assert AfterTouch(1, 64).value == 64
        with pytest.raises(OutOfRangeError):
            PolyTouch(1, 60, 128)

    def test_tempo_is_24_bit(self) -> None:
        assert SetTempo(0xFFFFFF).tempo == 0xFFFFFF
        with pytest.raises(OutOfRangeError):
            SetTempo(0x1000000)

    def test_time_signature_power_of_two(self) -> None:
        assert TimeSignature(6, 8, 24).denominator == 8
        with pytest.raises(InvalidArgumentError):
            TimeSignature(3, 3, 24)

    def test_time_signature_defaults(self) -> None:
        signature = TimeSignature(4, 4, 24)
        assert signature.time is None
        assert signature.notated_32nd_notes_per_beat == 8


class TestEventTime:
    def test_int_time_coerced(self) -> None:
        assert NoteOn(0, 60, 100, 480).time == FixedPoint.from_int(480)

    def test_float_time_coerced(self) -> None:
        assert NoteOn(0, 60, 100, 0.5).time == FixedPoint.from_ratio(1, 2)

    def test_channel_event_requires_time(self) -> None:
        with pytest.raises(InvalidArgumentError):
            ControlChange(0, 7, 100, None)

    def test_tempo_time_optional(self) -> None:
        assert SetTempo(500000).time is None
        assert SetTempo(500000, 10).time == 10

    def test_events_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            NoteOn(0, 60, 100).note = 61  # type: ignore[misc]

    def test_kind_tag(self) -> None:
        assert NoteOn(0, 60, 100).kind is EventKind.NOTE_ON
        assert TimeSignature(4, 4, 24).kind is EventKind.TIME_SIGNATURE


class TestNoteRoles:
    def test_zero_velocity_note_on_is_note_end(self) -> None:
        event = NoteOn(0, 60, 0)
        assert is_note_end(event)
        assert not is_note_start(event)

    def test_note_off_is_note_end(self) -> None:
        assert is_note_end(NoteOff(0, 60, 64))

    def test_control_change_is_neither(self) -> None:
        event = ControlChange(0, 7, 100)
        assert not is_note_start(event)
        assert not is_note_end(event)


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------


class TestPerformance:
    def test_list_input_stored_as_tuple(self) -> None:
        performance = Performance([NoteOn(0, 60, 100)])
        assert isinstance(performance.events, tuple)

    def test_rejects_foreign_items(self) -> None:
        with pytest.raises(NotSupportedError):
            Performance([NoteOn(0, 60, 100), "note"])

    def test_frozen(self, melody: Performance) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            melody.events = ()  # type: ignore[misc]

    def test_len_iter_index(self, melody: Performance) -> None:
        assert len(melody) == 3
        assert [e.kind for e in melody] == [
            EventKind.NOTE_ON,
            EventKind.SET_TEMPO,
            EventKind.NOTE_OFF,
        ]
        assert melody[1] == SetTempo(120)

    def test_slice_is_performance(self, melody: Performance) -> None:
        head = melody[:2]
        assert isinstance(head, Performance)
        assert len(head) == 2

    def test_duration_ignores_untimed(self) -> None:
        performance = Performance(
            (SetTempo(500000), NoteOn(0, 60, 100, 100), NoteOff(0, 60, 0, 400))
        )
        assert performance.duration() == 300
        assert performance.start_time() == 100

    def test_empty(self) -> None:
        empty = Performance.empty()
        assert len(empty) == 0
        assert empty.duration() == 0

    def test_equality_by_value(self) -> None:
        a = Performance((NoteOn(0, 60, 100, 0),))
        b = Performance([NoteOn(0, 60, 100, FixedPoint.from_int(0))])
        assert a == b


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestEngineConfig:
    def test_defaults(self) -> None:
        config = EngineConfig()
        assert config.range_config.policy == OutOfRangePolicy.CLAMP
        assert config.quantize_config.rounding == QuantizeRounding.HALF_UP
        assert config.extract_config.center == 60
        assert config.extract_config.keep_context is False

    def test_round_trip(self) -> None:
        config = EngineConfig()
        config.range_config.policy = OutOfRangePolicy.RAISE
        config.arpeggio_config.pattern = ArpeggioPattern.DOWN_UP
        config.extract_config.keep_context = True
        assert EngineConfig.from_dict(config.to_dict()) == config

    def test_missing_keys_keep_defaults(self) -> None:
        assert EngineConfig.from_dict({}) == EngineConfig()

    def test_bad_enum_value(self) -> None:
        with pytest.raises(InvalidArgumentError):
            EngineConfig.from_dict({"range_policy": "wrap"})

    def test_extract_center_parsed(self) -> None:
        config = EngineConfig.from_dict({"extract_center": 48})
        assert config.extract_config.center == 48

    @pytest.mark.parametrize("center", ["abc", None, -1, 128])
    def test_bad_extract_center(self, center) -> None:
        with pytest.raises(InvalidArgumentError):
            EngineConfig.from_dict({"extract_center": center})


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestExhaustive:
    def test_missing_kind_rejected(self) -> None:
        table = {kind: keep for kind in EventKind if kind != EventKind.POLY_TOUCH}
        with pytest.raises(NotSupportedError, match="POLY_TOUCH"):
            exhaustive(table)

    def test_complete_table_returned(self) -> None:
        table = {kind: keep for kind in EventKind}
        assert exhaustive(table) is table
