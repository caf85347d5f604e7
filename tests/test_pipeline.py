"""
tests/test_pipeline.py - Tests for midimorph/core/pipeline.py and observer.py

Covers:
    - Step chaining and per-step configuration
    - Notification sequence seen by observers
    - Error reporting and re-raising
    - analyze() summary
"""

from __future__ import annotations

import pytest

from midimorph.core.errors import NotSupportedError, OutOfRangeError
from midimorph.core.models import (
    EngineConfig,
    OutOfRangePolicy,
    Performance,
    RangeConfig,
)
from midimorph.core.observer import (
    Notification,
    NotificationType,
    Observable,
    Observer,
    StepTracker,
)
from midimorph.core.pipeline import PerformancePipeline
from midimorph.transforms.notes import quantize_notes, transpose_notes

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Recorder(Observer):
    def __init__(self) -> None:
        self.notifications = []

    def update(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def types(self) -> list:
        return [n.type for n in self.notifications]


# ---------------------------------------------------------------------------
# Observer
# ---------------------------------------------------------------------------


class TestObservable:
    def test_callable_is_wrapped(self) -> None:
        seen = []
        subject = Observable()
        observer = subject.attach(seen.append)
        subject.notify(Notification(NotificationType.ERROR, message="x"))
        assert isinstance(observer, Observer)
        assert [n.message for n in seen] == ["x"]

    def test_detach(self) -> None:
        recorder = _Recorder()
        subject = Observable()
        subject.attach(recorder)
        subject.detach(recorder)
        subject.notify(Notification(NotificationType.ERROR))
        assert recorder.notifications == []

    def test_attach_twice_notifies_once(self) -> None:
        recorder = _Recorder()
        subject = Observable()
        subject.attach(recorder)
        subject.attach(recorder)
        subject.notify(Notification(NotificationType.ERROR))
        assert len(recorder.notifications) == 1

    def test_step_tracker_names_planned_operation(self) -> None:
        recorder = _Recorder()
        tracker = StepTracker()
        tracker.attach(recorder)
        tracker.begin("run", ["a", "b", "c", "d"])
        tracker.advance()
        update = recorder.notifications[-1]
        assert update.data["operation"] == "a"
        assert update.data["fraction"] == 0.25
        assert update.message == "[1/4] a"

    def test_step_tracker_finish_and_fail(self) -> None:
        recorder = _Recorder()
        tracker = StepTracker()
        tracker.attach(recorder)
        tracker.begin("run", ["transpose_notes"])
        tracker.advance()
        error = ValueError("bad")
        tracker.fail(error)
        assert recorder.notifications[-1].data["error"] is error
        assert recorder.notifications[-1].message == "transpose_notes failed: bad"
        tracker.finish(events=3)
        assert recorder.notifications[-1].data == {
            "label": "run",
            "steps": 1,
            "events": 3,
        }


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class TestPipeline:
    def test_chains_steps(self, two_notes: Performance) -> None:
        pipeline = PerformancePipeline()
        pipeline.add("transpose_notes", semitones=12).add(
            "quantize_notes", grid_size=96
        )
        expected = quantize_notes(transpose_notes(two_notes, 12), 96)
        assert pipeline.run(two_notes) == expected

    def test_no_steps_returns_copy(self, melody: Performance) -> None:
        assert PerformancePipeline().run(melody) == melody

    def test_reusable(self, melody: Performance) -> None:
        pipeline = PerformancePipeline().add("transpose_notes", semitones=1)
        assert pipeline.run(melody) == pipeline.run(melody)

    def test_notification_sequence(self, melody: Performance) -> None:
        recorder = _Recorder()
        pipeline = PerformancePipeline()
        pipeline.attach(recorder)
        pipeline.add("transpose_notes", semitones=2).add("change_tempo", new_tempo=90)
        pipeline.run(melody)
        assert recorder.types == [
            NotificationType.PROGRESS_START,
            NotificationType.PROGRESS_UPDATE,
            NotificationType.STEP_COMPLETE,
            NotificationType.PROGRESS_UPDATE,
            NotificationType.STEP_COMPLETE,
            NotificationType.PROGRESS_COMPLETE,
        ]
        step = recorder.notifications[2]
        assert step.data == {
            "operation": "transpose_notes",
            "events_in": 3,
            "events_out": 3,
        }

    def test_unknown_operation(self) -> None:
        with pytest.raises(NotSupportedError):
            PerformancePipeline().add("explode")

    def test_config_policy_applies(self, melody: Performance) -> None:
        config = EngineConfig()
        config.range_config.policy = OutOfRangePolicy.RAISE
        pipeline = PerformancePipeline(config).add("transpose_notes", semitones=100)
        with pytest.raises(OutOfRangeError):
            pipeline.run(melody)

    def test_explicit_config_wins(self, melody: Performance) -> None:
        config = EngineConfig()
        config.range_config.policy = OutOfRangePolicy.RAISE
        pipeline = PerformancePipeline(config).add(
            "transpose_notes", semitones=100, config=RangeConfig()
        )
        assert pipeline.run(melody)[0].note == 127

    def test_error_is_reported(self, melody: Performance) -> None:
        recorder = _Recorder()
        pipeline = PerformancePipeline().add("change_note_duration", factor=-1)
        pipeline.attach(recorder)
        with pytest.raises(ValueError):
            pipeline.run(melody)
        assert recorder.types[-1] == NotificationType.ERROR
        assert recorder.notifications[-1].data["operation"] == "change_note_duration"

    def test_analyze(self, melody: Performance) -> None:
        recorder = _Recorder()
        pipeline = PerformancePipeline()
        pipeline.attach(recorder)
        summary = pipeline.analyze(melody)
        assert summary == {
            "bpm": 120,
            "duration": 480.0,
            "note_count": 1,
            "pitch_range": (60, 60),
        }
        assert recorder.types == [NotificationType.ANALYSIS_COMPLETE]
