"""
Performance pipeline - chains engine operations over one Performance.

The pipeline:
1. Collects a list of named steps with their parameters
2. Runs them in order, each on the previous step's output
3. Hands every step the matching section of the EngineConfig
4. Reports progress and per-step results to observers
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..transforms.advanced import arpeggiate_chords, edit_dynamics, generate_harmony
from ..transforms.analysis import get_bpm, get_duration, note_count, pitch_range
from ..transforms.global_ops import change_tempo, remap_instruments, set_message
from ..transforms.notes import (
    change_note_duration,
    extract_notes,
    quantize_notes,
    reverse_notes,
    transpose_notes,
)
from .errors import NotSupportedError
from .models import EngineConfig, Performance
from .observer import (
    FunctionObserver,
    Notification,
    NotificationType,
    Observable,
    StepTracker,
)

logger = logging.getLogger(__name__)

# Operation name -> (function, EngineConfig attribute passed as `config`)
OPERATIONS: Dict[str, Tuple[Callable[..., Performance], Optional[str]]] = {
    "transpose_notes": (transpose_notes, "range_config"),
    "reverse_notes": (reverse_notes, "reverse_config"),
    "quantize_notes": (quantize_notes, "quantize_config"),
    "extract_notes": (extract_notes, "extract_config"),
    "change_note_duration": (change_note_duration, None),
    "change_tempo": (change_tempo, None),
    "remap_instruments": (remap_instruments, None),
    "set_message": (set_message, None),
    "generate_harmony": (generate_harmony, None),
    "arpeggiate_chords": (arpeggiate_chords, "arpeggio_config"),
    "edit_dynamics": (edit_dynamics, "range_config"),
}


class PerformancePipeline(Observable):
    """
    Ordered chain of engine operations.

    The pipeline holds no Performance between runs; each run() returns a new
    value and leaves its input untouched, so one pipeline can be reused.

    Usage:
        pipeline = PerformancePipeline(EngineConfig())
        pipeline.attach(lambda n: print(n.message))
        pipeline.add("transpose_notes", semitones=12)
        pipeline.add("quantize_notes", grid_size=120)
        result = pipeline.run(performance)
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize pipeline with configuration.

        Args:
            config: EngineConfig with policy settings (defaults if None)
        """
        super().__init__()
        self.config = config or EngineConfig()
        self.progress = StepTracker()
        self.progress.attach(FunctionObserver(self._forward_progress))
        self.steps: List[Tuple[str, Dict[str, Any]]] = []

    def _forward_progress(self, notification: Notification) -> None:
        """Forward progress notifications to our observers."""
        self.notify(notification)

    def add(self, operation: str, **params) -> "PerformancePipeline":
        """
        Append a step.

        Args:
            operation: Name of an engine operation (see OPERATIONS)
            **params: Keyword arguments for the operation

        Returns:
            self, for chaining

        Raises:
            NotSupportedError: If the operation name is unknown
        """
        if operation not in OPERATIONS:
            raise NotSupportedError(
                f"Operation {operation!r} is not supported. "
                f"Use one of: {sorted(OPERATIONS)}"
            )
        self.steps.append((operation, params))
        return self

    def run(self, performance: Performance) -> Performance:
        """
        Run every step in order.

        Args:
            performance: Input performance (not modified)

        Returns:
            Output of the last step (a copy of the input without steps)
        """
        try:
            self.progress.begin(
                "Transforming performance", [name for name, _ in self.steps]
            )
            current = Performance(performance.events)

            for operation, params in self.steps:
                self.progress.advance(operation)
                before = len(current)
                current = self._apply(operation, params, current)
                logger.debug("%s: %d -> %d events", operation, before, len(current))
                self.notify(
                    Notification(
                        type=NotificationType.STEP_COMPLETE,
                        data={
                            "operation": operation,
                            "events_in": before,
                            "events_out": len(current),
                        },
                        message=f"{operation} complete",
                    )
                )

            self.progress.finish(events=len(current))
            return current

        except Exception as e:
            self.progress.fail(e)
            raise

    def analyze(self, performance: Performance) -> Dict[str, Any]:
        """
        Summarize a performance.

        Returns:
            Dict with bpm, duration (float ticks), note_count and pitch_range
        """
        summary = {
            "bpm": get_bpm(performance),
            "duration": get_duration(performance).to_float(),
            "note_count": note_count(performance),
            "pitch_range": pitch_range(performance),
        }
        self.notify(
            Notification(
                type=NotificationType.ANALYSIS_COMPLETE,
                data=summary,
                message=f"Analyzed {len(performance)} events",
            )
        )
        return summary

    def _apply(
        self, operation: str, params: Dict[str, Any], performance: Performance
    ) -> Performance:
        function, config_name = OPERATIONS[operation]
        if config_name is not None and "config" not in params:
            params = dict(params, config=getattr(self.config, config_name))
        return function(performance, **params)
