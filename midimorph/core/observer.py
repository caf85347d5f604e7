"""
Observer pattern implementation for midimorph.

Lets callers follow the progress of a PerformancePipeline without the
pipeline knowing who is listening.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union


class NotificationType(Enum):
    """Types of notifications that can be observed."""

    PROGRESS_START = "progress_start"
    PROGRESS_UPDATE = "progress_update"
    PROGRESS_COMPLETE = "progress_complete"
    STEP_COMPLETE = "step_complete"
    ANALYSIS_COMPLETE = "analysis_complete"
    ERROR = "error"


@dataclass
class Notification:
    """Notification data passed to observers."""

    type: NotificationType
    data: Any = None
    message: str = ""


class Observer(ABC):
    """Abstract observer interface."""

    @abstractmethod
    def update(self, notification: Notification) -> None:
        """
        Called when the observed object reports something.

        Args:
            notification: Notification with type, data, and message
        """
        pass


class FunctionObserver(Observer):
    """
    Observer that calls a function when updated.

    Useful for simple callbacks without creating a full Observer class.
    """

    def __init__(self, callback: Callable[[Notification], None]):
        self.callback = callback

    def update(self, notification: Notification) -> None:
        """Call the callback with the notification."""
        self.callback(notification)


class Observable:
    """
    Subject class that maintains a list of observers and notifies them.
    """

    def __init__(self):
        self._observers: List[Observer] = []

    def attach(
        self, observer: Union[Observer, Callable[[Notification], None]]
    ) -> Observer:
        """
        Attach an observer. Plain callables are wrapped in FunctionObserver.

        Returns:
            The attached Observer (needed to detach a wrapped callable)
        """
        if not isinstance(observer, Observer):
            observer = FunctionObserver(observer)
        if observer not in self._observers:
            self._observers.append(observer)
        return observer

    def detach(self, observer: Observer) -> None:
        """Detach an observer; unknown observers are ignored."""
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, notification: Notification) -> None:
        """Notify all observers."""
        for observer in self._observers:
            observer.update(notification)

    def clear_observers(self) -> None:
        """Remove all observers."""
        self._observers.clear()


class StepTracker(Observable):
    """
    Reports a PerformancePipeline run one engine operation at a time.

    Every notification names the run and, once steps are under way, the
    operation being applied and its one-based position, so an observer can
    show "[2/3] quantize_notes" without knowing anything about the pipeline.

    Usage:
        tracker = StepTracker()
        tracker.attach(lambda n: print(n.message))
        tracker.begin("Transforming performance", ["transpose_notes"])
        tracker.advance("transpose_notes")
        tracker.finish(events=42)
    """

    def __init__(self):
        super().__init__()
        self.label = ""
        self.operations: List[str] = []
        self.position = 0

    @property
    def current(self) -> Optional[str]:
        """Operation at the current position, or None before the first step."""
        if 0 < self.position <= len(self.operations):
            return self.operations[self.position - 1]
        return None

    def begin(self, label: str, operations: Sequence[str]) -> None:
        """
        Start a run.

        Args:
            label: Human-readable name of the run
            operations: Operation names in the order they will be applied
        """
        self.label = label
        self.operations = list(operations)
        self.position = 0
        self.notify(
            Notification(
                type=NotificationType.PROGRESS_START,
                data={"label": label, "operations": list(self.operations)},
                message=f"{label}: {len(self.operations)} step(s)",
            )
        )

    def advance(self, operation: Optional[str] = None) -> None:
        """
        Move to the next step.

        Args:
            operation: Name of the step; defaults to the planned operation
        """
        self.position += 1
        name = operation or self.current or ""
        total = len(self.operations)
        self.notify(
            Notification(
                type=NotificationType.PROGRESS_UPDATE,
                data={
                    "label": self.label,
                    "operation": name,
                    "step": self.position,
                    "total": total,
                    "fraction": self.position / total if total else 1.0,
                },
                message=f"[{self.position}/{total}] {name}",
            )
        )

    def finish(self, events: int) -> None:
        """Report a finished run and the size of its result."""
        self.notify(
            Notification(
                type=NotificationType.PROGRESS_COMPLETE,
                data={"label": self.label, "steps": self.position, "events": events},
                message=f"{self.label}: done after {self.position} step(s), "
                f"{events} event(s)",
            )
        )

    def fail(self, error: Exception) -> None:
        """Report the exception that stopped the run at the current step."""
        where = self.current or self.label
        self.notify(
            Notification(
                type=NotificationType.ERROR,
                data={"label": self.label, "operation": self.current, "error": error},
                message=f"{where} failed: {error}",
            )
        )
