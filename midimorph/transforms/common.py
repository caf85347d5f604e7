"""
Helpers shared by the transform modules.
"""

import logging
import math
from typing import Optional

from ..core.errors import OutOfRangeError
from ..core.models import OutOfRangePolicy, RangeConfig

logger = logging.getLogger(__name__)


def range_policy(config: Optional[RangeConfig]) -> OutOfRangePolicy:
    return (config or RangeConfig()).policy


class Clamper:
    """
    Applies the out-of-range policy to one field and counts clamps.

    Usage:
        clamp = Clamper("note", 0, 127, policy)
        value = clamp(note + semitones)
        clamp.report("transpose_notes")
    """

    def __init__(self, field: str, low: int, high: int, policy: OutOfRangePolicy):
        self.field = field
        self.low = low
        self.high = high
        self.policy = policy
        self.clamped = 0

    def __call__(self, value: int) -> int:
        if self.low <= value <= self.high:
            return value
        if self.policy == OutOfRangePolicy.RAISE:
            raise OutOfRangeError(self.field, value, self.low, self.high)
        self.clamped += 1
        return max(self.low, min(self.high, value))

    def report(self, operation: str) -> None:
        if self.clamped:
            logger.info(
                "%s: clamped %d %s value(s) to [%d, %d]",
                operation,
                self.clamped,
                self.field,
                self.low,
                self.high,
            )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
