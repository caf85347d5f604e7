"""
Error types raised by midimorph operations.

All errors surface synchronously from the operation that detected them.
Operations build their output completely before returning, so no input is
ever left half-modified when one of these is raised.
"""


class MidimorphError(Exception):
    """Base class for all midimorph errors."""


class NotSupportedError(MidimorphError):
    """Requested operation, strategy or event variant is not supported."""


class OutOfRangeError(MidimorphError, ValueError):
    """A field value would leave its declared numeric domain."""

    def __init__(self, field: str, value, low, high):
        self.field = field
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"{field}={value!r} is outside [{low}, {high}]")


class InvalidArgumentError(MidimorphError, ValueError):
    """A caller-supplied parameter is structurally invalid."""
