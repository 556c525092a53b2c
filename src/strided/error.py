"""
Error handling for strided views.

Every failure raised by this package is a ``StridedError`` carrying a numeric
code. Each concrete error additionally derives from the builtin exception a
Python caller would naturally catch for it (``IndexError`` for out-of-range
access, ``BufferError`` for buffer negotiation, ``ValueError`` for bad
arguments), so iteration and generic handlers keep working.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

STRIDED_OK = 0

# General errors (1-9)
STRIDED_ERROR_UNKNOWN = 1

# Argument errors (10-19)
STRIDED_ERROR_DIMENSION_MISMATCH = 11
STRIDED_ERROR_INDEX_OUT_OF_RANGE = 14
STRIDED_ERROR_LAYOUT = 15
STRIDED_ERROR_READ_ONLY = 16
STRIDED_ERROR_INVALID_SLICE = 17
STRIDED_ERROR_INVALID_AXIS = 18
STRIDED_ERROR_NOT_BROADCASTABLE = 19


# Error code to message mapping
_ERROR_MESSAGES = {
    STRIDED_OK: "Success",
    STRIDED_ERROR_UNKNOWN: "Unknown error",
    STRIDED_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    STRIDED_ERROR_INDEX_OUT_OF_RANGE: "Index out of range",
    STRIDED_ERROR_LAYOUT: "Incompatible memory layout",
    STRIDED_ERROR_READ_ONLY: "Buffer is read-only",
    STRIDED_ERROR_INVALID_SLICE: "Invalid slice",
    STRIDED_ERROR_INVALID_AXIS: "Invalid axis",
    STRIDED_ERROR_NOT_BROADCASTABLE: "Axis is not broadcastable",
}


# =============================================================================
# Exception Classes
# =============================================================================

class StridedError(Exception):
    """
    Base exception for all strided view errors.

    Subclasses pin ``code`` and take only the message; the message defaults
    to the generic text for the code when none is given.
    """

    code: int = STRIDED_ERROR_UNKNOWN

    def __init__(self, code: Optional[int] = None, message: Optional[str] = None):
        """
        Create a strided view exception.

        Args:
            code: Error code, defaults to the class-level code
            message: Optional detailed message
        """
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "StridedError":
        """Create the exception registered for ``code`` with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        exc_type = _ERROR_TYPES.get(code)
        if exc_type is None:
            return cls(code, msg)
        return exc_type(msg)


class _CodedError(StridedError):
    """Error whose code is fixed by its class."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(None, message)


class DimensionMismatchError(_CodedError, BufferError):
    """Buffer or argument rank differs from the view's dimension count."""

    code = STRIDED_ERROR_DIMENSION_MISMATCH


class LayoutError(_CodedError, BufferError):
    """Memory layout is incompatible with the requested view."""

    code = STRIDED_ERROR_LAYOUT


class ReadOnlyBufferError(_CodedError, BufferError):
    """A mutable view was requested over read-only memory."""

    code = STRIDED_ERROR_READ_ONLY


class IndexOutOfRangeError(_CodedError, IndexError):
    """An index is negative or not smaller than its axis extent."""

    code = STRIDED_ERROR_INDEX_OUT_OF_RANGE


class InvalidSliceError(_CodedError, ValueError):
    """A slice cannot be resolved against an axis extent."""

    code = STRIDED_ERROR_INVALID_SLICE


class InvalidAxisError(_CodedError, ValueError):
    """An axis argument is out of range or repeated."""

    code = STRIDED_ERROR_INVALID_AXIS


class NotBroadcastableError(_CodedError, ValueError):
    """Broadcast requested on an axis whose extent is not 1."""

    code = STRIDED_ERROR_NOT_BROADCASTABLE


_ERROR_TYPES = {
    STRIDED_ERROR_DIMENSION_MISMATCH: DimensionMismatchError,
    STRIDED_ERROR_LAYOUT: LayoutError,
    STRIDED_ERROR_READ_ONLY: ReadOnlyBufferError,
    STRIDED_ERROR_INDEX_OUT_OF_RANGE: IndexOutOfRangeError,
    STRIDED_ERROR_INVALID_SLICE: InvalidSliceError,
    STRIDED_ERROR_INVALID_AXIS: InvalidAxisError,
    STRIDED_ERROR_NOT_BROADCASTABLE: NotBroadcastableError,
}


def error_message(code: int) -> str:
    """Get the generic message for an error code."""
    return _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")


__all__ = [
    "STRIDED_OK",
    "STRIDED_ERROR_UNKNOWN",
    "STRIDED_ERROR_DIMENSION_MISMATCH",
    "STRIDED_ERROR_INDEX_OUT_OF_RANGE",
    "STRIDED_ERROR_LAYOUT",
    "STRIDED_ERROR_READ_ONLY",
    "STRIDED_ERROR_INVALID_SLICE",
    "STRIDED_ERROR_INVALID_AXIS",
    "STRIDED_ERROR_NOT_BROADCASTABLE",
    "StridedError",
    "DimensionMismatchError",
    "LayoutError",
    "ReadOnlyBufferError",
    "IndexOutOfRangeError",
    "InvalidSliceError",
    "InvalidAxisError",
    "NotBroadcastableError",
    "error_message",
]
