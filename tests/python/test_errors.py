"""
Tests for error types and codes.
"""

import pytest

from strided import error
from strided.error import (
    STRIDED_ERROR_DIMENSION_MISMATCH,
    STRIDED_ERROR_INDEX_OUT_OF_RANGE,
    STRIDED_ERROR_INVALID_AXIS,
    STRIDED_ERROR_LAYOUT,
    STRIDED_ERROR_UNKNOWN,
    StridedError,
    DimensionMismatchError,
    LayoutError,
    ReadOnlyBufferError,
    IndexOutOfRangeError,
    InvalidSliceError,
    InvalidAxisError,
    NotBroadcastableError,
    error_message,
)


class TestHierarchy:
    """Test that every error is also the matching builtin exception."""

    @pytest.mark.parametrize("exc_type, builtin", [
        (DimensionMismatchError, BufferError),
        (LayoutError, BufferError),
        (ReadOnlyBufferError, BufferError),
        (IndexOutOfRangeError, IndexError),
        (InvalidSliceError, ValueError),
        (InvalidAxisError, ValueError),
        (NotBroadcastableError, ValueError),
    ])
    def test_builtin_base(self, exc_type, builtin):
        assert issubclass(exc_type, StridedError)
        assert issubclass(exc_type, builtin)


class TestCodes:
    """Test error codes and messages."""

    def test_class_codes(self):
        assert StridedError().code == STRIDED_ERROR_UNKNOWN
        assert DimensionMismatchError().code == STRIDED_ERROR_DIMENSION_MISMATCH
        assert IndexOutOfRangeError().code == STRIDED_ERROR_INDEX_OUT_OF_RANGE
        assert LayoutError().code == STRIDED_ERROR_LAYOUT

    def test_default_message(self):
        assert str(InvalidAxisError()) == "Invalid axis"
        assert LayoutError().message == "Incompatible memory layout"

    def test_custom_message(self):
        exc = IndexOutOfRangeError("index 7 out of range")
        assert str(exc) == "index 7 out of range"
        assert exc.code == STRIDED_ERROR_INDEX_OUT_OF_RANGE

    def test_code_then_message(self):
        exc = StridedError(STRIDED_ERROR_LAYOUT, "bad stride")
        assert exc.code == STRIDED_ERROR_LAYOUT
        assert str(exc) == "bad stride"
        assert StridedError(STRIDED_ERROR_LAYOUT).message == "Incompatible memory layout"

    def test_from_code(self):
        exc = StridedError.from_code(STRIDED_ERROR_INVALID_AXIS, "flip")
        assert type(exc) is InvalidAxisError
        assert str(exc) == "flip: Invalid axis"

    def test_from_unknown_code(self):
        exc = StridedError.from_code(999)
        assert type(exc) is StridedError
        assert exc.code == 999
        assert str(exc) == "Unknown error"

    def test_every_argument_code_has_a_class(self):
        """Each code from 10 up is raised by exactly one error class."""
        codes = [getattr(error, name) for name in error.__all__
                 if name.startswith("STRIDED_ERROR_")]
        for code in (c for c in codes if c >= 10):
            exc = StridedError.from_code(code)
            assert type(exc) is not StridedError
            assert exc.code == code

    def test_error_message(self):
        assert error_message(STRIDED_ERROR_LAYOUT) == "Incompatible memory layout"
        assert error_message(999) == "Unknown error (code=999)"
