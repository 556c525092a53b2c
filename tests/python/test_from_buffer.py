"""
Tests for constructing views from explicit size/stride triples.
"""

import numpy as np
import pytest

from strided import (
    BufferConfig,
    StridedArrayView1D,
    StridedArrayView2D,
    MutableStridedArrayView1D,
    DimensionMismatchError,
    LayoutError,
    ReadOnlyBufferError,
    config,
)


class TestFromBuffer:
    """Test explicit layouts over raw bytes."""

    def test_grid(self, bytes12):
        view = StridedArrayView2D.from_buffer(bytes12, (3, 4), (4, 1))
        assert view.tolist() == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9, 10, 11]]
        assert view.obj is bytes12

    def test_sparse(self, bytes12):
        view = StridedArrayView1D.from_buffer(bytes12, (4,), (3,))
        assert view.tolist() == [0, 3, 6, 9]

    def test_negative_stride(self, bytes12):
        view = StridedArrayView1D.from_buffer(bytes12, (4,), (-3,), offset=9)
        assert view.tolist() == [9, 6, 3, 0]

    def test_zero_stride(self, bytes12):
        view = StridedArrayView1D.from_buffer(bytes12, (3,), (0,), offset=5)
        assert view.tolist() == [5, 5, 5]

    def test_dtype_override(self, bytes12):
        """The owner's bytes can be reinterpreted."""
        view = StridedArrayView1D.from_buffer(bytes12, (3,), (4,), dtype="<i4")
        assert view.itemsize == 4
        assert view.tolist() == np.frombuffer(bytes(bytes12), dtype="<i4").tolist()

    def test_offset_relative_to_first_element(self, ints6):
        """Offsets count from the owner's first element."""
        view = StridedArrayView1D.from_buffer(ints6[2:], (2,), (4,), offset=4)
        assert view.tolist() == [3, 4]

    def test_mutable(self, bytes12):
        view = MutableStridedArrayView1D.from_buffer(bytes12, (2,), (6,), offset=1)
        view[1] = 100
        assert bytes12[7] == 100

    def test_mutable_readonly(self):
        with pytest.raises(ReadOnlyBufferError):
            MutableStridedArrayView1D.from_buffer(b"abcd", (2,), (1,))

    def test_rank_mismatch(self, bytes12):
        with pytest.raises(DimensionMismatchError):
            StridedArrayView2D.from_buffer(bytes12, (12,), (1,))
        with pytest.raises(DimensionMismatchError):
            StridedArrayView2D.from_buffer(bytes12, (3, 4), (4,))

    def test_negative_size(self, bytes12):
        with pytest.raises(LayoutError):
            StridedArrayView1D.from_buffer(bytes12, (-1,), (1,))

    def test_empty_size(self, bytes12):
        view = StridedArrayView2D.from_buffer(bytes12, (0, 5), (100, 100))
        assert view.size == (0, 5)
        assert bytes(view) == b""


class TestFootprint:
    """Test footprint validation against the owner's memory."""

    def test_past_the_end(self, bytes12):
        with pytest.raises(LayoutError):
            StridedArrayView1D.from_buffer(bytes12, (5,), (3,))

    def test_before_the_start(self, bytes12):
        with pytest.raises(LayoutError):
            StridedArrayView1D.from_buffer(bytes12, (4,), (-3,), offset=6)

    def test_layout_error_is_buffer_error(self, bytes12):
        with pytest.raises(BufferError):
            StridedArrayView1D.from_buffer(bytes12, (13,), (1,))

    def test_validation_disabled(self, bytes12):
        """Without validation, construction passes but access is still checked."""
        with config.local(buffer=BufferConfig(validate_footprint=False)):
            view = StridedArrayView1D.from_buffer(bytes12, (5,), (3,))
        assert view[3] == 9
        with pytest.raises(LayoutError):
            view[4]

    def test_export_outside_buffer(self, bytes12):
        """Exporting an unchecked layout that leaves the buffer is a layout error."""
        with config.local(buffer=BufferConfig(validate_footprint=False)):
            past_end = StridedArrayView1D.from_buffer(bytes12, (5,), (3,))
            before_start = StridedArrayView1D.from_buffer(bytes12, (4,), (-3,), offset=6)
        with pytest.raises(LayoutError):
            past_end.to_numpy()
        with pytest.raises(LayoutError):
            np.asarray(before_start)


class TestAlignment:
    """Test offset alignment checks."""

    def test_misaligned(self, bytes12):
        with pytest.raises(LayoutError):
            StridedArrayView1D.from_buffer(bytes12, (2,), (4,), offset=2, dtype="<i4")

    def test_misaligned_allowed(self, bytes12):
        with config.local(buffer=BufferConfig(require_aligned_offset=False)):
            view = StridedArrayView1D.from_buffer(
                bytes12, (2,), (4,), offset=1, dtype="<u2")
        assert view.tolist() == [0x0201, 0x0605]
