"""
Strided Array Views

Non-owning, multi-dimensional views over memory owned by another object.
A view is described by a byte offset into the owner's memory plus a size and
a signed byte stride per dimension. Strides may be negative (reversed
traversal), larger than the element (sparse layout) or zero (broadcast).

All derivations (slicing, transposition, flipping, broadcasting) produce new
views sharing the same memory; no data is ever moved and the source view is
never modified.

Typical usage:
    >>> data = bytearray(range(6))
    >>> view = StridedArrayView1D(data)
    >>> view[1:5:2].tolist()
    [1, 3]
    >>> view.flipped(0).tolist()
    [5, 4, 3, 2, 1, 0]
    >>> grid = StridedArrayView2D.from_buffer(data, (2, 3), (3, 1))
    >>> grid.transposed(0, 1)[2, 1]
    5
"""

from __future__ import annotations

import itertools
import logging
import math
import operator
from typing import Any, ClassVar, Dict, Iterator, List, Sequence, Tuple, Union

import numpy as np

from ._dtypes import DTypeLike, format_of, resolve_dtype, to_python
from ._memory import BufferLayout, Memory, acquire, footprint
from ._slicing import calculate_slice
from ._config import config
from .error import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidAxisError,
    LayoutError,
    NotBroadcastableError,
)

logger = logging.getLogger("strided.views")

__all__ = [
    'StridedArrayView',
    'StridedArrayView1D',
    'StridedArrayView2D',
    'StridedArrayView3D',
    'MutableStridedArrayView',
    'MutableStridedArrayView1D',
    'MutableStridedArrayView2D',
    'MutableStridedArrayView3D',
    'ArrayView',
    'MutableArrayView',
]

Key = Union[int, slice, Tuple[Union[int, slice], ...]]


# =============================================================================
# Generic View
# =============================================================================

class StridedArrayView:
    """
    Read-only strided view of fixed dimension count.

    This class holds the rank-generic algorithms; the concrete
    ``StridedArrayView1D``/``2D``/``3D`` classes only pin ``dimensions``.

    Attributes:
        dimensions (int): Dimension count
        size (tuple): Extent in each dimension
        stride (tuple): Byte stride in each dimension
        offset (int): Byte offset of the first element in the owner's memory
        obj: Memory owner object
        dtype (numpy.dtype): Element type
    """

    __slots__ = ("_memory", "_offset", "_size", "_stride", "_dtype")

    dimensions: ClassVar[int] = 0
    _mutable: ClassVar[bool] = False

    def __init__(self, buffer: Any = None):
        """
        Construct a view of a buffer, or an empty view.

        Args:
            buffer: Object supporting the buffer protocol. Its reported
                dimension count must match ``dimensions``. When omitted the
                view is empty.

        Raises:
            DimensionMismatchError: If the buffer rank differs
            ReadOnlyBufferError: If a mutable view wraps read-only memory
        """
        if not self.dimensions:
            raise TypeError(f"{type(self).__name__} has no fixed dimension count")

        if buffer is None:
            self._set(Memory.empty(), 0, (0,)*self.dimensions, (0,)*self.dimensions,
                      resolve_dtype(None))
            return

        memory, layout = acquire(buffer, writable=self._mutable)
        self._validate_layout(layout)
        self._set(memory, layout.offset, layout.shape, layout.strides, layout.dtype)
        logger.debug("%s over %s: size=%s stride=%s",
                     type(self).__name__, type(buffer).__name__, self._size, self._stride)

    def _validate_layout(self, layout: BufferLayout) -> None:
        if layout.ndim != self.dimensions:
            raise DimensionMismatchError(
                f"expected {self.dimensions} dimensions but got {layout.ndim}")

    def _set(self, memory, offset, size, stride, dtype) -> None:
        self._memory = memory
        self._offset = offset
        self._size = tuple(size)
        self._stride = tuple(stride)
        self._dtype = dtype

    @classmethod
    def _wrap(cls, memory: Memory, offset: int, size: Sequence[int],
              stride: Sequence[int], dtype: np.dtype) -> "StridedArrayView":
        view = cls.__new__(cls)
        view._set(memory, offset, size, stride, dtype)
        return view

    @classmethod
    def from_buffer(
        cls,
        buffer: Any,
        size: Sequence[int],
        stride: Sequence[int],
        offset: int = 0,
        dtype: DTypeLike = None,
    ) -> "StridedArrayView":
        """
        Construct a view from a buffer plus an explicit size/stride pair.

        Args:
            buffer: Memory owner supporting the buffer protocol
            size: Extent per dimension, exactly ``dimensions`` entries
            stride: Byte stride per dimension, exactly ``dimensions`` entries
            offset: Byte offset of the first element, relative to the
                buffer's first element
            dtype: Element type; defaults to the buffer's own

        Raises:
            DimensionMismatchError: If ``size`` or ``stride`` has the wrong rank
            LayoutError: If the layout addresses memory outside the buffer,
                has a negative extent or a misaligned offset
        """
        if not cls.dimensions:
            raise TypeError(f"{cls.__name__} has no fixed dimension count")
        size = tuple(operator.index(n) for n in size)
        stride = tuple(operator.index(s) for s in stride)
        if len(size) != cls.dimensions or len(stride) != cls.dimensions:
            raise DimensionMismatchError(
                f"expected {cls.dimensions} dimensions but got size of "
                f"{len(size)} and stride of {len(stride)}")
        if any(n < 0 for n in size):
            raise LayoutError(f"negative size {size}")

        memory, layout = acquire(buffer, writable=cls._mutable)
        dtype = layout.dtype if dtype is None else resolve_dtype(dtype)
        offset = operator.index(offset)

        buffer_config = config.buffer
        if buffer_config.require_aligned_offset and offset % dtype.itemsize:
            raise LayoutError(
                f"offset {offset} is not a multiple of the {dtype.itemsize}-byte element")
        start = layout.offset + offset
        if buffer_config.validate_footprint:
            lo, hi = footprint(start, size, stride, dtype.itemsize)
            if not memory.contains(lo, hi):
                raise LayoutError(
                    f"size {size} with stride {stride} at offset {offset} "
                    f"exceeds the {memory.nbytes}-byte buffer")

        view = cls._wrap(memory, start, size, stride, dtype)
        view._validate_explicit()
        return view

    def _validate_explicit(self) -> None:
        pass

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, ...]:
        """View size in each dimension."""
        return self._size

    @property
    def stride(self) -> Tuple[int, ...]:
        """View stride in each dimension."""
        return self._stride

    @property
    def offset(self) -> int:
        """Byte offset of the first element in the owner's memory."""
        return self._offset

    @property
    def obj(self) -> Any:
        """Memory owner object."""
        return self._memory.owner

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def itemsize(self) -> int:
        return self._dtype.itemsize

    @property
    def format(self) -> str:
        """Struct-style format of one element."""
        return format_of(self._dtype)

    @property
    def nbytes(self) -> int:
        """Bytes produced by flattening the view."""
        return math.prod(self._size) * self.itemsize

    @property
    def is_contiguous(self) -> bool:
        """Whether elements are packed in row-major order with no gaps."""
        expected = self.itemsize
        for n, s in zip(reversed(self._size), reversed(self._stride)):
            if n != 1 and s != expected:
                return False
            expected *= n
        return True

    def __len__(self) -> int:
        """View size in the top-level dimension."""
        return self._size[0]

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    def _derive(self, offset: int, size: Sequence[int], stride: Sequence[int]) -> "StridedArrayView":
        cls = _view_class(len(size), self._mutable)
        return cls._wrap(self._memory, offset, size, stride, self._dtype)

    def _check_axis(self, axis: int) -> int:
        axis = operator.index(axis)
        if not 0 <= axis < self.dimensions:
            raise InvalidAxisError(
                f"dimension {axis} out of range for a {self.dimensions}D view")
        return axis

    def transposed(self, a: int, b: int) -> "StridedArrayView":
        """
        Transpose two dimensions.

        Raises:
            InvalidAxisError: If either dimension is out of range or ``a == b``
        """
        a, b = operator.index(a), operator.index(b)
        if a == b or not 0 <= a < self.dimensions or not 0 <= b < self.dimensions:
            raise InvalidAxisError(
                f"dimensions {a}, {b} can't be transposed in a {self.dimensions}D view")
        size, stride = list(self._size), list(self._stride)
        size[a], size[b] = size[b], size[a]
        stride[a], stride[b] = stride[b], stride[a]
        return self._derive(self._offset, size, stride)

    def flipped(self, dimension: int) -> "StridedArrayView":
        """
        Flip a dimension so it is traversed in reverse.

        Raises:
            InvalidAxisError: If the dimension is out of range
        """
        axis = self._check_axis(dimension)
        size, stride = self._size, list(self._stride)
        offset = self._offset
        if size[axis]:
            offset += (size[axis] - 1)*stride[axis]
        stride[axis] = -stride[axis]
        return self._derive(offset, size, stride)

    def broadcasted(self, dimension: int, size: int) -> "StridedArrayView":
        """
        Repeat a single-element dimension ``size`` times.

        All positions along the broadcast dimension alias the same element.

        Raises:
            InvalidAxisError: If the dimension is out of range
            NotBroadcastableError: If the dimension does not have size 1
        """
        axis = self._check_axis(dimension)
        size = operator.index(size)
        if self._size[axis] != 1:
            raise NotBroadcastableError(
                f"can't broadcast dimension {axis} with {self._size[axis]} elements")
        if size < 0:
            raise NotBroadcastableError(f"can't broadcast to a negative size {size}")
        new_size, stride = list(self._size), list(self._stride)
        new_size[axis] = size
        stride[axis] = 0
        return self._derive(self._offset, new_size, stride)

    # -------------------------------------------------------------------------
    # Indexing and Slicing
    # -------------------------------------------------------------------------

    def _check_index(self, axis: int, index: Any) -> int:
        index = operator.index(index)
        if index < 0 or index >= self._size[axis]:
            raise IndexOutOfRangeError(
                f"index {index} out of range for dimension {axis} of size {self._size[axis]}")
        return index

    def _resolve(self, key: Key) -> Tuple[int, List[int], List[int]]:
        """Resolve an index/slice key to ``(offset, size, stride)``.

        Every index is bounds-checked before any offset is computed. An empty
        size list means the key addresses a single element.
        """
        entries = key if isinstance(key, tuple) else (key,)
        if len(entries) > self.dimensions:
            raise DimensionMismatchError(
                f"too many indices for a {self.dimensions}D view: got {len(entries)}")

        resolved = []
        for axis, entry in enumerate(entries):
            if isinstance(entry, slice):
                resolved.append(calculate_slice(entry, self._size[axis]))
            else:
                resolved.append(self._check_index(axis, entry))

        offset = self._offset
        size: List[int] = []
        stride: List[int] = []
        for axis, entry in enumerate(resolved):
            s = self._stride[axis]
            if isinstance(entry, int):
                offset += entry*s
                continue
            n = entry.size
            if entry.step > 0 or not n:
                offset += entry.start*s
            else:
                offset += (entry.stop - 1)*s
            size.append(n)
            stride.append(s*entry.step)
        size.extend(self._size[len(entries):])
        stride.extend(self._stride[len(entries):])
        return offset, size, stride

    def __getitem__(self, key: Key) -> Any:
        """
        Element, sub-view or slice at given position.

        An integer per dimension returns the element; fewer integers return
        a lower-dimensional sub-view; slices keep their dimension.

        Raises:
            IndexOutOfRangeError: If an index is negative or past the end
            InvalidSliceError: If a slice cannot be resolved
            DimensionMismatchError: If there are more indices than dimensions
        """
        offset, size, stride = self._resolve(key)
        if not size:
            return self._load(offset)
        return self._derive(offset, size, stride)

    def _load(self, offset: int) -> Any:
        return to_python(self._memory.load(offset, self._dtype))

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self[i]

    # -------------------------------------------------------------------------
    # Flattening
    # -------------------------------------------------------------------------

    def _offsets(self) -> Iterator[int]:
        """Byte offsets of all elements in row-major order."""
        stride = self._stride
        for index in itertools.product(*(range(n) for n in self._size)):
            yield self._offset + sum(i*s for i, s in zip(index, stride))

    def __bytes__(self) -> bytes:
        """Copy the viewed elements into contiguous row-major bytes."""
        if self.is_contiguous:
            return self._memory.read(self._offset, self.nbytes)
        itemsize = self.itemsize
        return b"".join(self._memory.read(offset, itemsize) for offset in self._offsets())

    def tobytes(self) -> bytes:
        """Alias for ``bytes(view)``."""
        return bytes(self)

    def tolist(self) -> List:
        """Convert to (nested) Python lists in row-major order."""
        if self.dimensions == 1:
            stride = self._stride[0]
            return [self._load(self._offset + i*stride) for i in range(self._size[0])]
        return [sub.tolist() for sub in self]

    # -------------------------------------------------------------------------
    # Array Export
    # -------------------------------------------------------------------------

    @property
    def __array_interface__(self) -> Dict[str, Any]:
        """Shape/stride description consumed by ``numpy.asarray``."""
        return self.to_numpy().__array_interface__

    def to_numpy(self) -> np.ndarray:
        """Zero-copy numpy array over the same memory.

        The array is writable only for mutable views over writable memory.
        """
        if 0 in self._size:
            arr = np.empty(self._size, dtype=self._dtype)
        else:
            try:
                arr = np.ndarray(
                    self._size,
                    dtype=self._dtype,
                    buffer=self._memory.region,
                    offset=self._offset,
                    strides=self._stride,
                )
            except (TypeError, ValueError) as e:
                raise LayoutError(
                    f"size {self._size} with stride {self._stride} at offset "
                    f"{self._offset} exceeds the {self._memory.nbytes}-byte buffer") from e
        if not self._mutable or self._memory.readonly:
            arr.flags.writeable = False
        return arr

    def as_memoryview(self) -> memoryview:
        """Get a memoryview of the viewed elements (no copy)."""
        return memoryview(self.to_numpy())

    def __buffer__(self, flags: int) -> memoryview:
        """Support buffer protocol (Python 3.12+)."""
        return memoryview(self.to_numpy())

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def _preview(self) -> str:
        count = math.prod(self._size)
        repr_config = config.repr
        edge = repr_config.edge_items
        if count <= max(repr_config.threshold, 2*edge):
            return str([self._load(offset) for offset in self._offsets()])
        head = [self._load(offset) for offset in itertools.islice(self._offsets(), edge)]
        tail = [self._load(self._flat_offset(i)) for i in range(count - edge, count)]
        items = [repr(v) for v in head] + ['...'] + [repr(v) for v in tail]
        return '[' + ', '.join(items) + ']'

    def _flat_offset(self, flat: int) -> int:
        offset = self._offset
        for n, s in zip(reversed(self._size), reversed(self._stride)):
            flat, i = divmod(flat, n)
            offset += i*s
        return offset

    def __repr__(self) -> str:
        return (f"{type(self).__name__}({self._preview()}, size={self._size}, "
                f"stride={self._stride}, dtype={self._dtype})")


# =============================================================================
# Mutable View
# =============================================================================

class MutableStridedArrayView(StridedArrayView):
    """
    Strided view allowing element assignment.

    Can only be constructed over writable memory. Writes through a
    broadcast dimension are visible at every position along it.
    """

    __slots__ = ()

    _mutable: ClassVar[bool] = True

    def __setitem__(self, key: Key, value: Any) -> None:
        """
        Set a value at given position.

        Raises:
            IndexOutOfRangeError: If an index is negative or past the end
            TypeError: If the key does not address a single element
        """
        offset, size, _ = self._resolve(key)
        if size:
            raise TypeError(
                f"expected {self.dimensions} indices to assign an element, got a "
                f"{len(size)}D sub-view")
        self._memory.store(offset, self._dtype, value)


# =============================================================================
# Fixed Dimension Views
# =============================================================================

class StridedArrayView1D(StridedArrayView):
    """One-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 1


class StridedArrayView2D(StridedArrayView):
    """Two-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 2


class StridedArrayView3D(StridedArrayView):
    """Three-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 3


class MutableStridedArrayView1D(MutableStridedArrayView):
    """Mutable one-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 1


class MutableStridedArrayView2D(MutableStridedArrayView):
    """Mutable two-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 2


class MutableStridedArrayView3D(MutableStridedArrayView):
    """Mutable three-dimensional array view with stride information."""
    __slots__ = ()
    dimensions = 3


_VIEW_CLASSES = {
    (1, False): StridedArrayView1D,
    (2, False): StridedArrayView2D,
    (3, False): StridedArrayView3D,
    (1, True): MutableStridedArrayView1D,
    (2, True): MutableStridedArrayView2D,
    (3, True): MutableStridedArrayView3D,
}


def _view_class(dimensions: int, mutable: bool) -> type:
    try:
        return _VIEW_CLASSES[dimensions, mutable]
    except KeyError:
        raise DimensionMismatchError(f"no view class for {dimensions} dimensions") from None


# =============================================================================
# Contiguous Views
# =============================================================================

class ArrayView(StridedArrayView1D):
    """
    Contiguous one-dimensional array view.

    The buffer must be one-dimensional with a stride equal to its itemsize.
    Slicing with a unit step keeps the view contiguous; any other step
    returns a ``StridedArrayView1D``.
    """

    __slots__ = ()

    def _validate_layout(self, layout: BufferLayout) -> None:
        if layout.ndim != 1:
            raise DimensionMismatchError(f"expected one dimension but got {layout.ndim}")
        if layout.strides[0] != layout.dtype.itemsize:
            raise LayoutError(
                f"expected stride of {layout.dtype.itemsize} but got {layout.strides[0]}")

    def _validate_explicit(self) -> None:
        if self._stride[0] != self.itemsize:
            raise LayoutError(
                f"expected stride of {self.itemsize} but got {self._stride[0]}")

    def __init__(self, buffer: Any = None):
        super().__init__(buffer)
        if buffer is None:
            self._stride = (self.itemsize,)

    def __getitem__(self, key: Key) -> Any:
        """Value at given position, or a slice of the view."""
        if isinstance(key, tuple) and len(key) == 1:
            key = key[0]
        if isinstance(key, slice):
            start, stop, step = calculate_slice(key, self._size[0])
            if step == 1:
                return type(self)._wrap(self._memory, self._offset + start*self.itemsize,
                                        (stop - start,), self._stride, self._dtype)
        return super().__getitem__(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._preview()}, dtype={self._dtype})"


class MutableArrayView(ArrayView, MutableStridedArrayView):
    """Mutable contiguous one-dimensional array view."""
    __slots__ = ()
