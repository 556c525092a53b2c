"""Borrowed Memory Regions.

Views never own memory. A ``Memory`` pairs the owner object (kept alive by
a strong reference) with a flat byte region covering everything the owner's
buffer can address. Views only store a byte offset into that region plus
their own sizes and strides.

Safety Model:
    1. The owner's buffer export is the base of the region array,
       so resizable owners (``bytearray``) cannot reallocate underneath.
    2. Every read and write is checked against the region bounds.
    3. Writes are refused when the owner exported read-only memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np

from ._dtypes import validate_dtype
from .error import LayoutError, ReadOnlyBufferError

logger = logging.getLogger("strided.memory")

__all__ = [
    'Memory',
    'BufferLayout',
    'acquire',
    'footprint',
]


# =============================================================================
# Footprint Arithmetic
# =============================================================================

def footprint(
    offset: int,
    size: Sequence[int],
    stride: Sequence[int],
    itemsize: int,
) -> Tuple[int, int]:
    """Half-open byte range ``[lo, hi)`` addressed by a strided layout.

    An empty layout (any extent zero) addresses nothing and yields
    ``(offset, offset)``.
    """
    if any(n == 0 for n in size):
        return offset, offset
    lo = hi = offset
    for n, s in zip(size, stride):
        extent = (n - 1) * s
        if extent < 0:
            lo += extent
        else:
            hi += extent
    return lo, hi + itemsize


# =============================================================================
# Buffer Layout
# =============================================================================

@dataclass(frozen=True)
class BufferLayout:
    """Shape, strides and element type reported by an owner's buffer.

    Attributes:
        offset: Byte offset of the first element inside the acquired region.
        shape: Extent per dimension.
        strides: Byte stride per dimension.
        dtype: Element type.
    """
    offset: int
    shape: Tuple[int, ...]
    strides: Tuple[int, ...]
    dtype: np.dtype

    @property
    def ndim(self) -> int:
        return len(self.shape)


# =============================================================================
# Memory Region
# =============================================================================

class _RegionInterface:
    """Array interface describing a raw byte range of another array.

    numpy takes the object handed to ``np.asarray`` as the base of the
    result, so holding ``export`` here keeps the owner's buffer alive for
    as long as any array over the region exists.
    """

    def __init__(self, interface: dict, export: np.ndarray):
        self.__array_interface__ = interface
        self.export = export


class Memory:
    """Flat byte region borrowed from an owner object.

    Attributes:
        owner: The object whose memory is described. Never consulted for
            address computation, held only to keep the memory alive.
        region: One-dimensional uint8 array spanning the borrowed bytes.
        readonly: Whether the owner exported read-only memory.
        nbytes: Size of the region.
    """

    __slots__ = ("_owner", "_region", "_readonly")

    def __init__(self, owner: Any, region: np.ndarray, readonly: bool):
        self._owner = owner
        self._region = region
        self._readonly = readonly

    @classmethod
    def empty(cls, owner: Any = None, readonly: bool = True) -> 'Memory':
        """Region addressing no bytes at all."""
        region = np.empty(0, dtype=np.uint8)
        region.flags.writeable = not readonly
        return cls(owner, region, readonly)

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def region(self) -> np.ndarray:
        return self._region

    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def nbytes(self) -> int:
        return int(self._region.nbytes)

    def contains(self, lo: int, hi: int) -> bool:
        """Check that ``[lo, hi)`` lies inside the region (empty ranges always do)."""
        if hi <= lo:
            return True
        return 0 <= lo and hi <= self.nbytes

    def _check(self, offset: int, nbytes: int) -> None:
        if not self.contains(offset, offset + nbytes):
            raise LayoutError(
                f"byte range [{offset}, {offset + nbytes}) outside of "
                f"{self.nbytes}-byte region"
            )

    def read(self, offset: int, nbytes: int) -> bytes:
        """Copy ``nbytes`` bytes starting at ``offset``."""
        self._check(offset, nbytes)
        return self._region[offset:offset + nbytes].tobytes()

    def load(self, offset: int, dtype: np.dtype) -> Any:
        """Decode one element of ``dtype`` stored at ``offset``."""
        self._check(offset, dtype.itemsize)
        return self._region[offset:offset + dtype.itemsize].view(dtype)[0]

    def store(self, offset: int, dtype: np.dtype, value: Any) -> None:
        """Encode ``value`` as one element of ``dtype`` at ``offset``."""
        if self._readonly:
            raise ReadOnlyBufferError("cannot write through a view of read-only memory")
        self._check(offset, dtype.itemsize)
        self._region[offset:offset + dtype.itemsize].view(dtype)[0] = value

    def __repr__(self) -> str:
        owner = type(self._owner).__name__ if self._owner is not None else None
        return f"Memory(owner={owner}, nbytes={self.nbytes}, readonly={self._readonly})"


# =============================================================================
# Buffer Acquisition
# =============================================================================

def _as_array(obj: Any) -> np.ndarray:
    """Expose ``obj``'s buffer as an ndarray without copying."""
    if isinstance(obj, np.ndarray):
        return obj
    if hasattr(obj, "__array_interface__"):
        return np.asarray(obj)
    try:
        exported = memoryview(obj)
    except TypeError as e:
        raise TypeError(
            f"{type(obj).__name__} object does not support the buffer protocol"
        ) from e
    return np.asarray(exported)


def acquire(obj: Any, writable: bool = False) -> Tuple[Memory, BufferLayout]:
    """Borrow the memory of a buffer-protocol object.

    Args:
        obj: Owner exposing the buffer protocol or ``__array_interface__``.
        writable: Refuse read-only owners.

    Returns:
        The memory region and the layout the owner reported for it.

    Raises:
        TypeError: If ``obj`` exports no buffer or an unsupported dtype.
        ReadOnlyBufferError: If ``writable`` and the owner is read-only.
    """
    arr = _as_array(obj)
    validate_dtype(arr.dtype)

    readonly = not arr.flags.writeable
    if writable and readonly:
        raise ReadOnlyBufferError(
            f"{type(obj).__name__} object exports read-only memory"
        )

    shape = tuple(int(n) for n in arr.shape)
    strides = tuple(int(s) for s in arr.strides)
    itemsize = arr.dtype.itemsize

    if arr.size == 0:
        return Memory.empty(obj, readonly), BufferLayout(0, shape, strides, arr.dtype)

    ptr = arr.__array_interface__["data"][0]
    lo, hi = footprint(ptr, shape, strides, itemsize)
    region = np.asarray(_RegionInterface({
        "version": 3,
        "shape": (hi - lo,),
        "typestr": "|u1",
        "data": (lo, readonly),
    }, arr))
    logger.debug(
        "acquired %d-byte region from %s (ndim=%d, readonly=%s)",
        hi - lo, type(obj).__name__, arr.ndim, readonly,
    )
    return Memory(obj, region, readonly), BufferLayout(ptr - lo, shape, strides, arr.dtype)
