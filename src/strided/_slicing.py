"""
Slice resolution against an axis extent.
"""

from __future__ import annotations

from typing import NamedTuple

from .error import InvalidSliceError


class Slice(NamedTuple):
    """Resolved slice: half-open ``[start, stop)`` plus a non-zero step.

    ``start <= stop`` always holds, also for negative steps; the direction
    is carried by the sign of ``step`` alone.
    """
    start: int
    stop: int
    step: int

    @property
    def size(self) -> int:
        """Number of elements selected."""
        return -(-(self.stop - self.start) // abs(self.step))


def calculate_slice(s: slice, size: int) -> Slice:
    """
    Resolve a Python slice against an axis of ``size`` elements.

    Bounds are resolved Python-style first. For a negative step the resolved
    bounds describe a descending range, so they are swapped and both moved
    up by one to get the ascending half-open range covering the same
    elements. Empty selections collapse to ``stop == start``.

    Raises:
        InvalidSliceError: For a zero step or bounds that are not integers
    """
    try:
        start, stop, step = s.indices(size)
    except (ValueError, TypeError) as e:
        raise InvalidSliceError(f"cannot resolve {s!r} against size {size}: {e}") from e

    if step < 0:
        start, stop = stop + 1, start + 1

    if stop < start:
        stop = start

    return Slice(start, stop, step)


__all__ = ["Slice", "calculate_slice"]
