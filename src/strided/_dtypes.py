"""
Strided DTypes - Element Type Handling

Element types of a view come from the buffer it wraps. This module
normalises dtype specifications to ``numpy.dtype`` and rejects the ones a
raw memory view cannot represent.
"""

from __future__ import annotations

from typing import Any, Dict, Union

import numpy as np


DTypeLike = Union[np.dtype, str, type, None]


# Aliases accepted in addition to everything numpy understands
_ALIASES: Dict[str, str] = {
    "byte": "uint8",
    "char": "uint8",
    "real": "float64",
    "index": "int64",
}

# Dtype used for owners that carry no type information
DEFAULT_DTYPE = np.dtype(np.uint8)


def resolve_dtype(dtype: DTypeLike, default: np.dtype = DEFAULT_DTYPE) -> np.dtype:
    """
    Validate and normalize a dtype specification.

    Args:
        dtype: numpy dtype, string name, Python/numpy scalar type, or None
        default: Dtype returned for None

    Returns:
        Validated numpy dtype

    Raises:
        TypeError: If the dtype is unknown or has no fixed byte layout
    """
    if dtype is None:
        return np.dtype(default)
    if isinstance(dtype, str):
        dtype = _ALIASES.get(dtype.lower(), dtype)
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise TypeError(f"Cannot convert {dtype!r} to a dtype: {e}") from e
    validate_dtype(resolved)
    return resolved


def validate_dtype(dtype: np.dtype) -> None:
    """Reject dtypes that do not describe plain bytes in memory."""
    if dtype.hasobject:
        raise TypeError(f"Dtype {dtype} holds Python objects and cannot be viewed")
    if dtype.itemsize == 0:
        raise TypeError(f"Dtype {dtype} has no itemsize")


def format_of(dtype: np.dtype) -> str:
    """Struct-style format character(s) for ``dtype``."""
    if dtype.fields is None and dtype.subdtype is None:
        return dtype.char
    return dtype.str


def to_python(value: Any) -> Any:
    """Convert a numpy scalar read from memory into a plain Python value."""
    if isinstance(value, np.generic):
        return value.item()
    return value


__all__ = [
    "DTypeLike",
    "DEFAULT_DTYPE",
    "resolve_dtype",
    "validate_dtype",
    "format_of",
    "to_python",
]
