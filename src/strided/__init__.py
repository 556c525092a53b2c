"""
strided - Strided Array Views

Non-owning multi-dimensional views over memory exposed through the buffer
protocol:
- Bounds-checked element access and sub-views
- Python-style slicing, also with negative steps
- Zero-copy transposition, flipping and broadcasting
- Row-major flattening to bytes and zero-copy export to numpy

Architecture:
    ┌──────────────────────────────────────────────┐
    │   StridedArrayView1D / 2D / 3D  (+ Mutable)  │
    ├──────────────────────────────────────────────┤
    │   offset + size[D] + stride[D] + dtype       │
    ├──────────────────────────────────────────────┤
    │   Memory: borrowed region, owner kept alive  │
    └──────────────────────────────────────────────┘

Example:
    >>> import numpy as np
    >>> from strided import StridedArrayView2D
    >>>
    >>> a = np.arange(6, dtype=np.int32).reshape(2, 3)
    >>> view = StridedArrayView2D(a)
    >>> view.transposed(0, 1).size
    (3, 2)
    >>> view[:, ::-1].tolist()
    [[2, 1, 0], [5, 4, 3]]
"""

__version__ = '0.1.0'

from ._config import (
    ReprConfig,
    BufferConfig,
    StridedConfig,
    config,
    get_config,
    set_repr,
)
from .error import (
    StridedError,
    DimensionMismatchError,
    LayoutError,
    ReadOnlyBufferError,
    IndexOutOfRangeError,
    InvalidSliceError,
    InvalidAxisError,
    NotBroadcastableError,
)
from .views import (
    StridedArrayView,
    StridedArrayView1D,
    StridedArrayView2D,
    StridedArrayView3D,
    MutableStridedArrayView,
    MutableStridedArrayView1D,
    MutableStridedArrayView2D,
    MutableStridedArrayView3D,
    ArrayView,
    MutableArrayView,
)

__all__ = [
    # Version
    '__version__',

    # Views
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

    # Errors
    'StridedError',
    'DimensionMismatchError',
    'LayoutError',
    'ReadOnlyBufferError',
    'IndexOutOfRangeError',
    'InvalidSliceError',
    'InvalidAxisError',
    'NotBroadcastableError',

    # Configuration
    'ReprConfig',
    'BufferConfig',
    'StridedConfig',
    'config',
    'get_config',
    'set_repr',
]
