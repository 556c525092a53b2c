"""
Pytest configuration and shared fixtures for strided view tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from strided import config  # noqa: E402


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration around every test."""
    config.reset()
    yield
    config.reset()


@pytest.fixture
def ints6():
    """Six contiguous 4-byte integers [0, 1, 2, 3, 4, 5]."""
    return np.arange(6, dtype=np.int32)


@pytest.fixture
def grid23():
    """Row-major 2x3 int32 matrix.

    Matrix:
    [[0, 1, 2],
     [3, 4, 5]]
    """
    return np.arange(6, dtype=np.int32).reshape(2, 3)


@pytest.fixture
def cube234():
    """Row-major 2x3x4 int16 block holding 0..23."""
    return np.arange(24, dtype=np.int16).reshape(2, 3, 4)


@pytest.fixture
def row13():
    """Single-row 1x3 int32 matrix, broadcastable along dimension 0."""
    return np.array([[7, 8, 9]], dtype=np.int32)


@pytest.fixture
def bytes12():
    """Twelve writable bytes 0..11."""
    return bytearray(range(12))


# =============================================================================
# Helper Functions
# =============================================================================

def assert_same_geometry(a, b):
    """Assert two views describe the same memory in the same way."""
    assert a.size == b.size
    assert a.stride == b.stride
    assert a.offset == b.offset
    assert a.obj is b.obj
