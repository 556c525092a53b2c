"""
Strided Config - View Configuration System

Property-based configuration for view construction and presentation.
Settings can be changed globally or overridden for the current thread
within a ``local(...)`` block.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Any, Dict, List

logger = logging.getLogger("strided.config")


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class ReprConfig:
    """Configuration for element summarisation in ``repr()``."""
    threshold: int = 6             # Show every element up to this count
    edge_items: int = 3            # Elements shown at each end when summarising


@dataclass
class BufferConfig:
    """Configuration for explicit ``from_buffer`` construction."""
    validate_footprint: bool = True      # Check the triple against owner memory
    require_aligned_offset: bool = True  # Offset must be a multiple of itemsize


# =============================================================================
# Global Configuration Manager
# =============================================================================

class StridedConfig:
    """
    Global configuration manager.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        strided.config.repr = ReprConfig(threshold=10)

        # Local configuration (context manager)
        with strided.config.local(buffer=BufferConfig(validate_footprint=False)):
            view = StridedArrayView1D.from_buffer(data, (4,), (8,))
        # Back to global config
    """

    _SECTIONS = ("repr", "buffer")

    def __init__(self):
        self._global_repr = ReprConfig()
        self._global_buffer = BufferConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def repr(self) -> ReprConfig:
        """Get repr configuration."""
        if getattr(self._local, "repr", None) is not None:
            return self._local.repr
        return self._global_repr

    @repr.setter
    def repr(self, value: ReprConfig):
        """Set global repr configuration."""
        self._global_repr = value
        logger.debug("repr configuration set to %s", value)

    @property
    def buffer(self) -> BufferConfig:
        """Get buffer configuration."""
        if getattr(self._local, "buffer", None) is not None:
            return self._local.buffer
        return self._global_buffer

    @buffer.setter
    def buffer(self, value: BufferConfig):
        """Set global buffer configuration."""
        self._global_buffer = value
        logger.debug("buffer configuration set to %s", value)

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (repr, buffer)

        Returns:
            Context manager

        Raises:
            TypeError: If an unknown section is named
        """
        unknown = [key for key in kwargs if key not in self._SECTIONS]
        if unknown:
            raise TypeError(f"Unknown configuration section(s): {', '.join(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs) -> Dict[str, Any]:
        """Set thread-local configuration, returning the previous overrides."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Restore thread-local configuration saved by ``_set_local``."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_repr = ReprConfig()
        self._global_buffer = BufferConfig()
        for key in self._SECTIONS:
            setattr(self._local, key, None)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export the effective configuration as a dictionary."""
        return {
            "repr": asdict(self.repr),
            "buffer": asdict(self.buffer),
        }

    def __repr__(self) -> str:
        return f"StridedConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: StridedConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._saved: List[Dict[str, Any]] = []

    def __enter__(self):
        self._saved.append(self._config._set_local(**self._kwargs))
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._saved.pop())
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = StridedConfig()


def get_config() -> StridedConfig:
    """Get the global configuration instance."""
    return config


def set_repr(threshold: int = 6, edge_items: int = 3):
    """
    Configure element summarisation in ``repr()``.

    Args:
        threshold: Largest element count printed in full
        edge_items: Elements kept at each end of a summarised repr
    """
    config.repr = ReprConfig(threshold=threshold, edge_items=edge_items)


__all__ = [
    "ReprConfig",
    "BufferConfig",
    "StridedConfig",
    "config",
    "get_config",
    "set_repr",
]
