"""
Tests for the configuration system.
"""

import threading

import pytest

from strided import (
    BufferConfig,
    ReprConfig,
    StridedArrayView1D,
    config,
    get_config,
    set_repr,
)


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        assert config.repr == ReprConfig(threshold=6, edge_items=3)
        assert config.buffer == BufferConfig(
            validate_footprint=True, require_aligned_offset=True)

    def test_get_config(self):
        assert get_config() is config

    def test_to_dict(self):
        assert config.to_dict() == {
            "repr": {"threshold": 6, "edge_items": 3},
            "buffer": {"validate_footprint": True, "require_aligned_offset": True},
        }


class TestGlobal:
    """Test global configuration changes."""

    def test_set_repr(self):
        set_repr(threshold=2, edge_items=1)
        assert config.repr.threshold == 2
        assert config.repr.edge_items == 1

    def test_reset(self):
        config.buffer = BufferConfig(validate_footprint=False)
        config.reset()
        assert config.buffer.validate_footprint


class TestLocal:
    """Test thread-local overrides."""

    def test_override_restored(self):
        with config.local(repr=ReprConfig(threshold=1)):
            assert config.repr.threshold == 1
        assert config.repr.threshold == 6

    def test_nested(self):
        with config.local(repr=ReprConfig(threshold=1)):
            with config.local(repr=ReprConfig(threshold=2)):
                assert config.repr.threshold == 2
            assert config.repr.threshold == 1
        assert config.repr.threshold == 6

    def test_restored_on_error(self):
        with pytest.raises(RuntimeError):
            with config.local(buffer=BufferConfig(validate_footprint=False)):
                raise RuntimeError
        assert config.buffer.validate_footprint

    def test_other_thread_sees_global(self):
        seen = []
        with config.local(repr=ReprConfig(threshold=1)):
            thread = threading.Thread(target=lambda: seen.append(config.repr.threshold))
            thread.start()
            thread.join()
        assert seen == [6]

    def test_unknown_section(self):
        with pytest.raises(TypeError):
            config.local(display=ReprConfig())

    def test_affects_repr(self, ints6):
        view = StridedArrayView1D(ints6)
        with config.local(repr=ReprConfig(threshold=2, edge_items=1)):
            assert repr(view) == (
                "StridedArrayView1D([0, ..., 5], size=(6,), stride=(4,), dtype=int32)")
