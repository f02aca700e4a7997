"""Tests for error message formatting."""

from __future__ import annotations

from pathlib import Path

import pytest

from ringhunter.errors import ConfigError, RingHunterError


class TestConfigError:
    def test_message_names_the_file(self) -> None:
        error = ConfigError(Path("ringhunter.yaml"), "Empty file")

        assert str(error) == "Failed to load configuration at ringhunter.yaml: Empty file"
        assert error.path == Path("ringhunter.yaml")
        assert error.reason == "Empty file"

    def test_message_without_a_file(self) -> None:
        error = ConfigError(None, "max_attempts must be at least 1, got 0")

        assert str(error) == "Failed to load configuration: max_attempts must be at least 1, got 0"
        assert error.path is None

    def test_is_a_ring_hunter_error(self) -> None:
        with pytest.raises(RingHunterError, match="Empty file"):
            raise ConfigError(Path("x.yaml"), "Empty file")
