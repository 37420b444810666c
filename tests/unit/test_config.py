"""Tests for settings loaded from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from benchwatch.core.config import Settings

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run without BENCHWATCH_* variables or a local .env file."""
    monkeypatch.chdir(tmp_path)
    for name in ("DATA_FILE", "SUITE_NAME", "ALERT_THRESHOLD", "FAIL_THRESHOLD", "NOISE", "MAX_ITEMS", "LOG_LEVEL"):
        monkeypatch.delenv(f"BENCHWATCH_{name}", raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.data_file == "benchmark-data.json"
        assert settings.suite_name == "cargo"
        assert settings.alert_threshold == "200%"
        assert settings.fail_threshold is None
        assert settings.noise == 0.05
        assert settings.max_items is None
        assert settings.log_level == "INFO"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """BENCHWATCH_ variables override the defaults."""
        monkeypatch.setenv("BENCHWATCH_SUITE_NAME", "criterion")
        monkeypatch.setenv("BENCHWATCH_ALERT_THRESHOLD", "150%")
        monkeypatch.setenv("BENCHWATCH_MAX_ITEMS", "20")

        settings = Settings()

        assert settings.suite_name == "criterion"
        assert settings.alert_threshold == "150%"
        assert settings.max_items == 20

    def test_env_file(self, tmp_path: Path) -> None:
        """A .env file in the working directory is read."""
        (tmp_path / ".env").write_text("BENCHWATCH_DATA_FILE=dev/bench/data.json\n")

        assert Settings().data_file == "dev/bench/data.json"

    @pytest.mark.parametrize(("name", "value"), [("NOISE", "1.5"), ("MAX_ITEMS", "0")])
    def test_invalid(self, monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
        monkeypatch.setenv(f"BENCHWATCH_{name}", value)

        with pytest.raises(ValidationError):
            Settings()
