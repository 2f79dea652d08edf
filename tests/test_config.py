from pathlib import Path

import pytest

from tunnelsettings.config import DaemonConfig


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TUNNELSETTINGS_SETTINGS_DIR", raising=False)
    monkeypatch.delenv("TUNNELSETTINGS_SETTINGS_FILE", raising=False)

    config = DaemonConfig(_env_file=None)

    assert config.settings_path == Path("/etc/tunnelsettings/settings.json")
    assert config.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TUNNELSETTINGS_SETTINGS_DIR", str(tmp_path))
    monkeypatch.setenv("TUNNELSETTINGS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TUNNELSETTINGS_METRICS_ENABLED", "false")

    config = DaemonConfig(_env_file=None)

    assert config.settings_path == tmp_path / "settings.json"
    assert config.log_level == "DEBUG"
    assert config.metrics_enabled is False
