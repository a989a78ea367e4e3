"""Tests for settings loading"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tact_pm.core.config import DEFAULT_ALIASES_URL, Settings


def test_defaults(tmp_path: Path):
    settings = Settings(project_root=tmp_path, _env_file=None)

    assert settings.modules_root == tmp_path.resolve() / "tact_modules"
    assert settings.state_path == tmp_path.resolve() / "tact-packages.json"
    assert settings.workspace_path == tmp_path.resolve() / "package.json"
    assert settings.aliases_url == DEFAULT_ALIASES_URL
    assert settings.aliases_path.name == "tact-aliases.json"


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TPM_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("TPM_ALIASES_URL", "https://mirror.example.com/aliases.json")
    monkeypatch.setenv("TPM_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.project_root == tmp_path.resolve()
    assert settings.aliases_url == "https://mirror.example.com/aliases.json"
    assert settings.log_level == "DEBUG"


def test_rejects_unknown_log_format():
    with pytest.raises(ValidationError):
        Settings(log_format="xml", _env_file=None)
