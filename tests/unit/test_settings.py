from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from docshop.exceptions import SettingsError
from docshop.settings import Settings, get_settings


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "APP_ENV=test\nLOG_LEVEL=debug\nLOG_JSON=false\nPORT=8081\nMAX_UPLOAD_MB=5\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.port == 8081
    assert settings.max_content_length == 5 * 1024 * 1024


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("PORT", "HOST", "CORS_ORIGINS", "TEMP_DIR"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.port == 5000
    assert settings.host == "0.0.0.0"
    assert settings.cors_origin_list == ["*"]
    assert settings.temp_root == Path(tempfile.gettempdir())


def test_cors_origins_are_split_on_commas(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example,,")

    assert Settings().cors_origin_list == ["http://a.example", "http://b.example"]


def test_temp_dir_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "scratch"))

    assert Settings().temp_root == tmp_path / "scratch"


def test_get_settings_wraps_validation_errors(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(SettingsError, match="Failed to load settings"):
        get_settings()
