from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from readwise_notion_sync.config import Config
from readwise_notion_sync.errors import ConfigError

ENV_VARS = (
    "READWISE_TOKEN",
    "NOTION_TOKEN",
    "NOTION_DATABASE_ID",
    "READWISE_UPDATED_AFTER",
    "SYNC_DELAY_MS",
    "REQUEST_TIMEOUT",
    "DEBUG",
    "DRY_RUN",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for name in ENV_VARS:
        # register each name so values loaded from .env files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path / ".env"


def set_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READWISE_TOKEN", "rw")
    monkeypatch.setenv("NOTION_TOKEN", "secret")
    monkeypatch.setenv("NOTION_DATABASE_ID", "db-id")


def test_from_env_reads_required_values(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_required(monkeypatch)

    config = Config.from_env(clean_env)

    assert config.readwise_token == "rw"
    assert config.notion_token == "secret"
    assert config.notion_database_id == "db-id"
    assert config.delay_ms == 150
    assert config.delay_seconds == 0.15
    assert config.request_timeout == 30.0
    assert config.updated_after is None
    assert not config.debug
    assert not config.dry_run


def test_missing_variables_are_all_reported(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTION_TOKEN", "secret")

    with pytest.raises(ConfigError) as excinfo:
        Config.from_env(clean_env)

    message = str(excinfo.value)
    assert "READWISE_TOKEN" in message
    assert "NOTION_DATABASE_ID" in message
    assert isinstance(excinfo.value, ValueError)


def test_env_file_is_loaded(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    clean_env.write_text(
        "READWISE_TOKEN=from-file\nNOTION_TOKEN=secret\nNOTION_DATABASE_ID=db\nDRY_RUN=true\n",
        encoding="utf-8",
    )

    config = Config.from_env(clean_env)

    assert config.readwise_token == "from-file"
    assert config.dry_run


def test_optional_values(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_required(monkeypatch)
    monkeypatch.setenv("READWISE_UPDATED_AFTER", "2024-01-01T00:00:00Z")
    monkeypatch.setenv("SYNC_DELAY_MS", "300")
    monkeypatch.setenv("REQUEST_TIMEOUT", "12.5")
    monkeypatch.setenv("DEBUG", "TRUE")

    config = Config.from_env(clean_env)

    assert config.updated_after == "2024-01-01T00:00:00Z"
    assert config.delay_ms == 300
    assert config.request_timeout == 12.5
    assert config.debug


@pytest.mark.parametrize("value", ["fast", "-1"])
def test_invalid_delay_is_rejected(clean_env: Path, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    set_required(monkeypatch)
    monkeypatch.setenv("SYNC_DELAY_MS", value)

    with pytest.raises(ConfigError):
        Config.from_env(clean_env)


def test_config_is_immutable() -> None:
    config = Config(readwise_token="rw", notion_token="secret", notion_database_id="db")

    with pytest.raises(FrozenInstanceError):
        config.dry_run = True  # type: ignore[misc]


@pytest.mark.parametrize("value", ["0", "-5", "slow"])
def test_invalid_timeout_is_rejected(clean_env: Path, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    set_required(monkeypatch)
    monkeypatch.setenv("REQUEST_TIMEOUT", value)

    with pytest.raises(ConfigError):
        Config.from_env(clean_env)
