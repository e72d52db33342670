"""Unit tests for QueueSettings, EnvSettingsLoader and load_settings."""

from __future__ import annotations

import logging

import pytest

from mp_queue.config import (
    ConfigError,
    EnvSettingsLoader,
    InvalidSettingValueError,
    QueueSettings,
    load_settings,
)


class TestQueueSettings:
    def test_defaults(self) -> None:
        settings = QueueSettings()
        assert settings.num_shards == 4
        assert settings.default_delivery_attempts == 3
        assert settings.default_retention_duration == 604800
        assert settings.backoff_base_seconds == 60.0
        assert settings.process_interval_seconds == 60
        assert settings.purge_interval_seconds == 3600
        assert settings.database_url == "sqlite+aiosqlite:///queue.db"
        assert settings.log_level == "INFO"
        assert settings.log_json is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"num_shards": 0},
            {"default_delivery_attempts": 0},
            {"default_retention_duration": -1},
            {"backoff_base_seconds": 0},
            {"process_interval_seconds": 0},
            {"purge_interval_seconds": 0},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, overrides: dict[str, object]) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            QueueSettings(**overrides)  # type: ignore[arg-type]
        assert isinstance(exc_info.value, ConfigError)

    def test_log_level_number(self) -> None:
        assert QueueSettings(log_level="debug").log_level_number == logging.DEBUG


class TestEnvSettingsLoader:
    def test_empty_environment_gives_defaults(self) -> None:
        assert EnvSettingsLoader({}).load() == QueueSettings()

    def test_coerces_types(self) -> None:
        settings = EnvSettingsLoader(
            {
                "QUEUE_NUM_SHARDS": "8",
                "QUEUE_BACKOFF_BASE_SECONDS": "1.5",
                "QUEUE_LOG_JSON": "no",
                "QUEUE_DATABASE_URL": "sqlite+aiosqlite:///:memory:",
            }
        ).load()
        assert settings.num_shards == 8
        assert settings.backoff_base_seconds == 1.5
        assert settings.log_json is False
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"

    @pytest.mark.parametrize("raw", ["1", "true", "True", "yes", "on"])
    def test_truthy_booleans(self, raw: str) -> None:
        assert EnvSettingsLoader({"QUEUE_LOG_JSON": raw}).load().log_json is True

    def test_bad_int_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader({"QUEUE_NUM_SHARDS": "many"}).load()
        assert "QUEUE_NUM_SHARDS" in exc_info.value.message

    def test_bad_bool_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"QUEUE_LOG_JSON": "maybe"}).load()

    def test_out_of_range_value_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader({"QUEUE_NUM_SHARDS": "0"}).load()

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUEUE_DEFAULT_DELIVERY_ATTEMPTS", "5")
        assert EnvSettingsLoader().load().default_delivery_attempts == 5

    def test_read_returns_only_present_values(self) -> None:
        assert EnvSettingsLoader({"QUEUE_LOG_LEVEL": "DEBUG", "OTHER": "x"}).read() == {"log_level": "DEBUG"}


class TestLoadSettings:
    def test_overrides_win_over_environment(self) -> None:
        settings = load_settings({"QUEUE_NUM_SHARDS": "8"}, num_shards=2)
        assert settings.num_shards == 2

    def test_environment_used_without_overrides(self) -> None:
        assert load_settings({"QUEUE_PURGE_INTERVAL_SECONDS": "60"}).purge_interval_seconds == 60

    def test_unknown_override_raises_config_error(self) -> None:
        with pytest.raises(ConfigError):
            load_settings({}, shards=2)
