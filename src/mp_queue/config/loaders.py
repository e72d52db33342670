"""Config settings – EnvSettingsLoader and load_settings()."""
from __future__ import annotations

import dataclasses
import os
from typing import Any, Mapping

from mp_queue.config.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from mp_queue.config.settings import QueueSettings

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class EnvSettingsLoader:
    """Read ``QueueSettings`` fields from environment variables.

    Each field ``name`` maps to ``QUEUE_<NAME>``. Absent variables fall back to
    the field default; values are coerced according to the declared type.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def read(self, settings_class: type[QueueSettings] = QueueSettings) -> dict[str, Any]:
        """Return the coerced values present in the environment."""
        prefix = getattr(settings_class, "_prefix", "").upper()
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = self._environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            values[field.name] = self._coerce(env_key, raw, field.type)
        return values

    def load(self, settings_class: type[QueueSettings] = QueueSettings) -> QueueSettings:
        return _build(settings_class, self.read(settings_class))

    def _coerce(self, key: str, value: str, type_hint: Any) -> Any:
        hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", "")
        try:
            if hint == "bool":
                lowered = value.strip().lower()
                if lowered in _TRUE:
                    return True
                if lowered in _FALSE:
                    return False
                raise ValueError("expected a boolean")
            if hint == "int":
                return int(value)
            if hint == "float":
                return float(value)
        except ValueError as exc:
            raise InvalidSettingValueError(key, value, str(exc)) from exc
        return value


def load_settings(
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> QueueSettings:
    """Environment values first, then explicit *overrides* (highest priority)."""
    values = EnvSettingsLoader(environ).read(QueueSettings)
    values.update(overrides)
    return _build(QueueSettings, values)


def _build(settings_class: type[QueueSettings], values: dict[str, Any]) -> QueueSettings:
    try:
        return settings_class(**values)
    except ConfigError:
        raise
    except TypeError as exc:
        raise ConfigError(f"Failed to construct {settings_class.__name__}: {exc}") from exc


__all__ = ["EnvSettingsLoader", "load_settings"]
