"""Config – 12-factor settings for the queue engine."""

from mp_queue.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_queue.config.loaders import EnvSettingsLoader, load_settings
from mp_queue.config.settings import QueueSettings

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "QueueSettings",
    "load_settings",
]
