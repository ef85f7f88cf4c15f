"""Config settings – 12-factor env-based configuration."""
from rynko.config.settings.base import Settings
from rynko.config.settings.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, ClientSettings
from rynko.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "ClientSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
]
