"""Configuration loading modules."""

from .loaders import HelperSettings, SettingsLoader

__all__ = ["HelperSettings", "SettingsLoader"]
