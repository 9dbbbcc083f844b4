"""
Helper settings loaders.

Handles loading helper settings from JSON config files and from the
environment.
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class HelperSettings:
    """Settings shared by the template helpers and the engine."""

    # Zone used by date() when no zone is given; "Local" means the host zone
    default_zone: str = "Local"
    sandboxed: bool = True
    log_level: str = "WARNING"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean setting: {value!r}")


class SettingsLoader:
    """Loads HelperSettings from config files or environment variables."""

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)

    @staticmethod
    def from_dict(values: Mapping[str, Any], base: Optional[HelperSettings] = None) -> HelperSettings:
        """
        Build settings from a plain mapping.

        Args:
            values: Setting names and values
            base: Settings to start from (defaults if omitted)

        Returns:
            New HelperSettings instance
        """
        known = {f.name for f in fields(HelperSettings)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown helper settings: {', '.join(unknown)}")
        return replace(base or HelperSettings(), **values)

    def load(self, name: str) -> HelperSettings:
        """Load settings from <config_dir>/<name>.json."""
        settings_file = self.config_dir / f"{name}.json"
        if not settings_file.exists():
            raise FileNotFoundError(f"Settings config not found: {name}")

        with open(settings_file) as f:
            return self.from_dict(json.load(f))

    @staticmethod
    def from_env(prefix: str = "TMPLKIT_", environ: Optional[Mapping[str, str]] = None) -> HelperSettings:
        """
        Build settings from environment variables.

        Recognised: <prefix>DEFAULT_ZONE, <prefix>SANDBOXED, <prefix>LOG_LEVEL.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        zone = environ.get(f"{prefix}DEFAULT_ZONE")
        if zone:
            values["default_zone"] = zone
        sandboxed = environ.get(f"{prefix}SANDBOXED")
        if sandboxed:
            values["sandboxed"] = _parse_bool(sandboxed)
        log_level = environ.get(f"{prefix}LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.upper()

        return SettingsLoader.from_dict(values)
