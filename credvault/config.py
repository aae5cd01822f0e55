"""
Application settings with YAML persistence.

Settings are optional - with no file on disk every value falls back to its
default, and the credential API works without ever touching this module.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Optional

import yaml

from .vault.naming import DEFAULT_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".credvault" / "settings.yaml"

# Persistence scopes understood by the native store
PERSIST_SCOPES = ("session", "local_machine", "enterprise")


@dataclass
class AppSettings:
    """User-tunable settings for the credential manager."""
    prefix: str = DEFAULT_PREFIX
    persist: str = "enterprise"
    hotkey: str = "Ctrl+Alt+K"
    show_on_start: bool = False
    window_width: int = 640
    window_height: int = 420
    # Colour and font overrides for the manager window, keyed like ManagerTheme
    theme: dict = field(default_factory=dict)

    def __post_init__(self):
        for name in ("prefix", "persist", "hotkey"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {type(value).__name__}")
        if not self.prefix:
            raise ValueError("prefix must not be empty")
        if not self.hotkey.strip():
            raise ValueError("hotkey must not be empty")
        if not isinstance(self.show_on_start, bool):
            raise ValueError("show_on_start must be true or false")
        for name in ("window_width", "window_height"):
            value = getattr(self, name)
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.theme, dict):
            raise ValueError("theme must be a mapping of theme keys to values")
        for key, value in self.theme.items():
            if not isinstance(key, str) or isinstance(value, bool) or not isinstance(value, (str, int)):
                raise ValueError(f"Invalid theme entry {key!r}: {value!r}")
        if self.persist not in PERSIST_SCOPES:
            raise ValueError(
                f"Unknown persistence scope '{self.persist}' "
                f"(expected one of: {', '.join(PERSIST_SCOPES)})"
            )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> AppSettings:
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown settings: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})


def load_settings(path: Path = None) -> AppSettings:
    """
    Load settings from YAML.

    Args:
        path: Settings file, defaults to ~/.credvault/settings.yaml

    Returns:
        AppSettings (defaults if the file does not exist)
    """
    path = path or DEFAULT_SETTINGS_PATH
    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return AppSettings()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    logger.debug(f"Loaded settings from {path}")
    return AppSettings.from_dict(data)


def write_settings(settings: AppSettings, path: Path = None) -> Path:
    """Write settings to YAML, creating the parent directory."""
    path = path or DEFAULT_SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.info(f"Settings saved to {path}")
    return path


_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Process-wide settings, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def save_settings() -> None:
    """Persist the process-wide settings."""
    write_settings(get_settings())


def reset_settings(settings: AppSettings = None) -> None:
    """Replace (or drop) the cached process-wide settings."""
    global _settings
    _settings = settings
