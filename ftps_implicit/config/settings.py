"""Session settings management for the implicit TLS FTP client.

Provides SessionSettings dataclass and SettingsManager for persistence.
Passwords are never part of the settings file; see CredentialManager.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from ftps_implicit.config.paths import get_settings_path


@dataclass
class SessionSettings:
    """Connection profile that persists between runs."""

    server: str = ""
    port: int = 990
    username: str = ""
    initial_path: str = ""
    passive_mode: bool = True
    timeout: int = 30

    # Extra pycurl options by name, e.g. {"CONNECTTIMEOUT": 10}
    extra_options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)


class SettingsManager:
    """Manages session settings persistence."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional custom path, defaults to platform standard
        """
        self._config_path = config_path or get_settings_path()
        self._settings: Optional[SessionSettings] = None

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    def load(self) -> SessionSettings:
        """
        Load settings from disk.

        Returns:
            SessionSettings instance (defaults if file not found)
        """
        if self._config_path.exists():
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                self._settings = SessionSettings.from_dict(data)
            except (json.JSONDecodeError, IOError, TypeError, AttributeError):
                # Invalid or unreadable file, use defaults
                self._settings = SessionSettings()
        else:
            self._settings = SessionSettings()

        return self._settings

    def save(self, settings: SessionSettings) -> None:
        """
        Persist settings to disk.

        Args:
            settings: Settings to save
        """
        self._settings = settings

        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)

    def reset(self) -> SessionSettings:
        """
        Reset to default settings.

        Returns:
            Default SessionSettings instance
        """
        self._settings = SessionSettings()

        if self._config_path.exists():
            self._config_path.unlink()

        return self._settings

    def update(self, **kwargs) -> SessionSettings:
        """
        Update specific settings fields.

        Args:
            **kwargs: Field names and new values

        Returns:
            Updated SessionSettings instance
        """
        if self._settings is None:
            self.load()

        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)

        self.save(self._settings)
        return self._settings
