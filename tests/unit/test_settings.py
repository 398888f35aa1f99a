"""Unit tests for settings and credentials management."""

import json
import pytest
from unittest.mock import patch

from ftps_implicit.config.settings import SessionSettings, SettingsManager
from ftps_implicit.config.credentials import CredentialManager


class TestSessionSettings:
    """Tests for SessionSettings dataclass."""

    def test_default_values(self):
        """Test default settings values."""
        settings = SessionSettings()
        assert settings.server == ""
        assert settings.port == 990
        assert settings.username == ""
        assert settings.initial_path == ""
        assert settings.passive_mode is True
        assert settings.timeout == 30
        assert settings.extra_options == {}

    def test_extra_options_not_shared(self):
        """Test each instance gets its own options dict."""
        first = SessionSettings()
        first.extra_options["VERBOSE"] = 1

        assert SessionSettings().extra_options == {}

    def test_to_dict(self):
        """Test converting settings to dictionary."""
        settings = SessionSettings(server="ftps.example.com", port=2990)
        data = settings.to_dict()

        assert isinstance(data, dict)
        assert data["server"] == "ftps.example.com"
        assert data["port"] == 2990
        assert "passive_mode" in data
        assert "password" not in data

    def test_from_dict(self):
        """Test creating settings from dictionary."""
        data = {
            "server": "10.0.0.5",
            "port": 9990,
            "username": "deploy",
            "initial_path": "outbox",
            "passive_mode": False,
            "extra_options": {"CONNECTTIMEOUT": 5},
        }
        settings = SessionSettings.from_dict(data)

        assert settings.server == "10.0.0.5"
        assert settings.port == 9990
        assert settings.username == "deploy"
        assert settings.initial_path == "outbox"
        assert settings.passive_mode is False
        assert settings.extra_options == {"CONNECTTIMEOUT": 5}

    def test_from_dict_ignores_unknown_keys(self):
        """Test that from_dict ignores unknown keys."""
        data = {
            "server": "ftps.example.com",
            "password": "never stored",
            "another_unknown": 123
        }
        settings = SessionSettings.from_dict(data)

        assert settings.server == "ftps.example.com"
        assert not hasattr(settings, "password")

    def test_from_dict_with_missing_keys(self):
        """Test that from_dict uses defaults for missing keys."""
        settings = SessionSettings.from_dict({"server": "partial.local"})

        assert settings.server == "partial.local"
        assert settings.port == 990  # default value


class TestSettingsManager:
    """Tests for SettingsManager class."""

    @pytest.fixture
    def manager(self, temp_settings_file):
        """Create a SettingsManager with temp path."""
        return SettingsManager(config_path=temp_settings_file)

    def test_config_path_property(self, manager, temp_settings_file):
        """Test config_path property returns correct path."""
        assert manager.config_path == temp_settings_file

    def test_load_returns_defaults_when_file_missing(self, manager, temp_settings_file):
        """Test loading settings when file doesn't exist."""
        assert not temp_settings_file.exists()

        settings = manager.load()

        assert isinstance(settings, SessionSettings)
        assert settings.server == ""
        assert settings.port == 990

    def test_save_creates_file(self, manager, temp_settings_file):
        """Test saving settings creates the file."""
        manager.save(SessionSettings(server="saved.local", port=5990))

        assert temp_settings_file.exists()

        with open(temp_settings_file, "r") as f:
            data = json.load(f)
        assert data["server"] == "saved.local"
        assert data["port"] == 5990

    def test_save_creates_parent_directories(self, tmp_path):
        """Test that save creates parent directories if needed."""
        nested_path = tmp_path / "deep" / "nested" / "settings.json"
        manager = SettingsManager(config_path=nested_path)

        manager.save(SessionSettings(server="nested.local"))

        assert nested_path.exists()

    def test_load_restores_saved_settings(self, manager, temp_settings_file):
        """Test that load restores previously saved settings."""
        original = SessionSettings(
            server="restore.local",
            port=7990,
            username="testuser",
            passive_mode=False,
            extra_options={"VERBOSE": 1},
        )
        manager.save(original)

        loaded = SettingsManager(config_path=temp_settings_file).load()

        assert loaded == original

    def test_load_handles_corrupted_file(self, manager, temp_settings_file):
        """Test loading settings from corrupted file returns defaults."""
        temp_settings_file.write_text("not valid json {{{")

        settings = manager.load()

        assert isinstance(settings, SessionSettings)
        assert settings.server == ""

    def test_load_handles_non_object_json(self, manager, temp_settings_file):
        """Test a JSON list instead of an object falls back to defaults."""
        temp_settings_file.write_text("[1, 2, 3]")

        settings = manager.load()

        assert settings == SessionSettings()

    def test_reset_removes_file(self, manager, temp_settings_file):
        """Test reset removes the settings file and returns defaults."""
        manager.save(SessionSettings(server="to.delete"))
        assert temp_settings_file.exists()

        settings = manager.reset()

        assert settings == SessionSettings()
        assert not temp_settings_file.exists()

    def test_update_modifies_specific_fields(self, manager):
        """Test update modifies only specified fields."""
        manager.load()

        updated = manager.update(server="updated.local", port=8990)

        assert updated.server == "updated.local"
        assert updated.port == 8990
        assert updated.passive_mode is True  # unchanged

    def test_update_ignores_unknown_fields(self, manager):
        """Test update ignores unknown field names."""
        updated = manager.update(server="valid.local", nonexistent_field="ignored")

        assert updated.server == "valid.local"
        assert not hasattr(updated, "nonexistent_field")


class TestCredentialManager:
    """Tests for CredentialManager class."""

    @pytest.fixture
    def credential_manager(self):
        """Create a CredentialManager instance."""
        return CredentialManager()

    def test_make_key(self, credential_manager):
        """Test _make_key joins server and username."""
        assert credential_manager._make_key("ftps.example.com", "admin") == "ftps.example.com:admin"

    @patch("keyring.set_password")
    def test_save_password_success(self, mock_set, credential_manager):
        """Test successful password save."""
        result = credential_manager.save_password("ftps.example.com", "user", "secret123")

        assert result is True
        mock_set.assert_called_once_with(
            CredentialManager.SERVICE_NAME,
            "ftps.example.com:user",
            "secret123"
        )

    @patch("keyring.set_password")
    def test_save_password_failure(self, mock_set, credential_manager):
        """Test password save failure."""
        from keyring.errors import KeyringError
        mock_set.side_effect = KeyringError("Backend error")

        assert credential_manager.save_password("ftps.example.com", "user", "secret") is False

    @patch("keyring.get_password")
    def test_get_password_found(self, mock_get, credential_manager):
        """Test retrieving existing password."""
        mock_get.return_value = "my_secret"

        result = credential_manager.get_password("ftps.example.com", "user")

        assert result == "my_secret"
        mock_get.assert_called_once_with(
            CredentialManager.SERVICE_NAME,
            "ftps.example.com:user"
        )

    @patch("keyring.get_password")
    def test_get_password_error(self, mock_get, credential_manager):
        """Test get_password returns None on error."""
        from keyring.errors import KeyringError
        mock_get.side_effect = KeyringError("Backend error")

        assert credential_manager.get_password("ftps.example.com", "user") is None

    @patch("keyring.delete_password")
    def test_delete_password_success(self, mock_delete, credential_manager):
        """Test successful password deletion."""
        assert credential_manager.delete_password("ftps.example.com", "user") is True
        mock_delete.assert_called_once_with(
            CredentialManager.SERVICE_NAME,
            "ftps.example.com:user"
        )

    @patch("keyring.delete_password")
    def test_delete_password_failure(self, mock_delete, credential_manager):
        """Test password deletion failure."""
        from keyring.errors import PasswordDeleteError
        mock_delete.side_effect = PasswordDeleteError("not found")

        assert credential_manager.delete_password("ftps.example.com", "user") is False

    @patch("keyring.get_password")
    def test_has_password(self, mock_get, credential_manager):
        """Test has_password reflects whether a password is stored."""
        mock_get.return_value = "secret"
        assert credential_manager.has_password("ftps.example.com", "user") is True

        mock_get.return_value = None
        assert credential_manager.has_password("ftps.example.com", "user") is False
