"""Configuration module for the implicit TLS FTP client.

This module handles saved connection profiles and credentials:
- SettingsManager: JSON-based settings persistence
- CredentialManager: Secure credential storage via keyring
- Paths: Application data directory discovery
- SessionSettings: Settings dataclass
"""
