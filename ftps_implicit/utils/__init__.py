"""Utility module for the implicit TLS FTP client.

This module provides cross-cutting utilities:
- Logging: Configured logging with PII redaction
- Validators: Input validation for session arguments
"""
