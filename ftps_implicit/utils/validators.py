"""Input validators for the implicit TLS FTP client.

Provides validation functions for session construction arguments.
Each validator returns (is_valid, error_message) and leaves raising
to the caller.
"""

from typing import Optional, Tuple


def validate_username(username: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an FTP username.

    Args:
        username: Username to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not username:
        return False, "FTP Username is blank."
    return True, None


def validate_server(server: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an FTP server host.

    Only blankness is checked; resolving the host is left to the engine.

    Args:
        server: Host name or address

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not server:
        return False, "FTP Server is blank."
    return True, None


def validate_port(port: int) -> Tuple[bool, Optional[str]]:
    """
    Validate a port number.

    Args:
        port: Port number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not port:
        return False, "FTP Port is blank."

    if not isinstance(port, int):
        try:
            port = int(port)
        except (ValueError, TypeError):
            return False, "FTP Port must be a number"
        if not port:
            return False, "FTP Port is blank."

    return True, None


def format_version(version_num: int) -> str:
    """Render a packed 0xXXYYZZ libcurl version as 'X.Y.Z'."""
    major = (version_num >> 16) & 0xFF
    minor = (version_num >> 8) & 0xFF
    patch = version_num & 0xFF
    return f"{major}.{minor}.{patch}"
