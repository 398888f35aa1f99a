"""Remote path helpers for the implicit TLS FTP client.

Remote names are joined onto the session base URL after trimming the
path separator from both ends. Nothing else is normalized or escaped.
"""

import posixpath

SEPARATOR = "/"
SCHEME = "ftps"


def trim_separators(name: str) -> str:
    """Strip leading and trailing '/' from a remote name."""
    return name.strip(SEPARATOR)


def build_base_url(server: str, initial_path: str = "") -> str:
    """
    Build the session base URL.

    Args:
        server: FTPS server host
        initial_path: Remote directory all operations are relative to

    Returns:
        URL of the form ftps://{server}/{initial_path}
    """
    return f"{SCHEME}://{server}/{trim_separators(initial_path)}"


def file_url(base_url: str, name: str) -> str:
    """URL of a remote file below the base URL."""
    return f"{base_url}/{trim_separators(name)}"


def directory_url(base_url: str, name: str) -> str:
    """URL of a remote directory below the base URL (trailing '/')."""
    return f"{base_url}/{trim_separators(name)}/"


def local_target(local_path: str, remote_name: str) -> str:
    """
    Local file a download of remote_name is written to.

    Args:
        local_path: Local directory, trailing '/' ignored
        remote_name: Remote file name, possibly with directories

    Returns:
        {local_path}/{base name of remote_name}
    """
    base_name = posixpath.basename(trim_separators(remote_name))
    return f"{str(local_path).rstrip(SEPARATOR)}/{base_name}"
