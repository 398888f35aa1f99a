"""Implicit TLS FTP client.

A thin session over one libcurl handle for uploading, downloading,
listing, size-checking and deleting files on an FTPS server that
expects TLS from the first byte (port 990 by default).
"""

from ftps_implicit.ftp.exceptions import (
    FTPSConfigurationError,
    FTPSError,
    FTPSInvalidArgumentError,
    FTPSRuntimeError,
    FTPSTransferError,
)
from ftps_implicit.ftp.session import FTPSSession, SessionState

__version__ = "1.0.0"

__all__ = [
    "FTPSSession",
    "SessionState",
    "FTPSError",
    "FTPSConfigurationError",
    "FTPSInvalidArgumentError",
    "FTPSRuntimeError",
    "FTPSTransferError",
]
