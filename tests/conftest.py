"""Pytest configuration and shared fixtures for implicit TLS FTP client tests."""

import pytest
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import patch

import pycurl


# Test constants
TEST_FTPS_SERVER = "ftps.example.com"
TEST_FTPS_PORT = 990
TEST_FTPS_USER = "testuser"
TEST_FTPS_PASS = "testpass"

# libcurl 7.88.1
SUPPORTED_VERSION_INFO = (10, "7.88.1", 0x075801, "x86_64-pc-linux-gnu", 0)


class FakeCurl:
    """
    Recording stand-in for pycurl.Curl.

    Options land in `options` (cleared by reset) and `history` (never
    cleared). perform() feeds `upload` data through READFUNCTION and
    `response` through WRITEFUNCTION, or raises `error` when set.
    """

    def __init__(self):
        self.options: Dict[int, Any] = {}
        self.history: List[Tuple[int, Any]] = []
        self.performed: List[Dict[int, Any]] = []
        self.reset_count = 0
        self.response = b""
        self.error: Optional[pycurl.error] = None
        self.info: Dict[int, Any] = {}
        self.uploaded: Optional[bytes] = None
        self.fail_option: Optional[int] = None
        self.close_error: Optional[Exception] = None
        self.closed = False

    def setopt(self, option: int, value: Any) -> None:
        if option == self.fail_option:
            raise pycurl.error(48, "An unknown option was passed in to libcurl")
        self.options[option] = value
        self.history.append((option, value))

    def reset(self) -> None:
        self.options.clear()
        self.reset_count += 1

    def perform(self) -> None:
        self.performed.append(dict(self.options))
        if self.error is not None:
            raise self.error

        read = self.options.get(pycurl.READFUNCTION)
        if read is not None:
            self.uploaded = b"".join(iter(lambda: read(4096), b""))

        write = self.options.get(pycurl.WRITEFUNCTION)
        if write is not None and self.response:
            write(self.response)

    def getinfo(self, info: int) -> Any:
        return self.info.get(info, -1.0)

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def set_options(self, option: int) -> List[Any]:
        """Every value ever set for one option, in order."""
        return [value for name, value in self.history if name == option]


@pytest.fixture
def fake_curl() -> FakeCurl:
    """Patch pycurl so sessions get a recording handle and a new enough libcurl."""
    handle = FakeCurl()
    with patch("ftps_implicit.ftp.session.pycurl.Curl", return_value=handle) as curl_class, \
            patch("ftps_implicit.ftp.session.pycurl.version_info",
                  return_value=SUPPORTED_VERSION_INFO):
        handle.curl_class = curl_class
        yield handle


@pytest.fixture
def session_kwargs() -> Dict[str, Any]:
    """Constructor arguments for a typical session."""
    return {
        "username": TEST_FTPS_USER,
        "password": TEST_FTPS_PASS,
        "server": TEST_FTPS_SERVER,
        "port": TEST_FTPS_PORT,
        "initial_path": "/inbox/",
    }


@pytest.fixture
def temp_settings_file(tmp_path: Path) -> Path:
    """Provide a temporary settings file path for testing."""
    return tmp_path / "settings.json"


@pytest.fixture
def sample_upload_file(tmp_path: Path) -> Path:
    """Create a small local file to upload."""
    source = tmp_path / "report.csv"
    source.write_bytes(b"id,value\n1,42\n2,17\n")
    return source
