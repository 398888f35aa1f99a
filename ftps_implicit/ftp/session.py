"""FTPS session over implicit TLS for the implicit TLS FTP client.

Provides SessionState enum, SessionConfig dataclass, and FTPSSession,
a thin wrapper around one libcurl handle bound to one server, one
credential set and one base path.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Any, Dict, List, Optional, Union

import pycurl

from ftps_implicit.config.credentials import CredentialManager
from ftps_implicit.config.settings import SessionSettings
from ftps_implicit.ftp.exceptions import (
    FTPSConfigurationError,
    FTPSError,
    FTPSHandleError,
    FTPSInvalidArgumentError,
    FTPSLocalFileError,
    FTPSOptionError,
    FTPSSessionReleasedError,
    FTPSTransferError,
)
from ftps_implicit.ftp.remote_path import (
    build_base_url,
    directory_url,
    file_url,
    local_target,
    trim_separators,
)
from ftps_implicit.utils.validators import (
    format_version,
    validate_port,
    validate_server,
    validate_username,
)

logger = logging.getLogger("ftps_implicit.session")
curl_logger = logging.getLogger("ftps_implicit.curl")

# libcurl 7.34.0, first release with working implicit SSL for FTP
MIN_LIBCURL_VERSION = 0x072200

DEFAULT_PORT = 990
DEFAULT_TIMEOUT = 30

# Returned by delete() when the deleted name still shows up in the response
DELETE_FAILED = "FAILED"

OptionKey = Union[str, int]

# Verbose output kinds forwarded to the log, marked the way curl -v marks them
_DEBUG_PREFIXES = {
    pycurl.INFOTYPE_TEXT: "* ",
    pycurl.INFOTYPE_HEADER_IN: "< ",
    pycurl.INFOTYPE_HEADER_OUT: "> ",
}


class SessionState(Enum):
    """FTPS session state."""
    ACTIVE = "active"
    RELEASED = "released"


@dataclass
class SessionConfig:
    """Non-secret parameters a session was built from."""
    server: str
    username: str
    port: int = DEFAULT_PORT
    initial_path: str = ""
    passive_mode: bool = True
    timeout: int = DEFAULT_TIMEOUT
    extra_options: Dict[OptionKey, Any] = field(default_factory=dict)

    @property
    def base_url(self) -> str:
        """ftps:// URL every remote name is joined onto."""
        return build_base_url(self.server, self.initial_path)


def _option_key(name: OptionKey) -> OptionKey:
    """Normalize an option name so 'timeout' and 'TIMEOUT' collide."""
    if isinstance(name, str):
        return name.upper()
    return name


def _check_libcurl_version() -> None:
    """
    Verify the linked libcurl can do implicit SSL FTP.

    Raises:
        FTPSConfigurationError: If libcurl is older than 7.34.0
    """
    version_num = pycurl.version_info()[2]
    if version_num < MIN_LIBCURL_VERSION:
        raise FTPSConfigurationError(
            format_version(MIN_LIBCURL_VERSION),
            format_version(version_num)
        )


class FTPSSession:
    """
    One implicit TLS FTP connection context.

    Every operation reconfigures and re-executes the same libcurl handle,
    so a session must not be shared between threads without external
    locking. Use one session per concurrent user instead.

    Example:
        >>> with FTPSSession("user", "secret", "ftp.example.com", initial_path="inbox") as ftps:
        ...     ftps.upload("report.csv", "/tmp/report.csv")
        ...     names = ftps.list_directory("")
    """

    # Encoding of names in listings and server responses
    encoding = "utf-8"

    def __init__(
        self,
        username: str,
        password: str,
        server: str,
        port: int = DEFAULT_PORT,
        initial_path: str = "",
        passive_mode: bool = True,
        extra_options: Optional[Dict[OptionKey, Any]] = None,
        timeout: int = DEFAULT_TIMEOUT
    ):
        """
        Validate arguments, acquire the handle and apply connection options.

        Args:
            username: FTPS username (required)
            password: FTPS password (may be empty)
            server: FTPS server host (required)
            port: Server port, non-zero
            initial_path: Remote directory all operations are relative to
            passive_mode: False forces active mode data connections
            extra_options: Extra pycurl options by name, e.g. {"VERBOSE": 1};
                connection defaults win over these on collision
            timeout: Per-transfer timeout in seconds

        Raises:
            FTPSConfigurationError: If libcurl is too old
            FTPSInvalidArgumentError: If username/server is blank or port is zero
            FTPSHandleError: If the handle cannot be acquired
            FTPSOptionError: If any single option cannot be applied
        """
        self._handle = None
        self._state = SessionState.RELEASED

        _check_libcurl_version()

        for argument, validator, value in (
            ("username", validate_username, username),
            ("server", validate_server, server),
            ("port", validate_port, port),
        ):
            is_valid, error = validator(value)
            if not is_valid:
                raise FTPSInvalidArgumentError(argument, error)

        # Validated above; libcurl only takes an integer PORT
        port = int(port)

        self._config = SessionConfig(
            server=server,
            username=username,
            port=port,
            initial_path=initial_path,
            passive_mode=passive_mode,
            timeout=timeout,
            extra_options=dict(extra_options or {}),
        )
        self._url = self._config.base_url

        try:
            self._handle = pycurl.Curl()
        except pycurl.error as e:
            raise FTPSHandleError(e) from e
        self._state = SessionState.ACTIVE

        self._options = self._build_options(password)

        logger.debug(f"Opening FTPS session to {self._url} on port {port}")
        try:
            self._apply_options()
        except FTPSError:
            self.close()
            raise

    @classmethod
    def from_settings(
        cls,
        settings: SessionSettings,
        password: Optional[str] = None,
        credentials: Optional[CredentialManager] = None
    ) -> "FTPSSession":
        """
        Build a session from a saved profile.

        Args:
            settings: Connection profile
            password: Password to use; looked up in the keyring when None
            credentials: Credential store, defaults to the system keyring

        Returns:
            Active FTPSSession
        """
        if password is None:
            credentials = credentials or CredentialManager()
            password = credentials.get_password(settings.server, settings.username) or ""

        return cls(
            username=settings.username,
            password=password,
            server=settings.server,
            port=settings.port,
            initial_path=settings.initial_path,
            passive_mode=settings.passive_mode,
            extra_options=dict(settings.extra_options),
            timeout=settings.timeout,
        )

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def is_active(self) -> bool:
        """True until the handle has been released."""
        return self._state == SessionState.ACTIVE

    @property
    def config(self) -> SessionConfig:
        """Parameters the session was built from."""
        return self._config

    @property
    def base_url(self) -> str:
        """ftps:// URL of the initial path."""
        return self._url

    def _build_options(self, password: str) -> Dict[OptionKey, Any]:
        """Merge caller options with connection defaults, defaults winning."""
        options = {
            _option_key(name): value
            for name, value in self._config.extra_options.items()
        }
        options.update({
            "USERPWD": f"{self._config.username}:{password}",
            "USE_SSL": pycurl.USESSL_ALL,
            "UPLOAD": 1,
            "PORT": self._config.port,
            "TIMEOUT": self._config.timeout,
        })

        # libcurl defaults to passive mode; "-" sends PORT with an address of its choosing
        if not self._config.passive_mode:
            options["FTPPORT"] = "-"

        # VERBOSE output goes to the package logger instead of stderr
        if options.get("VERBOSE"):
            options.setdefault("DEBUGFUNCTION", self._log_curl_debug)

        return options

    def _log_curl_debug(self, debug_type: int, message: bytes) -> None:
        """DEBUGFUNCTION callback: forward libcurl's protocol chatter to the log."""
        prefix = _DEBUG_PREFIXES.get(debug_type)
        if prefix is None:
            return
        text = message.decode(self.encoding, errors="replace")
        for line in text.splitlines():
            if line:
                curl_logger.debug(f"{prefix}{line}")

    def _apply_options(self) -> None:
        """Apply the effective session options one at a time."""
        for name, value in self._options.items():
            self._setopt(name, value)

    def _setopt(self, name: OptionKey, value: Any) -> None:
        """
        Set one option on the handle.

        Raises:
            FTPSOptionError: Naming the option that could not be applied
        """
        if isinstance(name, int):
            option = name
        else:
            option = getattr(pycurl, name, None)
            if not isinstance(option, int):
                raise FTPSOptionError(name)

        try:
            self._handle.setopt(option, value)
        except (pycurl.error, TypeError, ValueError) as e:
            raise FTPSOptionError(str(name), e) from e

    def _prepare(self, operation: str) -> None:
        """
        Return the handle to the session configuration before an operation.

        Raises:
            FTPSSessionReleasedError: If the session was closed
            FTPSOptionError: If a session option cannot be re-applied
        """
        if not self.is_active or self._handle is None:
            raise FTPSSessionReleasedError(operation)

        # Drop toggles left behind by the previous operation
        self._handle.reset()
        self._apply_options()

    def _perform(self, operation: str) -> None:
        """
        Execute the configured transfer.

        Raises:
            FTPSTransferError: With libcurl's error code and message
        """
        try:
            self._handle.perform()
        except pycurl.error as e:
            if len(e.args) >= 2:
                code, error = e.args[0], e.args[1]
            else:
                code, error = None, str(e)
            logger.error(f"Could not {operation}: [{code}] {error}")
            raise FTPSTransferError(operation, code, error, e) from e

    def _split_lines(self, data: bytes) -> List[str]:
        """Decode a captured response and split it into lines."""
        text = data.decode(self.encoding, errors="replace").rstrip()
        if not text:
            return []
        return [line.rstrip("\r") for line in text.split("\n")]

    def upload(self, remote_file_name: str, local_file_path: Union[str, os.PathLike]) -> None:
        """
        Upload a local file.

        Args:
            remote_file_name: Remote file to create, relative to the base path
            local_file_path: Local file to read

        Raises:
            FTPSLocalFileError: If the local file cannot be opened
            FTPSTransferError: If the transfer fails
        """
        self._prepare("Upload")
        url = file_url(self._url, remote_file_name)
        self._setopt("URL", url)
        self._setopt("UPLOAD", 1)

        try:
            source = open(local_file_path, "rb")
        except OSError as e:
            raise FTPSLocalFileError(str(local_file_path), "upload", e) from e

        with source:
            size = os.fstat(source.fileno()).st_size
            self._setopt("READFUNCTION", source.read)
            self._setopt("INFILESIZE_LARGE", size)

            logger.info(f"Uploading '{local_file_path}' ({size} bytes) to '{url}'")
            self._perform("upload file")

    def list_directory(self, dir_name: str = "") -> List[str]:
        """
        List names in a remote directory.

        Files and subdirectories are not told apart.

        Args:
            dir_name: Remote directory, relative to the base path

        Returns:
            Names in server order (empty list for an empty directory)

        Raises:
            FTPSOptionError: If the directory URL cannot be set
            FTPSTransferError: If the listing fails
        """
        self._prepare("List")
        url = directory_url(self._url, dir_name)
        buffer = BytesIO()

        self._setopt("URL", url)
        self._setopt("UPLOAD", 0)
        self._setopt("DIRLISTONLY", 1)
        self._setopt("WRITEFUNCTION", buffer.write)

        logger.info(f"Listing '{url}'")
        self._perform("list directory")

        names = self._split_lines(buffer.getvalue())
        logger.debug(f"Found {len(names)} entries in '{url}'")
        return names

    def download(self, remote_file_name: str, local_path: Union[str, os.PathLike] = "/") -> bytes:
        """
        Download a remote file.

        The content is both written to {local_path}/{base name} and
        returned.

        Args:
            remote_file_name: Remote file, relative to the base path
            local_path: Local directory to write the file into

        Returns:
            Downloaded bytes (b"" for an empty file)

        Raises:
            FTPSLocalFileError: If the local file cannot be created
            FTPSTransferError: If the transfer fails
        """
        self._prepare("Download")
        remote_file_name = trim_separators(remote_file_name)
        target = local_target(str(local_path), remote_file_name)
        url = file_url(self._url, remote_file_name)

        try:
            sink = open(target, "wb")
        except OSError as e:
            raise FTPSLocalFileError(target, "download", e) from e

        buffer = BytesIO()

        def write(chunk: bytes) -> None:
            buffer.write(chunk)
            sink.write(chunk)

        with sink:
            self._setopt("URL", url)
            self._setopt("UPLOAD", 0)
            self._setopt("FOLLOWLOCATION", 1)
            self._setopt("WRITEFUNCTION", write)
            self._setopt("CUSTOMREQUEST", f"RETR {remote_file_name}")

            logger.info(f"Downloading '{url}' to '{target}'")
            self._perform("download file")

        return buffer.getvalue()

    def remote_file_size(self, remote_file_name: str) -> int:
        """
        Ask the server for the size of a remote file.

        Args:
            remote_file_name: Remote file, relative to the base path

        Returns:
            Size in bytes, -1 if the server did not report one

        Raises:
            FTPSTransferError: If the request fails
        """
        self._prepare("Remote file size")
        url = file_url(self._url, remote_file_name)
        buffer = BytesIO()

        self._setopt("URL", url)
        self._setopt("UPLOAD", 0)
        self._setopt("WRITEFUNCTION", buffer.write)
        self._setopt("HEADER", 1)
        self._setopt("NOBODY", 1)

        self._perform("get file size")
        size = int(self._handle.getinfo(pycurl.CONTENT_LENGTH_DOWNLOAD))
        logger.info(f"Size of '{url}': {size}")
        return size

    def delete(self, remote_file_name: str) -> str:
        """
        Delete a remote file with DELE.

        The outcome check only looks for the file name among the lines
        the server sent back; it is not a reliable confirmation.

        Args:
            remote_file_name: Remote file, relative to the base path

        Returns:
            base URL + file name if the name is absent from the response,
            otherwise DELETE_FAILED

        Raises:
            FTPSTransferError: If the request fails
        """
        self._prepare("Delete")
        remote_file_name = trim_separators(remote_file_name)
        url = file_url(self._url, remote_file_name)
        buffer = BytesIO()

        self._setopt("URL", url)
        self._setopt("UPLOAD", 0)
        self._setopt("WRITEFUNCTION", buffer.write)
        self._setopt("HEADER", 0)
        self._setopt("QUOTE", [f"DELE {remote_file_name}"])

        logger.info(f"Deleting '{url}'")
        self._perform("delete file")

        lines = self._split_lines(buffer.getvalue())
        if remote_file_name not in lines:
            return self._url + remote_file_name

        logger.warning(f"'{remote_file_name}' still listed after DELE")
        return DELETE_FAILED

    def close(self) -> None:
        """Release the handle. Safe to call more than once."""
        handle, self._handle = self._handle, None
        self._state = SessionState.RELEASED
        if handle is None:
            return

        try:
            handle.close()
        except Exception:
            # Release errors are discarded; the session is gone either way
            pass

    def __enter__(self) -> "FTPSSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        self.close()
