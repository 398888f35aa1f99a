"""FTPS-specific exceptions for the implicit TLS FTP client.

Custom exception hierarchy for session construction and transfer
operations. Construction problems are configuration or argument errors;
everything that goes wrong while talking to the transfer engine is a
runtime error.
"""

from typing import Optional


class FTPSError(Exception):
    """Base exception for all FTPS-related errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class FTPSConfigurationError(FTPSError):
    """Installed libcurl is too old to speak implicit SSL FTP."""

    def __init__(self, required: str, installed: str):
        self.required = required
        self.installed = installed
        message = f"Require at least libcurl {required}, found {installed}"
        super().__init__(message)


class FTPSInvalidArgumentError(FTPSError, ValueError):
    """Session constructed with a blank or zero required argument."""

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(message)


class FTPSRuntimeError(FTPSError, RuntimeError):
    """Base class for failures reported while driving the transfer engine."""


class FTPSHandleError(FTPSRuntimeError):
    """Transfer handle could not be acquired."""

    def __init__(self, original_error: Exception = None):
        super().__init__("Could not initialize cURL", original_error)


class FTPSOptionError(FTPSRuntimeError):
    """A single transfer option could not be applied to the handle."""

    def __init__(self, option: str, original_error: Exception = None):
        self.option = option
        message = f"Could not set cURL option: {option}"
        super().__init__(message, original_error)


class FTPSTransferError(FTPSRuntimeError):
    """Transfer engine reported failure while executing an operation."""

    def __init__(
        self,
        operation: str,
        code: Optional[int],
        error: str,
        original_error: Exception = None
    ):
        self.operation = operation
        self.code = code
        self.error = error
        message = f"Could not {operation}. cURL Error: [{code}] - {error}"
        super().__init__(message, original_error)

    def __str__(self) -> str:
        # code and text already carry everything the engine reported
        return self.message


class FTPSLocalFileError(FTPSRuntimeError):
    """Local source or sink file could not be opened."""

    def __init__(self, path: str, operation: str, original_error: Exception = None):
        self.path = path
        self.operation = operation
        message = f"Could not open local file '{path}' for {operation}"
        super().__init__(message, original_error)


class FTPSSessionReleasedError(FTPSRuntimeError):
    """Operation attempted after the session released its handle."""

    def __init__(self, operation: str = "Operation"):
        message = f"{operation} requires an active FTPS session"
        super().__init__(message)
