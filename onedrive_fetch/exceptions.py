"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from onedrive_fetch.models.result import ErrorKind


class OneDriveFetchError(Exception):
    """Base exception for all application-specific errors."""


class FetchError(OneDriveFetchError):
    """Base for errors raised by a pipeline stage."""

    kind: ErrorKind


class InputValidationError(FetchError):
    """Raised when a required input is missing, before any network call."""

    kind = ErrorKind.INPUT_VALIDATION


class AuthError(FetchError):
    """Raised when the client-credentials token exchange fails."""

    kind = ErrorKind.AUTH


class ResolutionError(FetchError):
    """
    Raised when the share link cannot be resolved to a usable download URL.
    """

    kind = ErrorKind.RESOLUTION


class DownloadError(FetchError):
    """Raised on a transport or local storage failure while streaming a file."""

    kind = ErrorKind.DOWNLOAD


class ConfigurationError(OneDriveFetchError):
    """Raised for issues related to configuration loading or validation."""
