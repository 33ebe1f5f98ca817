"""
app/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers catch specific
cases and return the correct HTTP status code without leaking internals.
Every exception carries a client-safe ``message`` and optional ``details``.
"""

from __future__ import annotations


class AppBaseException(Exception):
    """Root exception, catch-all for any application-level error."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


# ── Client input exceptions (HTTP 400) ─────────────────────────────────────────

class ClientInputError(AppBaseException):
    """The request was rejected before any transform ran. Safe to show verbatim."""


class NoFileUploadedError(ClientInputError):
    """Raised when the form carries no file, or an empty one."""


class UnsupportedFileTypeError(ClientInputError):
    """Raised when the file extension maps to no transform."""


class UploadTooLargeError(ClientInputError):
    """Raised when the upload exceeds the configured size cap."""


class InvalidPDFError(ClientInputError):
    """Raised when a .pdf upload does not start with the PDF signature."""


# ── Processing exceptions (HTTP 500) ───────────────────────────────────────────

class TransformError(AppBaseException):
    """Raised when an encoder, parser or artifact write fails."""


class StorageError(AppBaseException):
    """Raised when the storage area cannot read or write a file."""
