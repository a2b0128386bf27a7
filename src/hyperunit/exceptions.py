# src/hyperunit/exceptions.py
"""Errors raised by the HTTP client. The guardian verifier never raises these."""

from __future__ import annotations

from typing import Any, Optional


class HyperUnitError(Exception):
    """Base exception, carrying whatever the API told us about the failure."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


class ApiError(HyperUnitError):
    """The API answered with a non-2xx status."""


class NetworkError(HyperUnitError):
    """No response was received."""


class RequestTimeout(NetworkError):
    """The request timed out."""


class ResponseFormatError(HyperUnitError):
    """A 2xx body did not match the expected shape."""
