"""
Exceptions raised by the Insight client.

Every failure derives from InsightError so callers can handle all of them
in one place and build their own retry policy.
"""

from __future__ import annotations

from typing import Any


class InsightError(Exception):
    """Base class for all Insight client failures."""


class InvalidArgument(InsightError, ValueError):
    """Caller-supplied input failed local validation. No request was sent."""


class RemoteError(InsightError):
    """The explorer answered with a non-200 status."""

    def __init__(self, status_code: int, body: Any = None, path: str | None = None):
        self.status_code = status_code
        self.body = body
        self.path = path
        if body not in (None, ""):
            detail = body if isinstance(body, str) else repr(body)
        else:
            detail = f"HTTP {status_code}"
        where = f" for {path}" if path else ""
        super().__init__(f"Explorer rejected request{where}: {detail}")


class TransportError(InsightError):
    """The request could not complete (connection refused, DNS, timeout...)."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class TranslationError(InsightError):
    """A 200 response carried a payload that could not be interpreted."""
