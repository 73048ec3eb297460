"""Exceptions raised by the crashreport package.

Introspection itself never raises. These cover the layers around it:
configuration, stack dump parsing and report submission.
"""

from __future__ import annotations


class CrashReportError(Exception):
    """Base exception for all crashreport errors."""


class ConfigurationError(CrashReportError, ValueError):
    """Configuration is missing or invalid."""


class StackDumpParseError(CrashReportError):
    """Failed to parse a textual stack dump."""


class SubmissionError(CrashReportError):
    """A report could not be delivered.

    Attributes:
        status_code: HTTP status returned by the endpoint, if a response arrived.
        body: Response body returned by the endpoint, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
