"""Utility functions and helpers.

- security: Secret redaction
- logging: Structured logging with secret sanitization
"""

from crashreport.utils.logging import (
    LogFormat,
    LogLevel,
    configure_logging,
)
from crashreport.utils.security import (
    SENSITIVE_HEADERS,
    RedactionError,
    SecretRedactor,
)

__all__ = [
    # Logging
    "LogFormat",
    "LogLevel",
    "configure_logging",
    # Security
    "SENSITIVE_HEADERS",
    "RedactionError",
    "SecretRedactor",
]
