"""Secret redaction for report payloads and log output.

Crash reports leave the process, so anything that looks like a credential is
replaced before it is written to a request record or a log line. Redaction
fails closed: if a pattern cannot be applied, an exception is raised rather
than letting the original text through.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from crashreport.exceptions import CrashReportError

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class RedactionError(CrashReportError):
    """Raised when secret redaction fails."""


# Header names whose values are never reported (compared lower-cased)
SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "x-apikey",
        "x-api-key",
    }
)


class SecretRedactor:
    """Detects and redacts secrets from text.

    Usage:
        redactor = SecretRedactor()
        safe_text = redactor.redact(potentially_sensitive_text)

    Attributes:
        placeholder: The string secrets are replaced with.
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        (r"(?i)bearer\s+[\w\-.~+/]{16,}=*", "Bearer token"),
        (r"AKIA[0-9A-Z]{16}", "AWS access key ID"),
        (r"AIza[0-9A-Za-z\-_]{35}", "Google API key"),
        (r"ghp_[a-zA-Z0-9]{36}", "GitHub PAT"),
        (r"sk_live_[a-zA-Z0-9]{24,}", "Stripe secret key"),
        (
            r"(?i)(postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis|amqp)://[^:]+:[^@]+@[^\s]+",
            "Database connection string",
        ),
        (
            r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----",
            "Private key header",
        ),
        (
            r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*",
            "JWT token",
        ),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Initialize the SecretRedactor.

        Args:
            placeholder: String to replace detected secrets with.
            custom_patterns: Additional (pattern, name) tuples to detect.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._pattern_names: dict[re.Pattern[str], str] = {}

        all_patterns = list(self.DEFAULT_PATTERNS)
        if custom_patterns:
            all_patterns.extend(custom_patterns)

        for pattern_str, name in all_patterns:
            try:
                self._pattern_names[re.compile(pattern_str)] = name
            except re.error as e:
                log.error("pattern_compilation_failed", pattern=pattern_str, error=str(e))
                raise RedactionError(f"Failed to compile secret pattern '{name}': {e}") from e

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        """Return the list of compiled patterns."""
        return list(self._pattern_names)

    def redact(self, text: str) -> str:
        """Redact all secrets from the given text.

        Args:
            text: The text to scan and redact secrets from.

        Returns:
            The text with all detected secrets replaced with the placeholder.

        Raises:
            RedactionError: If redaction fails for any reason.
        """
        if not text:
            return text

        try:
            result = text
            for pattern in self._pattern_names:
                result = pattern.sub(self.placeholder, result)
            return result
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e

    def has_secrets(self, text: str) -> bool:
        """Check if text contains any secrets."""
        if not text:
            return False
        return any(pattern.search(text) for pattern in self._pattern_names)
