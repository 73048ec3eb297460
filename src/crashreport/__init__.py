"""Normalize errors from any wrapping convention into crash reports."""

from crashreport.core import (
    Reporter,
    extract_stack_trace,
    from_request,
    introspect,
    new_post,
    resolve_cause,
)
from crashreport.exceptions import CrashReportError, SubmissionError
from crashreport.models import Frame, NormalizedError, Post, Trace
from crashreport.wrapping import annotate, new_error, wrap

__all__ = [
    "CrashReportError",
    "Frame",
    "NormalizedError",
    "Post",
    "Reporter",
    "SubmissionError",
    "Trace",
    "annotate",
    "extract_stack_trace",
    "from_request",
    "introspect",
    "new_error",
    "new_post",
    "resolve_cause",
    "wrap",
]
