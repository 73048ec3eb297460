"""Core business logic components."""

from .envelope import flatten_multi_map, from_request, new_post
from .extractor import extract_stack_trace
from .introspector import class_of, data_of, introspect, resolve_cause
from .reporter import Reporter
from .stack_dump import StackDumpParser, capture_current_stack

__all__ = [
    "Reporter",
    "StackDumpParser",
    "capture_current_stack",
    "class_of",
    "data_of",
    "extract_stack_trace",
    "flatten_multi_map",
    "from_request",
    "introspect",
    "new_post",
    "resolve_cause",
]
