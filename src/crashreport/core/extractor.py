"""Stack trace extraction from arbitrary error values.

Errors record their stack in different, incompatible ways. The extractor
tries each known convention in a fixed priority order and returns the first
trace it gets:

1. structured frame descriptors (``stack_trace()``)
2. ``<file>:<line>`` strings (``stack_trace_lines()``)
3. a snapshot of the current execution stack

A convention is selected by the presence of its method, not by whether it
returns anything: an empty sequence yields an empty trace.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable

import structlog

from crashreport.core.stack_dump import MAX_STACK_BYTES, StackDumpParser, capture_current_stack
from crashreport.interfaces.capabilities import (
    FrameDescriptor,
    HasStringFrames,
    HasStructuredFrames,
)
from crashreport.models.trace import Trace

log = structlog.get_logger()

StackStrategy = Callable[[BaseException], Trace | None]

# Frames of extract_stack_trace and introspect at the top of a raw capture
_OWN_FRAMES = 2


def from_structured_frames(err: BaseException) -> Trace | None:
    """Read a trace from structured frame descriptors.

    Args:
        err: Error to inspect

    Returns:
        Trace with one frame per descriptor, or None if unsupported
    """
    if not isinstance(err, HasStructuredFrames):
        return None

    stack = Trace()
    for descriptor in err.stack_trace():
        package_name, file_name = split_symbol_location(_render(descriptor, "+s"))
        stack.add_entry(
            parse_line_number(_render(descriptor, "d")),
            package_name,
            file_name,
            _render(descriptor, "n"),
        )

    return stack


def from_string_frames(err: BaseException) -> Trace | None:
    """Read a trace from ``<file>:<line>`` strings.

    Args:
        err: Error to inspect

    Returns:
        Trace with one frame per line, or None if unsupported
    """
    if not isinstance(err, HasStringFrames):
        return None

    stack = Trace()
    for line in err.stack_trace_lines():
        file_name, sep, number = str(line).rpartition(":")
        if not sep:
            file_name, number = number, ""
        stack.add_entry(parse_line_number(number), "", file_name, "")

    return stack


STRATEGIES: tuple[StackStrategy, ...] = (
    from_structured_frames,
    from_string_frames,
)


def from_raw_stack(text: str, parser: StackDumpParser | None = None) -> Trace:
    """Build a trace from captured stack text.

    The two innermost frames belong to the extractor and the introspector
    and are dropped, so the trace starts at the introspection call site.

    Args:
        text: Stack text as produced by ``capture_current_stack``
        parser: Parser to use (defaults to a new StackDumpParser)

    Returns:
        Trace of the remaining frames, innermost first
    """
    parser = parser or StackDumpParser()
    return Trace(parser.parse_frames(text)[_OWN_FRAMES:])


def extract_stack_trace(err: BaseException, capture_limit: int = MAX_STACK_BYTES) -> Trace:
    """Extract the best available stack trace for an error.

    Meant to be called by ``introspect``: the raw capture fallback assumes
    exactly one caller frame (the introspector) to discard.

    Args:
        err: Error to extract a trace from
        capture_limit: Size bound for the raw stack capture, in bytes

    Returns:
        Trace, innermost call first; empty when nothing could be determined
    """
    for strategy in STRATEGIES:
        try:
            stack = strategy(err)
        except Exception as e:
            log.debug(
                "stack_strategy_failed",
                strategy=strategy.__name__,
                error_type=type(err).__name__,
                exception=str(e),
            )
            continue
        if stack is not None:
            return stack

    current = inspect.currentframe()
    try:
        return from_raw_stack(capture_current_stack(current, capture_limit))
    except Exception as e:
        log.debug("stack_capture_failed", exception=str(e))
        return Trace()
    finally:
        del current


def split_symbol_location(rendered: str) -> tuple[str, str]:
    """Split ``<package>.<symbol>\\n\\t<location>`` into package and location.

    The last dotted segment of the symbol is the function's own name and is
    discarded. A rendering without the separator yields an empty location.
    """
    symbol, _, location = rendered.partition("\n\t")
    package_name, _, _ = symbol.rpartition(".")
    return package_name, location


def parse_line_number(text: str) -> int:
    """Parse a decimal line number, returning -1 when it is malformed."""
    try:
        return int(text.strip())
    except ValueError:
        return -1


def _render(descriptor: FrameDescriptor, format_spec: str) -> str:
    try:
        return format(descriptor, format_spec)
    except Exception as e:
        log.debug("frame_render_failed", format_spec=format_spec, exception=str(e))
        return ""
