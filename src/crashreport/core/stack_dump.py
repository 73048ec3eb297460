"""Capture and parsing of textual Python stack dumps.

This module provides the raw execution-stack path used when an error carries
no stack of its own:
- ``capture_current_stack`` snapshots the calling thread's stack as text
- ``StackDumpParser`` turns stack dumps and full tracebacks into frames

Parsed frames are always returned innermost (most recent call) first, the
opposite of the interpreter's own "most recent call last" text layout.
"""

from __future__ import annotations

import inspect
import os
import re
import sys
import traceback
from pathlib import PurePath
from types import FrameType

import structlog

from crashreport.exceptions import StackDumpParseError
from crashreport.models.error import NormalizedError
from crashreport.models.trace import Frame, Trace

log = structlog.get_logger()

# Upper bound for a captured stack, in bytes of text
MAX_STACK_BYTES = 1 << 16


def capture_current_stack(
    start: FrameType | None = None,
    limit: int = MAX_STACK_BYTES,
) -> str:
    """Snapshot the calling thread's execution stack as traceback text.

    Args:
        start: Innermost frame to include (defaults to the caller's frame)
        limit: Maximum size of the returned text in bytes; the outermost
            frames are dropped first when the stack is larger

    Returns:
        Stack text in the interpreter's "most recent call last" layout
    """
    current = inspect.currentframe()
    try:
        if start is None and current is not None:
            start = current.f_back
        entries = traceback.format_stack(start)
    finally:
        del current

    kept: list[str] = []
    size = 0
    for entry in reversed(entries):
        size += len(entry.encode("utf-8"))
        if size > limit:
            log.debug("stack_capture_truncated", limit=limit, kept_frames=len(kept))
            break
        kept.append(entry)

    return "".join(reversed(kept))


def module_name_for(file_path: str) -> str:
    """Best-effort module name for a source file.

    Loaded modules are matched by file; anything else falls back to the
    file's stem. Pseudo-files such as ``<frozen ...>`` have no module name.
    """
    if not file_path or file_path.startswith("<"):
        return ""

    target = os.path.abspath(file_path)
    for name, module in list(sys.modules.items()):
        module_file = getattr(module, "__file__", None)
        if module_file and os.path.abspath(module_file) == target:
            return name

    return PurePath(file_path).stem


class StackDumpParser:
    """Parser for textual Python stack dumps.

    Handles both the bare output of ``traceback.format_stack`` and full
    tracebacks including chained exceptions.

    Example:
        parser = StackDumpParser()
        frames = parser.parse_frames(capture_current_stack())
        print(frames[0].method_name)
    """

    TRACEBACK_HEADER = re.compile(r"Traceback \(most recent call last\):")
    FRAME_PATTERN = re.compile(
        r'^\s*File "([^"]+)", line ([^,\s]+)(?:, in (.+))?$',
        re.MULTILINE,
    )
    EXCEPTION_PATTERN = re.compile(
        r"^([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*):\s*(.*)$",
    )
    EXCEPTION_NO_MSG_PATTERN = re.compile(
        r"^([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)$",
    )
    CHAINED_PATTERN = re.compile(
        r"^(?:The above exception was the direct cause of the following exception:|"
        r"During handling of the above exception, another exception occurred:)$",
        re.MULTILINE,
    )

    def parse_frames(self, text: str) -> list[Frame]:
        """Extract frames from stack text.

        Lines that are not frame headers (source lines, carets, exception
        lines) are skipped. An unparsable line number is recorded as ``-1``.

        Args:
            text: Stack dump or traceback text

        Returns:
            Frames ordered innermost first
        """
        frames: list[Frame] = []
        for match in self.FRAME_PATTERN.finditer(text or ""):
            file_path = match.group(1)
            frames.append(
                Frame(
                    line_number=_parse_line_number(match.group(2)),
                    package_name=module_name_for(file_path),
                    file_name=file_path,
                    method_name=(match.group(3) or "<module>").strip(),
                )
            )

        frames.reverse()
        return frames

    def parse(self, text: str) -> NormalizedError:
        """Parse a full traceback into a normalized error.

        For chained tracebacks the last (outermost) exception supplies the
        message, class and frames, and the first one is reported as the
        inner error.

        Args:
            text: Traceback text

        Returns:
            NormalizedError built from the traceback

        Raises:
            StackDumpParseError: If no frames and no exception line are found
        """
        if not text or not text.strip():
            raise StackDumpParseError("Empty text provided")

        segments = [s for s in self.CHAINED_PATTERN.split(text) if s.strip()]
        outermost = segments[-1]

        frames = self.parse_frames(outermost)
        exception_type, exception_message = self._extract_exception(outermost)

        if not frames and not exception_type:
            raise StackDumpParseError("No stack frames or exception found")

        inner_error = ""
        if len(segments) > 1:
            root_type, root_message = self._extract_exception(segments[0])
            inner_error = _describe(root_type, root_message)

        log.debug(
            "stack_dump_parsed",
            exception_type=exception_type,
            frame_count=len(frames),
            chained=len(segments) > 1,
        )

        return NormalizedError(
            message=_describe(exception_type, exception_message) or "unknown error",
            inner_error=inner_error,
            class_name=exception_type,
            stack_trace=Trace(frames),
        )

    def _extract_exception(self, text: str) -> tuple[str, str]:
        """Extract exception type and message from the end of a traceback.

        Args:
            text: Traceback text to search

        Returns:
            Tuple of (exception_type, exception_message), empty when absent
        """
        if not self.TRACEBACK_HEADER.search(text):
            return ("", "")

        for line in reversed(text.splitlines()):
            line = line.strip()
            if not line or line.startswith("File ") or set(line) <= {"^", "~", " "}:
                continue

            exc_match = self.EXCEPTION_PATTERN.match(line)
            if exc_match:
                return (exc_match.group(1), exc_match.group(2))

            exc_no_msg_match = self.EXCEPTION_NO_MSG_PATTERN.match(line)
            if exc_no_msg_match:
                return (exc_no_msg_match.group(1), "")

        return ("", "")


def _parse_line_number(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return -1


def _describe(exception_type: str, exception_message: str) -> str:
    if exception_message:
        return exception_message
    return exception_type
