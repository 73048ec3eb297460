"""Helpers for wrapping errors with context.

Two wrapping styles are provided, one per stack convention understood by
the extractor:

- ``wrap`` records the full call stack at the wrap site as structured frames
- ``annotate`` records only the ``<file>:<line>`` of each annotation

Both prefix the wrapped error's text with a message and expose the wrapped
error through ``cause()``.
"""

from __future__ import annotations

import inspect
import os
from collections.abc import Sequence
from types import FrameType
from typing import overload

from crashreport.interfaces.capabilities import HasStringFrames

# Maximum number of frames recorded by wrap()
MAX_STACK_DEPTH = 32


class CallSite:
    """One recorded call site.

    Renders through ``format()``: ``"d"`` gives the line number, ``"s"`` the
    file's base name, ``"+s"`` the qualified function name and the full path
    separated by ``"\\n\\t"``, ``"n"`` the function's qualified name and
    ``"v"`` ``<file>:<line>``.
    """

    __slots__ = ("filename", "lineno", "module", "qualname")

    def __init__(self, module: str, qualname: str, filename: str, lineno: int) -> None:
        self.module = module
        self.qualname = qualname
        self.filename = filename
        self.lineno = lineno

    @classmethod
    def from_frame(cls, frame: FrameType) -> CallSite:
        """Build a call site from a live frame."""
        code = frame.f_code
        return cls(
            module=str(frame.f_globals.get("__name__", "")),
            qualname=code.co_qualname,
            filename=code.co_filename,
            lineno=frame.f_lineno,
        )

    @property
    def location(self) -> str:
        return f"{self.filename}:{self.lineno}"

    def __format__(self, format_spec: str) -> str:
        if format_spec == "d":
            return str(self.lineno)
        if format_spec == "s":
            return os.path.basename(self.filename)
        if format_spec == "+s":
            return f"{self.module}.{self.qualname}\n\t{self.filename}"
        if format_spec == "n":
            return self.qualname
        if format_spec in ("", "v"):
            return f"{os.path.basename(self.filename)}:{self.lineno}"
        raise ValueError(f"Unknown format spec for CallSite: {format_spec!r}")

    def __repr__(self) -> str:
        return f"CallSite({self.module}.{self.qualname} at {self.location})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallSite):
            return NotImplemented
        return (self.module, self.qualname, self.filename, self.lineno) == (
            other.module,
            other.qualname,
            other.filename,
            other.lineno,
        )

    def __hash__(self) -> int:
        return hash((self.module, self.qualname, self.filename, self.lineno))


def callers(skip: int = 0, depth: int = MAX_STACK_DEPTH) -> list[CallSite]:
    """Record the current call stack, innermost first.

    Args:
        skip: Number of frames above the caller to leave out
        depth: Maximum number of frames to record

    Returns:
        Call sites starting at the caller of this function (after ``skip``)
    """
    frame = inspect.currentframe()
    try:
        for _ in range(skip + 1):
            frame = frame.f_back if frame is not None else None

        sites: list[CallSite] = []
        while frame is not None and len(sites) < depth:
            sites.append(CallSite.from_frame(frame))
            frame = frame.f_back
        return sites
    finally:
        del frame


class WrappedError(Exception):
    """An error wrapped with a message and the stack of the wrap site."""

    def __init__(self, cause: BaseException, message: str, stack: Sequence[CallSite]) -> None:
        super().__init__(f"{message}: {cause}")
        self.message = message
        self.__cause__ = cause
        self._cause = cause
        self._stack = tuple(stack)

    def cause(self) -> BaseException:
        return self._cause

    def stack_trace(self) -> tuple[CallSite, ...]:
        return self._stack


class LocatedError(Exception):
    """An error that remembers where it was created."""

    def __init__(self, message: str, location: str) -> None:
        super().__init__(message)
        self.location = location

    def stack_trace_lines(self) -> list[str]:
        return [self.location]


class AnnotatedError(Exception):
    """An error wrapped with a message and the location of the annotation."""

    def __init__(self, cause: BaseException, message: str, location: str) -> None:
        super().__init__(f"{message}: {cause}")
        self.message = message
        self.location = location
        self.__cause__ = cause
        self._cause = cause

    def cause(self) -> BaseException:
        return self._cause

    def stack_trace_lines(self) -> list[str]:
        lines = [self.location]
        if isinstance(self._cause, HasStringFrames):
            lines.extend(self._cause.stack_trace_lines())
        return lines


def new_error(message: str) -> LocatedError:
    """Create an error that records the caller's location."""
    return LocatedError(message, _caller_location())


@overload
def wrap(err: BaseException, message: str) -> WrappedError: ...


@overload
def wrap(err: None, message: str) -> None: ...


def wrap(err: BaseException | None, message: str) -> WrappedError | None:
    """Wrap an error with a message and the caller's stack.

    Args:
        err: Error to wrap; None is passed through
        message: Context prepended to the error's text

    Returns:
        WrappedError whose text is ``"<message>: <err>"``, or None
    """
    if err is None:
        return None
    return WrappedError(err, message, callers(skip=1))


@overload
def annotate(err: BaseException, message: str) -> AnnotatedError: ...


@overload
def annotate(err: None, message: str) -> None: ...


def annotate(err: BaseException | None, message: str) -> AnnotatedError | None:
    """Annotate an error with a message and the caller's location.

    Args:
        err: Error to annotate; None is passed through
        message: Context prepended to the error's text

    Returns:
        AnnotatedError whose text is ``"<message>: <err>"``, or None
    """
    if err is None:
        return None
    return AnnotatedError(err, message, _caller_location())


def _caller_location() -> str:
    # Skips this helper and the public function that called it
    sites = callers(skip=2, depth=1)
    return sites[0].location if sites else ""
