"""Optional capabilities an error value may expose.

Errors produced by different wrapping conventions share no base class.
Each convention is described here as a narrow protocol and detected at
runtime with ``isinstance`` checks, so any exception type can opt in by
simply defining the method.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HasCause(Protocol):
    """An error that wraps another error."""

    def cause(self) -> BaseException | None:
        """
        Return the wrapped error.

        Returns:
            The underlying error, or None when nothing is wrapped
        """
        ...


@runtime_checkable
class HasClass(Protocol):
    """An error that declares a short class or category tag."""

    def error_class(self) -> str:
        """Return the error's class tag."""
        ...


@runtime_checkable
class HasData(Protocol):
    """An error that carries structured payload data."""

    def data(self) -> Any:
        """Return the payload attached to the error."""
        ...


class FrameDescriptor(Protocol):
    """An opaque frame that renders itself through ``format()``.

    Supported format specs:
    - ``"d"``: the line number as a decimal string
    - ``"+s"``: ``<package>.<symbol>`` and the file, separated by ``"\\n\\t"``
    - ``"n"``: the bare function or method name
    """

    def __format__(self, format_spec: str) -> str: ...


@runtime_checkable
class HasStructuredFrames(Protocol):
    """An error that recorded structured frames where it was created."""

    def stack_trace(self) -> Sequence[FrameDescriptor]:
        """Return the recorded frames, innermost first."""
        ...


@runtime_checkable
class HasStringFrames(Protocol):
    """An error that recorded its trace as ``<file>:<line>`` strings."""

    def stack_trace_lines(self) -> Sequence[str]:
        """Return the recorded locations in order."""
        ...
