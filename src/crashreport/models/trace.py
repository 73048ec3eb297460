"""Data models for normalized stack traces."""

from __future__ import annotations

from collections.abc import Iterator
from typing import overload

from pydantic import ConfigDict, Field, RootModel

from .wire import WireModel


class Frame(WireModel):
    """A single call site in a normalized stack trace.

    ``line_number`` is ``-1`` when the source representation could not be
    parsed. ``package_name`` holds the package, module or class that owns the
    call site and travels under the ``className`` key.
    """

    model_config = ConfigDict(frozen=True)

    line_number: int = 0
    package_name: str = Field("", alias="className")
    file_name: str = ""
    method_name: str = ""

    def __str__(self) -> str:
        return f"{self.package_name}/{self.file_name}:{self.line_number}"


class Trace(RootModel[list[Frame]]):
    """Ordered frames, innermost (most recent) call first."""

    root: list[Frame] = Field(default_factory=list)

    def add_entry(
        self,
        line_number: int,
        package_name: str,
        file_name: str,
        method_name: str,
    ) -> None:
        """Append a new frame to the end of the trace."""
        self.root.append(
            Frame(
                line_number=line_number,
                package_name=package_name,
                file_name=file_name,
                method_name=method_name,
            )
        )

    def append(self, frame: Frame) -> None:
        """Append an already built frame."""
        self.root.append(frame)

    def __iter__(self) -> Iterator[Frame]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    @overload
    def __getitem__(self, item: int) -> Frame: ...

    @overload
    def __getitem__(self, item: slice) -> Trace: ...

    def __getitem__(self, item: int | slice) -> Frame | Trace:
        if isinstance(item, slice):
            return Trace(self.root[item])
        return self.root[item]

    def __str__(self) -> str:
        return "".join(f"{frame}\n" for frame in self.root)
