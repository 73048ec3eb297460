"""The normalized error record produced by introspection."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from .trace import Trace
from .wire import WireModel


class NormalizedError(WireModel):
    """Everything known about an error, in one serializable shape.

    ``message`` is the outermost error's own description. ``inner_error``
    describes the root of the cause chain and stays empty when the error
    wraps nothing.
    """

    model_config = ConfigDict(frozen=True)

    message: str = ""
    inner_error: str = ""
    class_name: str = ""
    data: Any = None
    stack_trace: Trace = Field(default_factory=Trace)

    def __str__(self) -> str:
        return self.message
