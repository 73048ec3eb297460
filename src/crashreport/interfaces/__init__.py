"""Protocol definitions for error capabilities."""

from .capabilities import (
    FrameDescriptor,
    HasCause,
    HasClass,
    HasData,
    HasStringFrames,
    HasStructuredFrames,
)

__all__ = [
    "FrameDescriptor",
    "HasCause",
    "HasClass",
    "HasData",
    "HasStringFrames",
    "HasStructuredFrames",
]
