"""Data models and wire records."""

from .error import NormalizedError
from .report import (
    Breadcrumb,
    Client,
    Context,
    Details,
    Environment,
    Post,
    Request,
    Response,
    User,
)
from .trace import Frame, Trace
from .wire import WireModel

__all__ = [
    # Trace models
    "Frame",
    "Trace",
    # Error model
    "NormalizedError",
    # Envelope models
    "Breadcrumb",
    "Client",
    "Context",
    "Details",
    "Environment",
    "Post",
    "Request",
    "Response",
    "User",
    # Base
    "WireModel",
]
