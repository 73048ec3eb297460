"""Outer report envelope records.

These mirror the Raygun REST JSON payload: a :class:`Post` carries the time
of the failure and a :class:`Details` block that embeds the
:class:`~crashreport.models.error.NormalizedError`.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .error import NormalizedError
from .wire import WireModel


class Client(WireModel):
    """The library or application sending the report."""

    name: str = Field("", alias="identifier")
    version: str = ""
    client_url: str = ""


class Breadcrumb(WireModel):
    """A step the user took before the crash."""

    message: str = ""
    category: str = ""
    custom_data: Any = None
    timestamp: int = 0
    level: int = 0
    type: str = ""


class Environment(WireModel):
    """The machine the error happened on."""

    processor_count: int = 0
    os_version: str = ""
    window_bounds_width: int = 0
    window_bounds_height: int = 0
    resolution_scale: str = ""
    current_orientation: str = ""
    cpu: str = ""
    package_version: str = ""
    architecture: str = ""
    total_physical_memory: int = 0
    available_physical_memory: int = 0
    total_virtual_memory: int = 0
    available_virtual_memory: int = 0
    disk_space_free: list[int] = Field(default_factory=list)
    device_name: str = ""
    locale: str = ""


class Request(WireModel):
    """The inbound HTTP request being served when the error happened."""

    host_name: str = ""
    url: str = ""
    http_method: str = ""
    ip_address: str = ""
    query_string: dict[str, str] = Field(default_factory=dict)
    form: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    raw_data: Any = None


class Response(WireModel):
    """The response status sent for the failed request."""

    status_code: int = 0


class User(WireModel):
    """The user affected by the error."""

    identifier: str = ""


class Context(WireModel):
    """The program context the error belongs to."""

    identifier: str = ""


class Details(WireModel):
    """Circumstances of the error."""

    machine_name: str = ""
    version: str = ""
    client: Client = Field(default_factory=Client)
    error: NormalizedError = Field(default_factory=NormalizedError)
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)
    environment: Environment = Field(default_factory=Environment)
    tags: list[str] = Field(default_factory=list)
    user_custom_data: Any = None
    request: Request = Field(default_factory=Request)
    response: Response = Field(default_factory=Response)
    user: User = Field(default_factory=User)
    context: Context = Field(default_factory=Context)


class Post(WireModel):
    """Full body of a crash report submission."""

    occurred_on: str = ""
    details: Details = Field(default_factory=Details)
