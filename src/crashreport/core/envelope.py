"""Report envelope construction.

Builds the outer :class:`Post` around a normalized error, and copies an
inbound HTTP request into a :class:`Request` record.
"""

from __future__ import annotations

import os
import platform
import socket
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

import httpx

from crashreport.models.error import NormalizedError
from crashreport.models.report import (
    Breadcrumb,
    Client,
    Details,
    Environment,
    Post,
    Request,
    User,
)
from crashreport.utils.security import SENSITIVE_HEADERS, SecretRedactor

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

HeaderInput = Mapping[str, str] | Sequence[tuple[str, str]] | httpx.Headers


def new_post(
    error: NormalizedError | None = None,
    client: Client | None = None,
    version: str = "",
    tags: Iterable[str] = (),
    user: str | None = None,
    request: Request | None = None,
    custom_data: Any = None,
    breadcrumbs: Iterable[Breadcrumb] = (),
) -> Post:
    """Create a post describing the current machine.

    Collects the current UTC timestamp, the host name, the processor count,
    the operating system and the architecture.

    Args:
        error: Normalized error to embed
        client: Identification of the reporting application
        version: Version of the application that failed
        tags: Free-form tags for grouping
        user: Identifier of the affected user
        request: Request being served when the error happened
        custom_data: Arbitrary JSON-compatible data
        breadcrumbs: Steps taken before the error

    Returns:
        A new Post
    """
    try:
        hostname = socket.gethostname()
    except OSError:
        hostname = "not available"

    details = Details(
        machine_name=hostname or "not available",
        version=version,
        client=client or Client(),
        error=error or NormalizedError(),
        breadcrumbs=list(breadcrumbs),
        environment=Environment(
            processor_count=os.cpu_count() or 0,
            os_version=platform.system().lower(),
            architecture=platform.machine(),
        ),
        tags=list(tags),
        user_custom_data=custom_data,
        request=request or Request(),
        user=User(identifier=user or ""),
    )

    return Post(
        occurred_on=datetime.now(UTC).strftime(TIMESTAMP_FORMAT),
        details=details,
    )


def flatten_multi_map(multi_map: Mapping[str, Sequence[str]]) -> dict[str, str]:
    """Collapse a multi-valued map into single values.

    Keys with several values become ``"[a; b]"``; keys with one value keep it
    as is. Keys without values are dropped.
    """
    entries: dict[str, str] = {}
    for key, values in multi_map.items():
        if isinstance(values, str):
            entries[key] = values
        elif len(values) > 1:
            entries[key] = f"[{'; '.join(values)}]"
        elif values:
            entries[key] = values[0]
    return entries


def from_request(
    method: str,
    url: str | httpx.URL,
    headers: HeaderInput | None = None,
    form: Mapping[str, Sequence[str]] | None = None,
    remote_addr: str = "",
    body: bytes | str | None = None,
    redactor: SecretRedactor | None = None,
) -> Request:
    """Copy an inbound request into a Request record.

    Query parameters are parsed from the URL. Credentials in headers are
    replaced with a placeholder and secrets in the URL and query values are
    redacted.

    Args:
        method: HTTP method
        url: Full request URL
        headers: Request headers, possibly repeated
        form: Parsed form fields
        remote_addr: Client address
        body: Raw request body
        redactor: Redactor for query values (defaults to SecretRedactor())

    Returns:
        Request record
    """
    redactor = redactor or SecretRedactor()
    parsed = httpx.URL(url)

    query: dict[str, list[str]] = {}
    for key, value in parsed.params.multi_items():
        query.setdefault(key, []).append(redactor.redact(value))

    header_values: dict[str, list[str]] = {}
    parsed_headers = headers if isinstance(headers, httpx.Headers) else httpx.Headers(headers)
    for raw_key, raw_value in parsed_headers.raw:
        key = raw_key.decode(parsed_headers.encoding)
        value = raw_value.decode(parsed_headers.encoding)
        if key.lower() in SENSITIVE_HEADERS:
            value = redactor.placeholder
        header_values.setdefault(key, []).append(value)

    if isinstance(body, bytes):
        raw_data: str | None = body.decode("utf-8", errors="replace")
    else:
        raw_data = body

    return Request(
        host_name=parsed.netloc.decode("ascii"),
        url=redactor.redact(str(parsed)),
        http_method=method.upper(),
        ip_address=remote_addr,
        query_string=flatten_multi_map(query),
        form=flatten_multi_map(form or {}),
        headers=flatten_multi_map(header_values),
        raw_data=raw_data or None,
    )
