"""Shared test fixtures for crashreport."""

from collections.abc import Callable, Iterator

import httpx
import pytest
import structlog

from crashreport.config.schema import RaygunConfig


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def simple_traceback() -> str:
    """Return a simple traceback."""
    return """Traceback (most recent call last):
  File "/home/user/project/src/app/main.py", line 10, in main
    result = process_data(data)
  File "/home/user/project/src/app/processor.py", line 25, in process_data
    return parse_value(item)
  File "/home/user/project/src/app/utils.py", line 42, in parse_value
    raise ValueError("Invalid value")
ValueError: Invalid value
"""


@pytest.fixture
def chained_traceback() -> str:
    """Return a chained exception traceback."""
    return """Traceback (most recent call last):
  File "/home/user/project/src/app/main.py", line 10, in main
    result = fetch_data(url)
  File "/home/user/project/src/app/network.py", line 30, in fetch_data
    response = requests.get(url)
ConnectionError: Failed to connect to server

The above exception was the direct cause of the following exception:

Traceback (most recent call last):
  File "/home/user/project/src/app/api.py", line 15, in get_resource
    data = load_from_network(url)
  File "/home/user/project/src/app/loader.py", line 20, in load_from_network
    raise DataLoadError("Failed to load data") from e
DataLoadError: Failed to load data
"""


@pytest.fixture
def raw_stack() -> str:
    """Return a stack dump as captured from inside the extractor."""
    return """  File "/app/main.py", line 10, in <module>
    main()
  File "/app/main.py", line 5, in main
    handle()
  File "/app/handler.py", line 22, in handle
    report = introspect(err)
  File "/app/crashreport/core/introspector.py", line 120, in introspect
    stack_trace=extract_stack_trace(err, capture_limit),
  File "/app/crashreport/core/extractor.py", line 140, in extract_stack_trace
    return from_raw_stack(capture_current_stack(current, capture_limit))
"""


@pytest.fixture
def raygun_config() -> RaygunConfig:
    """Return a config pointing at a fake endpoint."""
    return RaygunConfig(api_key="test-api-key", endpoint="https://raygun.test")


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Collect requests seen by mock transports."""
    return []


@pytest.fixture
def mock_transport(
    recorded_requests: list[httpx.Request],
) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport answering with a fixed status and body."""

    def factory(status_code: int = 202, body: str = "") -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(status_code, text=body)

        return httpx.MockTransport(handler)

    return factory
