"""Tests for the high-level Reporter."""

import json
from collections.abc import Callable

import httpx

from crashreport.adapters.transport import RaygunTransport
from crashreport.config.schema import ClientConfig, CrashReportConfig, RaygunConfig
from crashreport.core.reporter import Reporter
from crashreport.models.error import NormalizedError
from crashreport.wrapping import wrap

MockFactory = Callable[..., httpx.MockTransport]


def make_config() -> CrashReportConfig:
    return CrashReportConfig(
        raygun=RaygunConfig(api_key="test-api-key", endpoint="https://raygun.test"),
        client=ClientConfig(name="billing", version="2.0.0"),
        version="9.9.9",
        tags=["service"],
    )


class TestReporter:
    """Tests for Reporter."""

    def test_report_accepted(
        self,
        mock_transport: MockFactory,
        recorded_requests: list[httpx.Request],
    ) -> None:
        """Test reporting an error end to end."""
        config = make_config()
        transport = RaygunTransport(config.raygun, client=httpx.Client(transport=mock_transport()))
        reporter = Reporter(config, transport)

        assert reporter.report(wrap(ValueError("new error"), "wrapped err"), tags=["t"]) is True

        payload = json.loads(recorded_requests[0].content)
        details = payload["details"]
        assert details["error"]["message"] == "wrapped err: new error"
        assert details["error"]["innerError"] == "new error"
        assert details["client"] == {"identifier": "billing", "version": "2.0.0"}
        assert details["version"] == "9.9.9"
        assert details["tags"] == ["service", "t"]

    def test_report_rejected(self, mock_transport: MockFactory) -> None:
        """Test that a rejected report returns False instead of raising."""
        config = make_config()
        transport = RaygunTransport(
            config.raygun, client=httpx.Client(transport=mock_transport(400, "bad"))
        )

        assert Reporter(config, transport).report(ValueError("boom")) is False

    def test_report_invalid_fields(
        self,
        mock_transport: MockFactory,
        recorded_requests: list[httpx.Request],
    ) -> None:
        """Test that fields the report cannot hold return False without sending."""
        config = make_config()
        transport = RaygunTransport(config.raygun, client=httpx.Client(transport=mock_transport()))

        result = Reporter(config, transport).report(ValueError("boom"), tags=[object()])

        assert result is False
        assert recorded_requests == []

    async def test_areport_invalid_fields(
        self,
        mock_transport: MockFactory,
        recorded_requests: list[httpx.Request],
    ) -> None:
        """Test the async variant with fields the report cannot hold."""
        config = make_config()
        async with httpx.AsyncClient(transport=mock_transport()) as client:
            reporter = Reporter(config, RaygunTransport(config.raygun, async_client=client))
            assert await reporter.areport(ValueError("boom"), tags=[object()]) is False

        assert recorded_requests == []

    async def test_areport(
        self,
        mock_transport: MockFactory,
        recorded_requests: list[httpx.Request],
    ) -> None:
        """Test reporting from async code."""
        config = make_config()
        async with httpx.AsyncClient(transport=mock_transport()) as client:
            reporter = Reporter(config, RaygunTransport(config.raygun, async_client=client))
            assert await reporter.areport(ValueError("boom"), user="user-1") is True

        payload = json.loads(recorded_requests[0].content)
        assert payload["details"]["user"] == {"identifier": "user-1"}

    def test_normalize_uses_limits(self) -> None:
        """Test that introspection limits come from configuration."""
        reporter = Reporter(make_config())

        result = reporter.normalize(ValueError("boom"))

        assert result.message == "boom"
        assert len(result.stack_trace) > 0

    def test_normalize_passes_through_records(self) -> None:
        """Test that normalized errors are not introspected again."""
        record = NormalizedError(message="done")
        assert Reporter(make_config()).normalize(record) is record

    def test_default_transport(self) -> None:
        """Test that a transport is created from configuration."""
        reporter = Reporter(make_config())
        assert reporter.transport.entries_url == "https://raygun.test/entries"
