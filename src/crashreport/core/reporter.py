"""High-level crash reporting.

Combines introspection, envelope construction and submission behind one
call that is safe to use inside exception handlers.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from crashreport.adapters.transport import RaygunTransport
from crashreport.config.schema import CrashReportConfig
from crashreport.core.envelope import new_post
from crashreport.core.introspector import introspect
from crashreport.exceptions import SubmissionError
from crashreport.models.error import NormalizedError
from crashreport.models.report import Breadcrumb, Client, Post, Request

log = structlog.get_logger()


class Reporter:
    """Builds and sends crash reports for errors.

    ``report`` and ``areport`` do not raise when a report cannot be built
    from the given fields or is not delivered; the failure is logged and
    reported through the return value.

    Example:
        reporter = Reporter(load_config(Path("crashreport.yaml")))
        try:
            handle(event)
        except Exception as e:
            reporter.report(e, tags=["worker"])
    """

    def __init__(
        self,
        config: CrashReportConfig,
        transport: RaygunTransport | None = None,
    ) -> None:
        self.config = config
        self.transport = transport or RaygunTransport(config.raygun)

    def build_post(
        self,
        error: NormalizedError,
        request: Request | None = None,
        tags: Iterable[str] = (),
        user: str | None = None,
        custom_data: Any = None,
        breadcrumbs: Iterable[Breadcrumb] = (),
    ) -> Post:
        """Wrap a normalized error in a post using the configured client."""
        client = Client(
            name=self.config.client.name,
            version=self.config.client.version,
            client_url=self.config.client.url,
        )
        return new_post(
            error,
            client=client,
            version=self.config.version,
            tags=[*self.config.tags, *tags],
            user=user,
            request=request,
            custom_data=custom_data,
            breadcrumbs=breadcrumbs,
        )

    def normalize(self, err: BaseException | NormalizedError) -> NormalizedError:
        """Introspect an error with the configured limits."""
        limits = self.config.introspection
        return introspect(err, limits.max_cause_depth, limits.stack_capture_limit)

    def report(self, err: BaseException | NormalizedError, **kwargs: Any) -> bool:
        """Report an error.

        Args:
            err: Error to report
            **kwargs: Passed to ``build_post``

        Returns:
            True if the endpoint accepted the report
        """
        try:
            self.transport.submit(self.build_post(self.normalize(err), **kwargs))
        except (SubmissionError, ValidationError) as e:
            _log_failure(e)
            return False
        return True

    async def areport(self, err: BaseException | NormalizedError, **kwargs: Any) -> bool:
        """Report an error from async code. See ``report``."""
        try:
            await self.transport.asubmit(self.build_post(self.normalize(err), **kwargs))
        except (SubmissionError, ValidationError) as e:
            _log_failure(e)
            return False
        return True


def _log_failure(error: SubmissionError | ValidationError) -> None:
    status_code = error.status_code if isinstance(error, SubmissionError) else None
    log.error("crash_report_not_delivered", error=str(error), status_code=status_code)
