"""HTTP transport for crash report submission.

Posts a serialized :class:`Post` to ``<endpoint>/entries`` with the API key in
the ``X-ApiKey`` header. The endpoint accepts a report with ``202 Accepted``;
every other answer is a failure. Each call makes exactly one attempt.
"""

from __future__ import annotations

import httpx
import structlog
from pydantic_core import PydanticSerializationError

from crashreport.config.schema import RaygunConfig
from crashreport.exceptions import SubmissionError
from crashreport.models.report import Post

log = structlog.get_logger()

API_KEY_HEADER = "X-ApiKey"


class RaygunTransport:
    """Submits crash reports to a Raygun-compatible endpoint.

    Example:
        transport = RaygunTransport(RaygunConfig(api_key="..."))
        transport.submit(new_post(introspect(err)))
    """

    def __init__(
        self,
        config: RaygunConfig,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Endpoint, API key and timeout
            client: Client for ``submit`` (a short-lived one is created per
                call when omitted)
            async_client: Client for ``asubmit``, same rules as ``client``
        """
        self._config = config
        self._client = client
        self._async_client = async_client

    @property
    def entries_url(self) -> str:
        return f"{self._config.endpoint}/entries"

    def submit(self, post: Post) -> None:
        """Send a report.

        Args:
            post: Report to send

        Raises:
            SubmissionError: If the report could not be serialized or sent,
                or the endpoint did not accept it
        """
        content = self._encode(post)

        try:
            if self._client is not None:
                response = self._client.post(
                    self.entries_url, content=content, headers=self._headers()
                )
            else:
                with httpx.Client(timeout=self._config.timeout) as client:
                    response = client.post(
                        self.entries_url, content=content, headers=self._headers()
                    )
        except httpx.HTTPError as e:
            log.warning("report_submission_failed", url=self.entries_url, error=str(e))
            raise SubmissionError(f"execute req: {e}") from e

        self._check(response)

    async def asubmit(self, post: Post) -> None:
        """Send a report without blocking the event loop.

        Raises:
            SubmissionError: Same conditions as ``submit``
        """
        content = self._encode(post)

        try:
            if self._async_client is not None:
                response = await self._async_client.post(
                    self.entries_url, content=content, headers=self._headers()
                )
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                    response = await client.post(
                        self.entries_url, content=content, headers=self._headers()
                    )
        except httpx.HTTPError as e:
            log.warning("report_submission_failed", url=self.entries_url, error=str(e))
            raise SubmissionError(f"execute req: {e}") from e

        self._check(response)

    def _headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self._config.api_key,
            "Content-Type": "application/json",
        }

    def _encode(self, post: Post) -> bytes:
        try:
            return post.to_json().encode("utf-8")
        except PydanticSerializationError as e:
            raise SubmissionError(f"convert to json: {e}") from e

    def _check(self, response: httpx.Response) -> None:
        if response.status_code == httpx.codes.ACCEPTED:
            log.info("report_submitted", status_code=response.status_code)
            return

        body = response.text or "no body"
        log.warning(
            "report_rejected",
            status_code=response.status_code,
            body=body,
        )
        raise SubmissionError(
            f"unexpected answer '{response.status_code} {response.reason_phrase}' "
            f"from Raygun: {body}",
            status_code=response.status_code,
            body=body,
        )
