"""HTTP client for the advisor backend.

Two endpoints are used:

    - POST {submit_path}: submit a query. 200-class answers immediately,
      202 defers the work to a background job and returns ``{"jobId": ...}``.
    - GET {status_path}?jobId=...: poll a job. Returns ``{"status": ...}``
      plus ``response`` once the status is COMPLETE.

Failures are raised as ``AdvisorClientError`` subclasses so callers never
handle httpx or pydantic exceptions directly.
"""

import logging

import httpx
from pydantic import ValidationError

from advisor_chat.config import ClientConfig, get_client_config
from advisor_chat.errors import SubmissionRejected, TransportFailure
from advisor_chat.models.schemas import ImmediateAnswer, JobAccepted, JobStatusResponse

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    """Pull the backend's error detail out of a failed response."""
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error") or data.get("message")
        if detail:
            return str(detail)
    return "Unexpected response"


class AdvisorAPIClient:
    """Async client for query submission and job status checks.

    Owns its httpx.AsyncClient unless one is passed in, in which case the
    caller is responsible for closing it.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._config.request_timeout_seconds
        )

    async def __aenter__(self) -> "AdvisorAPIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def submit_query(self, query: str) -> ImmediateAnswer | JobAccepted:
        """Submit a query to the advisor.

        Args:
            query: The user's question.

        Returns:
            ImmediateAnswer with the raw payload, or JobAccepted with the job id.

        Raises:
            SubmissionRejected: Non-success status or 202 without a job id.
            TransportFailure: Network error or undecodable body.
        """
        try:
            response = await self._http.post(
                self._config.submit_url,
                json={self._config.query_field: query},
            )
        except httpx.HTTPError as e:
            raise TransportFailure(f"Connection failed: {e}") from e
        except RuntimeError as e:
            # httpx refuses to send once the client is closed
            raise TransportFailure(f"Client unavailable: {e}") from e

        if response.status_code == httpx.codes.ACCEPTED:
            try:
                accepted = JobAccepted.model_validate(response.json())
            except (ValueError, ValidationError) as e:
                raise SubmissionRejected(
                    "Accepted response did not include a job id", response.status_code
                ) from e
            logger.info(f"Query accepted as job {accepted.job_id}")
            return accepted

        if not response.is_success:
            raise SubmissionRejected(_error_detail(response), response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportFailure("Malformed response body") from e

        logger.info("Query answered immediately")
        return ImmediateAnswer(payload=payload)

    async def get_job_status(self, job_id: str) -> JobStatusResponse:
        """Fetch the current status of a job.

        Raises:
            TransportFailure: Network error, non-success status or malformed body.
        """
        try:
            response = await self._http.get(
                self._config.status_url,
                params={self._config.job_id_param: job_id},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Connection failed: {e}") from e
        except RuntimeError as e:
            raise TransportFailure(f"Client unavailable: {e}") from e

        try:
            return JobStatusResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TransportFailure(f"Malformed status response for job {job_id}") from e
