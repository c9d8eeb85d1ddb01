"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - client_config: ClientConfig with a zero poll interval
    - session: Empty ChatSession without a welcome message
    - backend: ScriptedBackend for driving submissions and job status checks

Poll intervals are zero so no test waits on a real timer.
"""

import asyncio

import pytest

from advisor_chat.chat.conversation import ChatSession
from advisor_chat.config import ClientConfig
from advisor_chat.models.schemas import ImmediateAnswer, JobAccepted, JobStatusResponse


class ScriptedBackend:
    """In-memory stand-in for AdvisorAPIClient.

    ``statuses`` are returned in order by get_job_status; the last entry
    repeats once the script runs out. Exceptions in either script are raised.
    Setting ``gate`` makes status checks block until the event is set;
    ``submit_gate`` does the same for submissions.
    """

    def __init__(
        self,
        submit_result: ImmediateAnswer | JobAccepted | Exception | None = None,
        statuses: list[JobStatusResponse | Exception] | None = None,
    ) -> None:
        self.submit_result = submit_result
        self.statuses = list(statuses or [])
        self.submitted: list[str] = []
        self.status_calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.submit_gate: asyncio.Event | None = None

    async def submit_query(self, query: str) -> ImmediateAnswer | JobAccepted:
        self.submitted.append(query)
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if isinstance(self.submit_result, Exception):
            raise self.submit_result
        return self.submit_result

    async def get_job_status(self, job_id: str) -> JobStatusResponse:
        self.status_calls.append(job_id)
        if self.gate is not None:
            await self.gate.wait()
        result = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if isinstance(result, Exception):
            raise result
        return result


def status(value: str, response: object = None) -> JobStatusResponse:
    """Build a status check result."""
    return JobStatusResponse(status=value, response=response)


async def wait_until(predicate, attempts: int = 100) -> None:
    """Yield to the event loop until ``predicate()`` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def client_config() -> ClientConfig:
    """Return a configuration that polls without delay.

    Returns:
        ClientConfig pointing at http://test with 15 poll attempts.
    """
    return ClientConfig(
        api_base_url="http://test",
        poll_interval_seconds=0,
        max_poll_attempts=15,
        poll_transport_errors="retry",
        welcome_message="",
    )


@pytest.fixture
def session() -> ChatSession:
    """Return an empty chat session."""
    return ChatSession()


@pytest.fixture
def backend() -> ScriptedBackend:
    """Return a backend with no scripted results yet."""
    return ScriptedBackend()
