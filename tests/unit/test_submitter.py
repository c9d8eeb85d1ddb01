"""Unit tests for RequestSubmitter."""

import asyncio

import pytest_check as check

from advisor_chat.chat.conversation import ChatSession
from advisor_chat.chat.submitter import RequestSubmitter
from advisor_chat.config import ClientConfig
from advisor_chat.errors import GENERIC_FAILURE_MESSAGE, SubmissionRejected, TransportFailure
from advisor_chat.models.schemas import ImmediateAnswer, JobAccepted, Sender
from tests.conftest import ScriptedBackend, status, wait_until


def texts(session: ChatSession) -> list[str]:
    return [m.text for m in session.conversation]


class TestImmediateAnswer:
    """Tests for the synchronous answer path."""

    async def test_appends_user_then_answer(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A 200 answer is normalized and appended after the user message."""
        backend.submit_result = ImmediateAnswer(payload={"output": {"text": "25%"}})
        submitter = RequestSubmitter(backend, session, client_config)

        final = await submitter.submit("  What is the main rate?  ")

        check.equal(backend.submitted, ["What is the main rate?"])
        check.equal(texts(session), ["What is the main rate?", "25%"])
        check.equal(
            [m.sender for m in session.conversation], [Sender.USER, Sender.ASSISTANT]
        )
        check.equal(final.text, "25%")
        check.is_false(session.is_awaiting_response)
        check.equal(backend.status_calls, [])

    async def test_blank_query_ignored(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """Whitespace-only input sends nothing and appends nothing."""
        submitter = RequestSubmitter(backend, session, client_config)

        assert await submitter.submit("   \n ") is None
        assert backend.submitted == []
        assert len(session.conversation) == 0


class TestDeferredAnswer:
    """Tests for the 202 job path."""

    async def test_job_polled_to_completion(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """The placeholder is replaced by the normalized job response."""
        backend.submit_result = JobAccepted(job_id="job-7")
        backend.statuses = [
            status("PENDING"),
            status("PENDING"),
            status("COMPLETE", {"text": "Final [source: HMRC]"}),
        ]
        submitter = RequestSubmitter(backend, session, client_config)

        final = await submitter.submit("VAT threshold?")

        check.equal(backend.status_calls, ["job-7"] * 3)
        check.equal(texts(session), ["VAT threshold?", "Final [source: HMRC]"])
        check.is_false(final.is_status)
        check.is_false(session.is_awaiting_response)
        check.equal(submitter.active_jobs, [])

    async def test_job_timeout_clears_guard(
        self, backend: ScriptedBackend, session: ChatSession
    ) -> None:
        """A timed-out job ends in the generic failure message and frees the session."""
        config = ClientConfig(
            api_base_url="http://test", poll_interval_seconds=0, max_poll_attempts=2
        )
        backend.submit_result = JobAccepted(job_id="job-8")
        backend.statuses = [status("PROCESSING")]
        submitter = RequestSubmitter(backend, session, config)

        await submitter.submit("Q")

        assert texts(session) == ["Q", GENERIC_FAILURE_MESSAGE]
        assert session.is_awaiting_response is False


class TestSubmissionErrors:
    """Tests for failed submissions."""

    async def test_rejected_submission(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A rejected query becomes an error message carrying the backend detail."""
        backend.submit_result = SubmissionRejected("Query too long", status_code=400)
        submitter = RequestSubmitter(backend, session, client_config)

        final = await submitter.submit("Q")

        check.equal(final.text, "A technical error occurred: Query too long")
        check.is_true(final.is_error)
        check.equal(texts(session), ["Q", final.text])
        check.is_false(session.is_awaiting_response)

    async def test_transport_failure(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A network failure becomes an error message; nothing is raised."""
        backend.submit_result = TransportFailure("Connection failed: refused")
        submitter = RequestSubmitter(backend, session, client_config)

        final = await submitter.submit("Q")

        assert final.is_error
        assert "Connection failed" in final.text
        assert session.is_awaiting_response is False

    async def test_can_submit_again_after_failure(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A failure never locks the session."""
        backend.submit_result = TransportFailure("down")
        submitter = RequestSubmitter(backend, session, client_config)
        await submitter.submit("first")

        backend.submit_result = ImmediateAnswer(payload="ok")
        final = await submitter.submit("second")

        assert final.text == "ok"
        assert len(session.conversation) == 4


class TestAdmissionGuard:
    """Tests for the one-submission-at-a-time guard."""

    async def test_second_submit_while_awaiting_is_noop(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A submission during an outstanding job changes nothing."""
        backend.submit_result = JobAccepted(job_id="job-1")
        backend.statuses = [status("COMPLETE", "Answer")]
        backend.gate = asyncio.Event()
        submitter = RequestSubmitter(backend, session, client_config)

        first = asyncio.create_task(submitter.submit("first"))
        await wait_until(lambda: backend.status_calls)
        length = len(session.conversation)

        check.is_true(session.is_awaiting_response)
        check.is_none(await submitter.submit("second"))
        check.equal(len(session.conversation), length)
        check.equal(backend.submitted, ["first"])

        backend.gate.set()
        await first
        check.equal(texts(session), ["first", "Answer"])


class TestCancellation:
    """Tests for cancelling jobs through the submitter."""

    async def test_cancel_active_job(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """Cancelling stops the job, keeps the log as-is and frees the session."""
        backend.submit_result = JobAccepted(job_id="job-3")
        backend.statuses = [status("COMPLETE", "Answer")]
        backend.gate = asyncio.Event()
        submitter = RequestSubmitter(backend, session, client_config)

        task = asyncio.create_task(submitter.submit("Q"))
        await wait_until(lambda: backend.status_calls)

        check.equal(submitter.active_jobs, ["job-3"])
        check.is_true(submitter.cancel("job-3"))
        backend.gate.set()

        check.is_none(await task)
        check.equal(len(session.conversation), 2)
        check.is_true(session.conversation.messages[1].is_status)
        check.is_false(session.is_awaiting_response)
        check.is_false(submitter.cancel("job-3"))

    async def test_cancel_unknown_job(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """Unknown job ids are ignored."""
        submitter = RequestSubmitter(backend, session, client_config)

        assert submitter.cancel("nope") is False
        submitter.cancel_all()

    async def test_cancel_all_during_submission(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A job accepted after cancel_all is never followed and posts no placeholder."""
        backend.submit_result = JobAccepted(job_id="job-4")
        backend.statuses = [status("COMPLETE", "Answer")]
        backend.submit_gate = asyncio.Event()
        submitter = RequestSubmitter(backend, session, client_config)

        task = asyncio.create_task(submitter.submit("Q"))
        await wait_until(lambda: backend.submitted)
        submitter.cancel_all()
        backend.submit_gate.set()

        check.is_none(await task)
        check.equal(texts(session), ["Q"])
        check.equal(backend.status_calls, [])
        check.equal(submitter.active_jobs, [])
        check.is_false(session.is_awaiting_response)

    async def test_submit_after_cancel_all_ignored(
        self, backend: ScriptedBackend, session: ChatSession, client_config: ClientConfig
    ) -> None:
        """A cancelled submitter accepts no further queries."""
        backend.submit_result = ImmediateAnswer(payload="ok")
        submitter = RequestSubmitter(backend, session, client_config)
        submitter.cancel_all()

        assert await submitter.submit("Q") is None
        assert backend.submitted == []
        assert len(session.conversation) == 0
