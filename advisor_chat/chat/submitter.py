"""Query submission: the entry point from the chat view into the backend."""

import logging
from typing import Protocol

from advisor_chat.chat.conversation import ChatSession
from advisor_chat.chat.poller import JobPoller
from advisor_chat.config import ClientConfig
from advisor_chat.errors import AdvisorClientError, format_error_message
from advisor_chat.models.schemas import (
    ImmediateAnswer,
    JobAccepted,
    JobStatusResponse,
    Message,
)
from advisor_chat.parsing.normalizer import normalize_response

logger = logging.getLogger(__name__)


class AdvisorBackend(Protocol):
    async def submit_query(self, query: str) -> ImmediateAnswer | JobAccepted: ...

    async def get_job_status(self, job_id: str) -> JobStatusResponse: ...


class RequestSubmitter:
    """Sends one query per call and records the outcome in the session.

    Only one submission is admitted at a time: while
    ``session.is_awaiting_response`` is set, further calls are ignored. The
    flag is cleared on every terminal branch, including failures.

    After ``cancel_all`` the submitter is closed: jobs accepted by a submission
    still in flight are not followed, and new submissions are ignored.
    """

    def __init__(
        self,
        client: AdvisorBackend,
        session: ChatSession,
        config: ClientConfig,
    ) -> None:
        self._client = client
        self._session = session
        self._config = config
        self._pollers: dict[str, JobPoller] = {}
        self._closed = False

    @property
    def active_jobs(self) -> list[str]:
        return list(self._pollers)

    async def submit(self, query: str) -> Message | None:
        """Submit a query and wait for its terminal assistant message.

        Args:
            query: Raw user input; surrounding whitespace is ignored.

        Returns:
            The terminal assistant message, or None when the query was empty,
            a response was already awaited, or the submitter or job was cancelled.
        """
        text = query.strip()
        if not text or self._closed:
            return None
        if self._session.is_awaiting_response:
            logger.debug("Submission ignored: a response is already awaited")
            return None

        self._session.is_awaiting_response = True
        conversation = self._session.conversation
        try:
            conversation.append(Message.user(text))

            try:
                result = await self._client.submit_query(text)
            except AdvisorClientError as e:
                logger.warning(f"Query submission failed: {e}")
                return conversation.append(Message.assistant(format_error_message(str(e))))

            if isinstance(result, JobAccepted):
                return await self._follow_job(result.job_id)

            return conversation.append(Message.assistant(normalize_response(result.payload)))
        finally:
            self._session.is_awaiting_response = False

    async def _follow_job(self, job_id: str) -> Message | None:
        if self._closed:
            logger.info(f"Not following job {job_id}: submitter was cancelled")
            return None
        poller = JobPoller(job_id, self._client, self._session.conversation, self._config)
        self._pollers[job_id] = poller
        try:
            return await poller.run()
        finally:
            self._pollers.pop(job_id, None)

    def cancel(self, job_id: str) -> bool:
        """Cancel polling for ``job_id``. Unknown or finished jobs are ignored."""
        poller = self._pollers.get(job_id)
        if poller is None:
            return False
        poller.cancel()
        return True

    def cancel_all(self) -> None:
        """Cancel every active job and close the submitter, e.g. when the view is torn down."""
        self._closed = True
        for job_id in list(self._pollers):
            self.cancel(job_id)
