"""Job polling until a terminal outcome.

A JobPoller owns one Job. It posts a status placeholder, then repeatedly
waits ``poll_interval_seconds`` and checks the job's status:

    - COMPLETE: normalize the response and replace the placeholder with it
    - PENDING / PROCESSING: poll again until ``max_poll_attempts`` is used up
    - ERROR: replace the placeholder with the generic failure message
    - status check fails: retry or fail, per ``poll_transport_errors``

The attempt budget is the only timeout. Attempt count and status are kept
on ``self.job``.
"""

import asyncio
import logging
from typing import Protocol

from advisor_chat.chat.conversation import ConversationState
from advisor_chat.config import ClientConfig
from advisor_chat.errors import (
    GENERIC_FAILURE_MESSAGE,
    AdvisorClientError,
    JobFailed,
    JobTimeout,
    TransportFailure,
)
from advisor_chat.models.schemas import Job, JobStatus, JobStatusResponse, Message
from advisor_chat.parsing.normalizer import normalize_response

logger = logging.getLogger(__name__)

_FAILED_STATUSES = {"ERROR", "FAILED"}


class StatusSource(Protocol):
    async def get_job_status(self, job_id: str) -> JobStatusResponse: ...


class JobPoller:
    """Drives a single job to completion, failure or timeout."""

    def __init__(
        self,
        job_id: str,
        client: StatusSource,
        conversation: ConversationState,
        config: ClientConfig,
    ) -> None:
        self.job = Job(job_id=job_id)
        self._client = client
        self._conversation = conversation
        self._config = config
        self._cancelled = asyncio.Event()
        self._finished = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop polling. No conversation changes happen after this call."""
        if self._cancelled.is_set() or self._finished:
            return
        logger.info(f"Cancelling job {self.job.job_id}")
        self._cancelled.set()

    async def _pause(self) -> bool:
        """Wait out the poll interval. Returns True if cancelled meanwhile."""
        if self.cancelled:
            return True
        try:
            await asyncio.wait_for(
                self._cancelled.wait(), timeout=self._config.poll_interval_seconds
            )
        except TimeoutError:
            return self.cancelled
        return True

    def _apply_status(self, result: JobStatusResponse) -> bool:
        """Record a status check on the job. Returns True once COMPLETE.

        Raises:
            JobFailed: The backend reported an error for the job.
            TransportFailure: COMPLETE arrived without a response.
        """
        status = result.status.strip().upper()
        if status == JobStatus.COMPLETE.value:
            if result.response is None:
                raise TransportFailure(f"Job {self.job.job_id} completed without a response")
            self.job.status = JobStatus.COMPLETE
            self.job.raw_response = result.response
            return True
        if status in _FAILED_STATUSES:
            self.job.status = JobStatus.ERROR
            raise JobFailed(self.job.job_id, result.error or result.detail)
        if status == JobStatus.PROCESSING.value:
            self.job.status = JobStatus.PROCESSING
        elif status != JobStatus.PENDING.value:
            logger.warning(f"Unknown status {result.status!r} for job {self.job.job_id}")
        return False

    async def _poll_until_complete(self) -> bool:
        """Poll until the job completes. Returns False if cancelled first.

        Raises:
            JobTimeout: Attempt budget used up while still pending.
            JobFailed: Backend reported an error for the job.
            TransportFailure: Status check failed under the "fail" policy,
                or the last allowed check failed under "retry".
        """
        while True:
            if await self._pause():
                return False

            self.job.attempt += 1
            logger.debug(
                f"Checking job {self.job.job_id} "
                f"(attempt {self.job.attempt}/{self._config.max_poll_attempts})"
            )
            try:
                result = await self._client.get_job_status(self.job.job_id)
                if self.cancelled:
                    return False
                if self._apply_status(result):
                    return True
            except TransportFailure:
                if self.cancelled:
                    return False
                if (
                    self._config.poll_transport_errors == "fail"
                    or self.job.attempt >= self._config.max_poll_attempts
                ):
                    self.job.status = JobStatus.TRANSPORT_ERROR
                    raise
                logger.warning(f"Status check for job {self.job.job_id} failed, retrying")
                continue

            if self.job.attempt >= self._config.max_poll_attempts:
                self.job.status = JobStatus.TIMEOUT
                raise JobTimeout(self.job.job_id, self.job.attempt)

    async def run(self) -> Message | None:
        """Post the placeholder and poll the job to a terminal outcome.

        Returns:
            The terminal message that replaced the placeholder, or None if
            the poller was cancelled.
        """
        if self.cancelled:
            return None
        self._conversation.append(Message.status(self._config.status_message, self.job.job_id))

        try:
            completed = await self._poll_until_complete()
        except AdvisorClientError as e:
            logger.warning(f"Job {self.job.job_id} ended as {self.job.status.value}: {e}")
            text = GENERIC_FAILURE_MESSAGE
        else:
            if not completed:
                self.job.status = JobStatus.CANCELLED
                return None
            text = normalize_response(self.job.raw_response)
            logger.info(f"Job {self.job.job_id} completed after {self.job.attempt} checks")

        return self._finish(text)

    def _finish(self, text: str) -> Message | None:
        if self._finished or self.cancelled:
            return None
        self._finished = True
        return self._conversation.resolve_status(self.job.job_id, text)
