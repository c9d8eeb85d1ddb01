"""Error taxonomy for the advisor client and the user-visible error convention.

Every failure is converted into an assistant message whose text starts with
``ERROR_PREFIX``. Detection is done by prefix, never by a stored flag.
"""

from typing import Any

ERROR_PREFIX = "A technical error occurred"
GENERIC_FAILURE_MESSAGE = f"{ERROR_PREFIX}. Please try again."


class AdvisorClientError(Exception):
    """Base class for all failures handled by the chat client."""

    pass


class SubmissionRejected(AdvisorClientError):
    """Backend answered the query with a non-success, non-accepted status."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class TransportFailure(AdvisorClientError):
    """Network error or undecodable body while talking to the backend."""

    pass


class JobTimeout(AdvisorClientError):
    """Attempt budget exhausted while the job was still pending."""

    def __init__(self, job_id: str, attempts: int) -> None:
        super().__init__(f"Job {job_id} still pending after {attempts} status checks")
        self.job_id = job_id
        self.attempts = attempts


class JobFailed(AdvisorClientError):
    """Backend reported an error status for the job."""

    def __init__(self, job_id: str, detail: Any = None) -> None:
        if detail is not None and not isinstance(detail, str):
            detail = str(detail)
        super().__init__(f"Job {job_id} failed: {detail or 'no detail provided'}")
        self.job_id = job_id
        self.detail = detail


def format_error_message(detail: str) -> str:
    """Build the assistant message text for a failed submission."""
    detail = detail.strip()
    if not detail:
        return GENERIC_FAILURE_MESSAGE
    return f"{ERROR_PREFIX}: {detail}"


def is_error_text(text: str) -> bool:
    """Return True if ``text`` follows the error-message convention."""
    return text.startswith(ERROR_PREFIX)
