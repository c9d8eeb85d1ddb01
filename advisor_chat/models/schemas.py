import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from advisor_chat.errors import is_error_text


def new_message_id() -> str:
    """Generate an opaque message identifier."""
    return uuid.uuid4().hex


class Sender(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single turn in the conversation.

    Messages are immutable. A status placeholder is never edited; it is
    swapped out for a new terminal message by the conversation log.

    Attributes:
        id: Opaque identifier, stable for the message's lifetime.
        sender: Who wrote the message.
        text: Literal content before citation parsing.
        timestamp: Creation time.
        is_status: True only for the transient "work in progress" placeholder.
        job_id: Job the placeholder is waiting on (status messages only).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id)
    sender: Sender
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    is_status: bool = False
    job_id: str | None = None

    @property
    def is_error(self) -> bool:
        """Whether the text follows the error-message convention."""
        return self.sender == Sender.ASSISTANT and is_error_text(self.text)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(sender=Sender.USER, text=text)

    @classmethod
    def assistant(cls, text: str) -> "Message":
        return cls(sender=Sender.ASSISTANT, text=text)

    @classmethod
    def status(cls, text: str, job_id: str) -> "Message":
        return cls(sender=Sender.ASSISTANT, text=text, is_status=True, job_id=job_id)


class JobStatus(str, Enum):
    """Job states reported by the backend plus client-derived terminal states."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"
    # Client-only
    TIMEOUT = "TIMEOUT"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self not in (JobStatus.PENDING, JobStatus.PROCESSING)


class Job(BaseModel):
    """One outstanding asynchronous request.

    Attributes:
        job_id: Identifier returned by the backend at submission time.
        status: Last known state.
        attempt: Number of status checks performed so far.
        raw_response: Backend payload, present once the job is COMPLETE.
    """

    job_id: str
    status: JobStatus = JobStatus.PENDING
    attempt: int = Field(default=0, ge=0)
    raw_response: Any = None


class TextSegment(BaseModel):
    """Plain text between citation markers."""

    kind: Literal["text"] = "text"
    value: str

    @property
    def lines(self) -> list[str]:
        """Line break points inside the segment."""
        return self.value.split("\n")


class CitationSegment(BaseModel):
    """Inline source reference extracted from a ``[source: ...]`` marker."""

    kind: Literal["citation"] = "citation"
    value: str


ContentSegment = Annotated[TextSegment | CitationSegment, Field(discriminator="kind")]


class JobAccepted(BaseModel):
    """Body of a 202 response: the query was deferred to a background job."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(..., min_length=1, alias="jobId")


class ImmediateAnswer(BaseModel):
    """Body of a 200-class response: the answer payload, shape unknown."""

    payload: Any


class JobStatusResponse(BaseModel):
    """Status endpoint body. ``response`` is set only when status is COMPLETE.

    ``error`` and ``detail`` are free-form: backends send strings or objects.
    """

    model_config = ConfigDict(extra="ignore")

    status: str
    response: Any = None
    error: Any = None
    detail: Any = None


class EnvelopeKind(str, Enum):
    """Known backend answer envelope shapes."""

    BARE_STRING = "bare_string"
    DIRECT_TEXT = "direct_text"
    ENCODED_BODY = "encoded_body"
    WRAPPED_TEXT = "wrapped_text"
    UNKNOWN = "unknown"


class ResponseEnvelope(BaseModel):
    """A classified answer payload.

    Attributes:
        kind: Which envelope shape the payload matched.
        text: The canonical answer string extracted from it.
        path: Keys followed from the payload root to the text, if any.
    """

    kind: EnvelopeKind
    text: str
    path: tuple[str, ...] = ()
