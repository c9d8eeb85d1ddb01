"""Pydantic models for conversation state, jobs and backend payloads.

Models:
    - Message: One turn in the conversation
    - Job / JobStatus: Deferred backend work being polled
    - TextSegment / CitationSegment: Parsed message content
    - JobAccepted / ImmediateAnswer / JobStatusResponse: Backend wire shapes
    - ResponseEnvelope: Classified answer payload
"""

from advisor_chat.models.schemas import (
    CitationSegment,
    ContentSegment,
    EnvelopeKind,
    ImmediateAnswer,
    Job,
    JobAccepted,
    JobStatus,
    JobStatusResponse,
    Message,
    ResponseEnvelope,
    Sender,
    TextSegment,
)

__all__ = [
    "CitationSegment",
    "ContentSegment",
    "EnvelopeKind",
    "ImmediateAnswer",
    "Job",
    "JobAccepted",
    "JobStatus",
    "JobStatusResponse",
    "Message",
    "ResponseEnvelope",
    "Sender",
    "TextSegment",
]
