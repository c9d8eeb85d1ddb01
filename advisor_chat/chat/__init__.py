"""Conversation handling for the advisor chat client.

Responsibilities:
    - Append-only conversation log with in-place status placeholder swaps
    - Single-flight query submission guarded per chat session
    - Job polling under a bounded attempt budget, with cancellation

Single-threaded and asyncio-driven. Work only suspends on HTTP calls and
between status checks.
"""

from advisor_chat.chat.conversation import ChatSession, ConversationState
from advisor_chat.chat.poller import JobPoller
from advisor_chat.chat.submitter import RequestSubmitter

__all__ = ["ChatSession", "ConversationState", "JobPoller", "RequestSubmitter"]
