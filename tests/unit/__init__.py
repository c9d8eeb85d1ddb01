"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Response normalization and citation extraction
    - chat/: Conversation log, job polling and request submission
    - api/: HTTP client behavior against httpx.MockTransport
    - ui/: HTML rendering helpers

Backends are replaced by ScriptedBackend; poll intervals are zero.
"""
