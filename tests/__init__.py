"""Test package for the advisor chat client.

Unit tests cover each component in isolation; integration tests run the
whole submit-and-poll lifecycle against a stub backend.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end lifecycle tests over httpx.ASGITransport

Uses pytest-asyncio for coroutine tests and pytest-check for soft assertions.
"""
