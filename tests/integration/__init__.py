"""Integration tests for the query lifecycle.

Drives the real HTTP client against a FastAPI stub of the advisor backend
served through httpx.ASGITransport. No network access required.
"""
