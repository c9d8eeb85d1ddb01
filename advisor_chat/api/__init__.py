"""Backend access for the advisor chat client.

Wraps the advisor's query submission and job status endpoints behind an
async httpx client. Returns validated pydantic models and raises the
client's own error types.
"""

from advisor_chat.api.client import AdvisorAPIClient

__all__ = ["AdvisorAPIClient"]
