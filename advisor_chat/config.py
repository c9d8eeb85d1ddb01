"""Client configuration with environment variable loading.

Pydantic-based configuration for the advisor chat client. Endpoint paths and
the query field name vary between backend deployments, so they are settings
rather than constants.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_WELCOME_MESSAGE = (
    "I am the UK SME Tax & Accounting Advisor.\n\n"
    "Ask me anything about Corporation Tax, VAT, PAYE, or financial reporting "
    "standards. Let's get started."
)


class ClientConfig(BaseModel):
    """Configuration for the advisor backend client.

    Attributes:
        api_base_url: Base URL of the advisor API.
        submit_path: Path of the query submission endpoint.
        status_path: Path of the job status endpoint.
        query_field: JSON field carrying the query text.
        job_id_param: Query-string parameter naming the job on status checks.
        poll_interval_seconds: Delay before each status check.
        max_poll_attempts: Status checks allowed before a job times out.
        request_timeout_seconds: Per-request HTTP timeout.
        poll_transport_errors: "retry" keeps polling after a failed status check,
            "fail" ends the job immediately.
        status_message: Placeholder text shown while a job runs.
        welcome_message: First assistant message of a new session ("" for none).
    """

    # Environment values arrive as strings through default_factory
    model_config = ConfigDict(validate_default=True)

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("ADVISOR_API_BASE_URL", "http://localhost:8000"),
        description="Advisor API base URL",
    )
    submit_path: str = Field(default_factory=lambda: os.getenv("ADVISOR_SUBMIT_PATH", "/ask"))
    status_path: str = Field(default_factory=lambda: os.getenv("ADVISOR_STATUS_PATH", "/status"))
    query_field: str = Field(
        default_factory=lambda: os.getenv("ADVISOR_QUERY_FIELD", "query"),
        min_length=1,
        description="JSON field name for the query text",
    )
    job_id_param: str = Field(
        default_factory=lambda: os.getenv("ADVISOR_JOB_ID_PARAM", "jobId"),
        min_length=1,
    )
    poll_interval_seconds: float = Field(
        default_factory=lambda: os.getenv("ADVISOR_POLL_INTERVAL", "4.0"),
        ge=0.0,
        description="Seconds to wait before each job status check",
    )
    max_poll_attempts: int = Field(
        default_factory=lambda: os.getenv("ADVISOR_MAX_POLL_ATTEMPTS", "60"),
        ge=1,
        le=1000,
        description="Status checks before a pending job is abandoned",
    )
    request_timeout_seconds: float = Field(
        default_factory=lambda: os.getenv("ADVISOR_REQUEST_TIMEOUT", "30.0"),
        gt=0.0,
    )
    poll_transport_errors: Literal["retry", "fail"] = Field(
        default_factory=lambda: os.getenv("ADVISOR_POLL_TRANSPORT_ERRORS", "retry"),
        description="Policy for network errors while polling a job",
    )
    status_message: str = "Analyzing with HMRC & ACCA sources…"
    welcome_message: str = DEFAULT_WELCOME_MESSAGE

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                "API base URL must start with http:// or https://. Set ADVISOR_API_BASE_URL in .env"
            )
        return v.rstrip("/")

    @field_validator("submit_path", "status_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure endpoint paths start with a slash."""
        v = v.strip()
        return v if v.startswith("/") else f"/{v}"

    @property
    def submit_url(self) -> str:
        return f"{self.api_base_url}{self.submit_path}"

    @property
    def status_url(self) -> str:
        return f"{self.api_base_url}{self.status_path}"


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValidationError: If an environment value is invalid.
    """
    return ClientConfig()
