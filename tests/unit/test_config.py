"""Unit tests for ClientConfig."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from advisor_chat.config import ClientConfig, get_client_config


class TestClientConfig:
    """Tests for ClientConfig validation."""

    def test_defaults(self) -> None:
        """Config falls back to the documented defaults."""
        with patch.dict("os.environ", {}, clear=True):
            config = ClientConfig()

        assert config.api_base_url == "http://localhost:8000"
        assert config.query_field == "query"
        assert config.poll_interval_seconds == 4.0
        assert config.max_poll_attempts == 60
        assert config.poll_transport_errors == "retry"
        assert config.welcome_message

    def test_urls_built_from_base_and_paths(self) -> None:
        """Trailing slashes and missing leading slashes are normalized."""
        config = ClientConfig(
            api_base_url="https://api.example.com/prod/",
            submit_path="ask",
            status_path="/status",
        )

        assert config.submit_url == "https://api.example.com/prod/ask"
        assert config.status_url == "https://api.example.com/prod/status"

    def test_rejects_non_http_url(self) -> None:
        """Base URL must use http or https."""
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig(api_base_url="ftp://example.com")

        assert "http:// or https://" in str(exc_info.value)

    def test_rejects_zero_attempts(self) -> None:
        """At least one status check must be allowed."""
        with pytest.raises(ValidationError) as exc_info:
            ClientConfig(max_poll_attempts=0)

        assert "max_poll_attempts" in str(exc_info.value)

    def test_rejects_negative_interval(self) -> None:
        """Poll interval cannot be negative."""
        with pytest.raises(ValidationError):
            ClientConfig(poll_interval_seconds=-1)

    def test_rejects_unknown_transport_policy(self) -> None:
        """Only retry and fail are valid polling transport policies."""
        with pytest.raises(ValidationError):
            ClientConfig(poll_transport_errors="ignore")

    def test_rejects_empty_query_field(self) -> None:
        """The query field name cannot be empty."""
        with pytest.raises(ValidationError):
            ClientConfig(query_field="")


class TestGetClientConfig:
    """Tests for get_client_config factory function."""

    def test_reads_environment(self) -> None:
        """Environment variables override defaults."""
        env = {
            "ADVISOR_API_BASE_URL": "https://advisor.example.com",
            "ADVISOR_QUERY_FIELD": "inputText",
            "ADVISOR_POLL_INTERVAL": "5",
            "ADVISOR_MAX_POLL_ATTEMPTS": "15",
            "ADVISOR_POLL_TRANSPORT_ERRORS": "fail",
        }
        with patch.dict("os.environ", env, clear=True):
            config = get_client_config()

        assert config.api_base_url == "https://advisor.example.com"
        assert config.query_field == "inputText"
        assert config.poll_interval_seconds == 5.0
        assert config.max_poll_attempts == 15
        assert config.poll_transport_errors == "fail"

    def test_invalid_environment_raises(self) -> None:
        """A malformed URL in the environment fails validation."""
        with (
            patch.dict("os.environ", {"ADVISOR_API_BASE_URL": "localhost"}, clear=True),
            pytest.raises(ValidationError),
        ):
            get_client_config()
