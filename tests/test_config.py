"""
Tests for client configuration.
"""

import json

import pytest
from pydantic import ValidationError

from stream_http_core import ClientConfig, HTTPClient


class TestClientConfig:
    """Parsing and defaults."""

    def test_defaults(self) -> None:
        config = ClientConfig()

        assert config.base_url == ""
        assert config.log is False
        assert config.connect_timeout == 10.0
        assert config.read_timeout == 30.0
        assert config.write_timeout == 30.0
        assert config.stream_read_timeout is None
        assert config.channel_size == 64
        assert config.default_headers() == {}

    def test_from_json_document(self) -> None:
        """A service's JSON config can be validated directly; unknown keys are ignored."""
        document = json.loads(
            """
            {
                "base_url": "https://api.example.com",
                "user_agent": "acme-cli/1.0.0 (linux 6.1; x86_64)",
                "platform": "cli",
                "app_version": "1.0.0",
                "log": true,
                "retries": 3
            }
            """
        )

        config = ClientConfig.model_validate(document)

        assert config.base_url == "https://api.example.com"
        assert config.platform == "cli"
        assert config.log is True
        assert not hasattr(config, "retries")

    def test_frozen(self) -> None:
        config = ClientConfig()
        with pytest.raises(ValidationError):
            config.base_url = "http://other"

    @pytest.mark.parametrize(
        "field, value",
        [("connect_timeout", 0), ("read_timeout", -1), ("stream_read_timeout", 0), ("channel_size", -1)],
    )
    def test_invalid_values(self, field, value) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(**{field: value})

    def test_unbounded_channel_allowed(self) -> None:
        assert ClientConfig(channel_size=0).channel_size == 0


class TestDefaultHeaders:
    """Identity settings become headers."""

    def test_identity_headers(self) -> None:
        config = ClientConfig(
            user_agent="acme/1",
            platform="service",
            service_name="billing",
            app_version="2.3.4",
            client_id="c-1",
        )

        assert config.default_headers() == {
            "User-Agent": "acme/1",
            "X-Client-Platform": "service",
            "X-Client-Version": "2.3.4",
            "X-Client-ID": "c-1",
            "X-Service-Name": "billing",
        }

    def test_identity_overrides_extra_headers(self) -> None:
        config = ClientConfig(
            user_agent="acme/1",
            headers={"User-Agent": "old", "X-Team": "core"},
        )

        assert config.default_headers() == {"User-Agent": "acme/1", "X-Team": "core"}

    def test_empty_identity_keeps_extra_headers(self) -> None:
        config = ClientConfig(headers={"X-Client-Platform": "web"})

        assert config.default_headers() == {"X-Client-Platform": "web"}

    def test_client_headers_are_a_copy(self) -> None:
        client = HTTPClient(ClientConfig(platform="cli"))

        headers = client.headers
        headers["X-Injected"] = "1"

        assert "X-Injected" not in client.headers
