"""
Client configuration.

ClientConfig accepts the same keys as the JSON configuration files used
by services (``base_url``, ``user_agent``, ``log``, ...), so a parsed JSON
object can be passed to ``ClientConfig.model_validate`` directly.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .headers import (
    CLIENT_APP_VERSION_HEADER,
    CLIENT_ID_HEADER,
    CLIENT_PLATFORM_HEADER,
    CLIENT_USER_AGENT_HEADER,
    SERVICE_NAME_HEADER,
)


class ClientConfig(BaseModel):
    """Settings for an HTTPClient."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    base_url: str = Field(
        default="",
        description="Prefix joined with every request path. Empty means paths are full URLs.",
    )
    user_agent: str = Field(default="", description="User-Agent header value.")
    platform: str = Field(default="", description="X-Client-Platform header value.")
    service_name: str = Field(default="", description="X-Service-Name header value.")
    app_version: str = Field(default="", description="X-Client-Version header value.")
    client_id: str = Field(default="", description="X-Client-ID header value.")
    log: bool = Field(
        default=False,
        description="Emit DEBUG trace records for requests, responses and stream lines.",
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request.",
    )
    connect_timeout: float = Field(default=10.0, gt=0, description="TCP connect and TLS handshake timeout (seconds).")
    read_timeout: float = Field(default=30.0, gt=0, description="Timeout for response heads and buffered bodies (seconds).")
    write_timeout: float = Field(default=30.0, gt=0, description="Timeout for each write (seconds).")
    stream_read_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum wait between chunks of a streamed body (seconds). None waits forever.",
    )
    channel_size: int = Field(
        default=64,
        ge=0,
        description="Capacity of each stream's event channel. 0 means unbounded.",
    )

    def default_headers(self) -> Dict[str, str]:
        """
        Headers sent with every request.

        Starts from ``headers``; each non-empty identity setting then
        overrides the header it maps to.
        """
        result = dict(self.headers)
        identity = {
            CLIENT_USER_AGENT_HEADER: self.user_agent,
            CLIENT_PLATFORM_HEADER: self.platform,
            CLIENT_APP_VERSION_HEADER: self.app_version,
            CLIENT_ID_HEADER: self.client_id,
            SERVICE_NAME_HEADER: self.service_name,
        }
        for name, value in identity.items():
            if value:
                result[name] = value
        return result
