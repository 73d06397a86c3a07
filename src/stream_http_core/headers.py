"""
Identity and correlation header names.

Clients send the identity headers on every request so that services can
tell callers apart; the correlation headers tie related requests together.
"""

# Client software making the request, e.g. "acme-cli/1.0.0 (linux 6.1; x86_64)"
CLIENT_USER_AGENT_HEADER = "User-Agent"

# Kind of client: web, mobile, desktop, cli, service
CLIENT_PLATFORM_HEADER = "X-Client-Platform"

# Version of the calling app; read together with the platform
CLIENT_APP_VERSION_HEADER = "X-Client-Version"

# Stable identifier of one client install, kept across restarts
CLIENT_ID_HEADER = "X-Client-ID"

# Session or login context shared by related requests
CLIENT_SESSION_ID_HEADER = "X-Session-ID"

# Unique identifier of a single request, for tracing across services
CLIENT_REQUEST_ID_HEADER = "X-Request-ID"

# Originating service in server-to-server calls (jobs, cron, internal services)
SERVICE_NAME_HEADER = "X-Service-Name"


def user_agent(app: str, version: str, os: str, os_version: str, arch: str) -> str:
    """
    Format a User-Agent value.

    >>> user_agent("acme-cli", "1.0.0", "darwin", "23.1", "arm64")
    'acme-cli/1.0.0 (darwin 23.1; arm64)'
    """
    return f"{app}/{version} ({os} {os_version}; {arch})"
