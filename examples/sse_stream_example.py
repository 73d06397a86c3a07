"""
Server-Sent Events example using stream_http_core.

This example demonstrates a plain JSON call followed by a streamed
call whose events are printed as they arrive.
"""

import asyncio
import logging
import platform
import sys

from stream_http_core import (
    ClientConfig,
    ClientRequest,
    EventKind,
    HTTPClient,
    HTTPCoreError,
    StreamEnded,
    to_json,
    user_agent,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_client(base_url: str) -> HTTPClient:
    config = ClientConfig(
        base_url=base_url,
        user_agent=user_agent(
            "sse-example", "0.1.0", sys.platform, platform.release(), platform.machine()
        ),
        platform="cli",
        app_version="0.1.0",
        stream_read_timeout=60,
    )
    return HTTPClient(config)


async def plain_request(client: HTTPClient):
    """Demonstrate a buffered GET request."""
    logger.info("Making plain GET request...")

    response = await client.get(ClientRequest(path="/get", query={"source": "example"}))
    logger.info(f"Response status: {response.status_code}")
    logger.info(f"Response body length: {len(response.body)} bytes")


async def streamed_request(client: HTTPClient):
    """Demonstrate reading a stream until its terminal event."""
    logger.info("Opening event stream...")

    body = to_json({"prompt": "hello", "stream": True})
    stream = await client.post_stream(ClientRequest(path="/stream", body=body))

    async with stream:
        async for event in stream:
            if event.kind is EventKind.DATA:
                print(event.text)
            elif event.is_terminal:
                if event.error is None:
                    logger.info("Stream finished with [DONE]")
                elif isinstance(event.error, StreamEnded):
                    logger.info("Server closed the stream")
                else:
                    logger.error(f"Stream failed: {event.error}")


async def main():
    """Run all examples."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080"
    client = build_client(base_url)

    try:
        await plain_request(client)
        print()

        await streamed_request(client)

    except HTTPCoreError as e:
        logger.error(f"Example failed: {e}")
        raise

    logger.info("All examples completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
