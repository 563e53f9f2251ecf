"""HTTP client factory for connection pooling."""
import httpx
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def create_http_client(
    base_url: str,
    timeout: float = 10.0,
    max_connections: int = 20,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Create a pooled HTTP client for backend communication.

    One client is shared by the refresher thread and every dispatch worker,
    which gives them:
    - Connection pooling
    - Keep-alive connections
    - Reduced overhead

    httpx.Client is safe to use from multiple threads.

    Args:
        base_url: Backend base URL; request paths are relative to it.
        timeout: Per-request timeout in seconds.
        max_connections: Upper bound on pooled connections.
        transport: Optional transport override (tests use httpx.MockTransport).

    Returns:
        Configured Client instance; the caller owns it and must close it.
    """
    client = httpx.Client(
        base_url=base_url,
        timeout=timeout,
        limits=httpx.Limits(
            max_keepalive_connections=max_connections,
            max_connections=max_connections,
            keepalive_expiry=30.0,
        ),
        headers={"Content-Type": "application/json"},
        transport=transport,
    )
    logger.info(f"Created HTTP client for backend at {base_url}")
    return client
