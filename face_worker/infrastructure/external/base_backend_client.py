# Standard library imports
import logging
from typing import Optional

# External package imports
import httpx

# Local application imports
from ...core.config import get_settings
from ..http_client_factory import create_http_client

logger = logging.getLogger(__name__)


class BaseBackendClient:
    """
    Base class for backend clients.

    Provides common initialization for base_url, timeout and the pooled
    HTTP client.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize base backend client.

        Args:
            base_url: Base URL for the backend. If None, reads from env.
            timeout: Request timeout in seconds. If None, reads from env.
            transport: Optional httpx transport override.
        """
        if base_url is None or timeout is None:
            settings = get_settings()
            base_url = base_url or settings.backend_url
            timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = create_http_client(self.base_url, timeout=self.timeout, transport=transport)

    def close(self) -> None:
        """Close pooled connections (call on shutdown)."""
        self._client.close()
        logger.info("Closed backend HTTP client")
