"""
Registry Refresher
==================

Keeps the CameraRegistry eventually consistent with the backend camera list.
- Fetches once immediately at start
- Re-fetches on a fixed interval from a background thread
- A failed fetch is logged and leaves the registry untouched (retry on the
  next interval, never immediately)
"""
import logging
import threading
from typing import List, Optional, Protocol

from .camera_registry import CameraRegistry
from ...domain.exceptions import RegistryFetchError
from ...domain.models import Camera

logger = logging.getLogger(__name__)


class CameraSource(Protocol):
    """Anything that can fetch the full camera list (BackendClient in production)."""

    def fetch_cameras(self) -> List[Camera]:
        ...


class RegistryRefresher:
    """Sole writer of the CameraRegistry."""

    def __init__(
        self,
        registry: CameraRegistry,
        source: CameraSource,
        interval_seconds: float = 30.0,
    ):
        self.registry = registry
        self.source = source
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_once(self) -> bool:
        """
        Fetch the camera list and install it.

        Returns:
            True if a new camera set was installed, False if the fetch failed
        """
        try:
            cameras = self.source.fetch_cameras()
        except RegistryFetchError as e:
            logger.warning(f"Camera refresh failed, keeping previous registry: {e}")
            self.registry.record_refresh_failure(str(e))
            return False
        except Exception as e:
            logger.error(f"Unexpected error during camera refresh: {e}", exc_info=True)
            self.registry.record_refresh_failure(f"{type(e).__name__}: {e}")
            return False

        state = self.registry.replace(cameras)
        logger.info(
            f"Fetched {len(cameras)} cameras from backend. "
            f"Active cameras: {state.enabled_count}/{state.size} (version {state.version})"
        )
        return True

    def start(self) -> None:
        """Run the initial fetch, then start the periodic refresh thread."""
        if self.running:
            return

        self._stop_event.clear()
        self.refresh_once()

        self._thread = threading.Thread(
            target=self._refresh_loop,
            daemon=True,
            name="RegistryRefresher",
        )
        self._thread.start()
        logger.info(f"Registry refresher started (interval={self.interval_seconds}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the refresh thread."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None
        logger.info("Registry refresher stopped")

    def _refresh_loop(self) -> None:
        # wait() returns True once stop() is called
        while not self._stop_event.wait(self.interval_seconds):
            self.refresh_once()
