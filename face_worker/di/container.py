# Standard library imports
import logging
from typing import Optional

# Local application imports
from ..core.config import Settings, get_settings
from ..domain.models import FALLBACK_CAMERA
from ..infrastructure.external import BackendClient
from ..processing.detectors import Detector, create_detector
from ..processing.dispatch import AlertDispatcher
from ..processing.dispatch.alert_dispatcher import AlertSink
from ..processing.registry import CameraRegistry, RegistryRefresher
from ..processing.registry.refresher import CameraSource
from ..processing.scheduler import DetectionScheduler
from ..processing.status import StatusExporter

logger = logging.getLogger(__name__)


class WorkerContainer:
    """
    Explicit context object that owns every worker component.

    Components receive their collaborators at construction instead of
    reaching for module-level state, so several independent containers can
    coexist (e.g. in tests).

    Startup order: refresher (initial fetch) → scheduler.
    Shutdown order: scheduler → dispatcher → refresher → HTTP client.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend_client: Optional[BackendClient] = None,
        detector: Optional[Detector] = None,
        camera_source: Optional[CameraSource] = None,
        alert_sink: Optional[AlertSink] = None,
    ) -> None:
        self.settings = settings or get_settings()
        if backend_client is None and (camera_source is None or alert_sink is None):
            backend_client = BackendClient(
                base_url=self.settings.backend_url,
                timeout=self.settings.http_timeout_seconds,
            )
        self.backend_client = backend_client

        self.registry = CameraRegistry()
        self.detector = detector or create_detector(self.settings)
        self.dispatcher = AlertDispatcher(
            sink=alert_sink or backend_client,
            max_workers=self.settings.max_dispatch_workers,
            max_pending=self.settings.max_pending_alerts,
        )
        self.refresher = RegistryRefresher(
            registry=self.registry,
            source=camera_source or backend_client,
            interval_seconds=self.settings.refresh_interval_seconds,
        )
        self.scheduler = DetectionScheduler(
            registry=self.registry,
            detector=self.detector,
            dispatcher=self.dispatcher,
            tick_interval_seconds=self.settings.tick_interval_seconds,
            evaluation_timeout_seconds=self.settings.evaluation_timeout_seconds,
            max_workers=self.settings.max_evaluation_workers,
            max_pending=self.settings.max_pending_evaluations,
            fallback_camera=FALLBACK_CAMERA if self.settings.fallback_camera_enabled else None,
        )
        self.status_exporter = StatusExporter(self.registry)
        self._started = False
        self._closed = False

    @property
    def running(self) -> bool:
        return self._started

    def start(self) -> None:
        """Run the initial camera fetch and start the background threads."""
        if self._started or self._closed:
            return
        logger.info(
            f"Starting worker: backend={self.settings.backend_url}, "
            f"detector={self.detector.name}, refresh={self.settings.refresh_interval_seconds}s, "
            f"tick={self.settings.tick_interval_seconds}s"
        )
        self.refresher.start()
        self.scheduler.start()
        self._started = True

    def stop(self) -> None:
        """Stop background threads and release HTTP connections. Safe to call once or more."""
        if self._closed:
            return
        self._closed = True
        self._started = False
        self.scheduler.stop()
        self.dispatcher.shutdown(wait=True)
        self.refresher.stop()
        if self.backend_client is not None:
            self.backend_client.close()
        logger.info("Worker stopped")
