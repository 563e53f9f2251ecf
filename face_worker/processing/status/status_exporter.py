"""Read-only worker status built from a single registry snapshot."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..registry.camera_registry import CameraRegistry
from ...domain.models import Camera
from ...utils.datetime_utils import utc_now


@dataclass(frozen=True)
class WorkerStatus:
    camera_count: int
    enabled_camera_count: int
    last_refresh_succeeded: Optional[bool]
    refreshed_at: Optional[datetime]
    registry_version: int
    timestamp: datetime


class StatusExporter:
    """
    Exposes registry size and refresh health to external callers.

    Only reads CameraRegistry; never waits on the scheduler or refresher.
    """

    def __init__(self, registry: CameraRegistry):
        self.registry = registry

    def snapshot(self) -> WorkerStatus:
        # One read so every field comes from the same install
        state = self.registry.current()
        return WorkerStatus(
            camera_count=state.size,
            enabled_camera_count=state.enabled_count,
            last_refresh_succeeded=state.last_refresh_succeeded,
            refreshed_at=state.refreshed_at,
            registry_version=state.version,
            timestamp=utc_now(),
        )

    def cameras(self) -> Tuple[Camera, ...]:
        return self.registry.snapshot()
