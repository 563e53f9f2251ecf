"""
Camera Registry
===============

Process-wide set of known cameras, shared between the refresher (sole
writer) and the scheduler / status exporter (readers).

The registry holds one immutable RegistrySnapshot behind a single
reference. A refresh builds a brand-new snapshot and swaps the reference;
nothing is ever mutated in place, so readers observe either the state before
a swap or entirely after it. The lock guards only the reference.
"""
import threading
from dataclasses import dataclass, field, replace as dataclass_replace
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from ...domain.models import Camera
from ...utils.datetime_utils import utc_now


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable registry state at one instant."""
    cameras: Mapping[str, Camera] = field(default_factory=lambda: MappingProxyType({}))
    version: int = 0
    refreshed_at: Optional[datetime] = None
    # None until the first refresh attempt completes
    last_refresh_succeeded: Optional[bool] = None
    last_refresh_error: Optional[str] = None

    def camera_list(self) -> Tuple[Camera, ...]:
        return tuple(self.cameras.values())

    @property
    def size(self) -> int:
        return len(self.cameras)

    @property
    def enabled_count(self) -> int:
        return sum(1 for camera in self.cameras.values() if camera.enabled)


class CameraRegistry:
    """
    Thread-safe camera registry with atomic bulk replace.

    This component cannot fail: every operation is a reference read or a
    reference swap.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = RegistrySnapshot()

    def replace(self, cameras: Iterable[Camera]) -> RegistrySnapshot:
        """
        Atomically install a new complete camera set.

        Duplicate IDs collapse to the last occurrence. An empty iterable is a
        valid camera set and empties the registry.

        Returns:
            The installed snapshot
        """
        # Built outside the lock; only the swap is serialized.
        mapping = MappingProxyType({camera.id: camera for camera in cameras})
        refreshed_at = utc_now()
        with self._lock:
            new_state = RegistrySnapshot(
                cameras=mapping,
                version=self._state.version + 1,
                refreshed_at=refreshed_at,
                last_refresh_succeeded=True,
                last_refresh_error=None,
            )
            self._state = new_state
        return new_state

    def record_refresh_failure(self, error: str) -> RegistrySnapshot:
        """Flag the latest refresh as failed, keeping the current cameras."""
        with self._lock:
            new_state = dataclass_replace(
                self._state,
                last_refresh_succeeded=False,
                last_refresh_error=error,
            )
            self._state = new_state
        return new_state

    def current(self) -> RegistrySnapshot:
        """Return the whole immutable registry state in one read."""
        with self._lock:
            return self._state

    def snapshot(self) -> Tuple[Camera, ...]:
        """Return the camera set as observed at call time."""
        return self.current().camera_list()

    def size(self) -> int:
        """Count of cameras in the current snapshot."""
        return self.current().size

    def get(self, camera_id: str) -> Optional[Camera]:
        return self.current().cameras.get(camera_id)
