"""
Alert Dispatcher
================

Formats detection events and delivers them to the backend alert endpoint.

Delivery is best-effort and at-most-once: a failed alert is logged and
dropped. There is no retry queue and no backpressure towards the scheduler;
the dispatch backlog is capped and overflow is dropped.
"""
import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from ...domain.constants import AlertFields
from ...domain.exceptions import DispatchError
from ...domain.models import DetectionEvent
from ...utils.datetime_utils import to_rfc3339

logger = logging.getLogger(__name__)


class AlertSink(Protocol):
    """Anything that can post a serialized alert (BackendClient in production)."""

    def post_alert(self, payload: Dict[str, Any]) -> int:
        ...


@dataclass(frozen=True)
class AlertAck:
    """Backend acknowledgment of one delivered alert."""
    camera_id: str
    status_code: int


@dataclass(frozen=True)
class DispatcherStats:
    sent: int
    failed: int


def serialize_event(event: DetectionEvent) -> Dict[str, Any]:
    """Build the JSON body for ``POST /api/alerts``."""
    return {
        AlertFields.CAMERA_ID: event.camera_id,
        AlertFields.CONFIDENCE: float(event.confidence),
        AlertFields.FACE_COUNT: int(event.face_count),
        AlertFields.TIMESTAMP: to_rfc3339(event.timestamp),
    }


class AlertDispatcher:
    """
    Sends detection events to the backend.

    dispatch() delivers synchronously and raises DispatchError on failure.
    submit() hands the event to a bounded thread pool and returns at once;
    failures on that path are logged and counted, never raised. At most
    max_pending alerts may be queued or in flight; events beyond that are
    dropped and counted as failed.
    """

    def __init__(self, sink: AlertSink, max_workers: int = 4, max_pending: int = 64):
        self.sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="AlertDispatch",
        )
        self._pending_slots = threading.BoundedSemaphore(max_pending)
        self._stats_lock = threading.Lock()
        self._sent = 0
        self._failed = 0

    def dispatch(self, event: DetectionEvent) -> AlertAck:
        """
        Serialize and deliver one event.

        Returns:
            AlertAck for a 2xx acknowledgment

        Raises:
            DispatchError: On serialization error, transport failure or
                non-2xx acknowledgment.
        """
        try:
            payload = serialize_event(event)
            json.dumps(payload, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise DispatchError(f"Cannot serialize alert: {e}", camera_id=event.camera_id) from e

        status_code = self.sink.post_alert(payload)
        logger.info(
            f"Alert sent: Camera={event.camera_id}, Faces={event.face_count}, "
            f"Confidence={event.confidence:.2f}"
        )
        return AlertAck(camera_id=event.camera_id, status_code=status_code)

    def submit(self, event: DetectionEvent) -> Optional["Future[Optional[AlertAck]]"]:
        """
        Fire-and-forget delivery on the dispatch pool.

        Returns:
            Future resolving to the AlertAck, or to None if delivery failed.
            None if the dispatcher is already shut down or the alert backlog
            is full (the event is dropped).
        """
        if not self._pending_slots.acquire(blocking=False):
            logger.warning(f"Alert backlog full, dropping alert for camera {event.camera_id}")
            self._record(failed=True)
            return None
        try:
            return self._executor.submit(self._deliver, event)
        except RuntimeError:
            self._pending_slots.release()
            logger.warning(f"Dispatcher is shut down, dropping alert for camera {event.camera_id}")
            self._record(failed=True)
            return None

    def _deliver(self, event: DetectionEvent) -> Optional[AlertAck]:
        # Slot is freed before the future resolves
        try:
            ack = self.dispatch(event)
        except DispatchError as e:
            logger.warning(f"Dropping alert for camera {event.camera_id}: {e}")
            self._record(failed=True)
            return None
        except Exception as e:
            logger.error(
                f"Unexpected error sending alert for camera {event.camera_id}: {e}",
                exc_info=True,
            )
            self._record(failed=True)
            return None
        finally:
            self._pending_slots.release()
        self._record(failed=False)
        return ack

    def _record(self, failed: bool) -> None:
        with self._stats_lock:
            if failed:
                self._failed += 1
            else:
                self._sent += 1

    def stats(self) -> DispatcherStats:
        with self._stats_lock:
            return DispatcherStats(sent=self._sent, failed=self._failed)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting alerts; optionally wait for in-flight deliveries."""
        self._executor.shutdown(wait=wait)
        logger.info("Alert dispatcher stopped")
