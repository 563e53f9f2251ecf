"""
Detection Scheduler
===================

Fixed-tick orchestrator for the camera fleet.

On every tick:
1. Take a registry snapshot (fallback camera if it is empty)
2. Submit one evaluation per enabled camera to a bounded thread pool
3. Each evaluation that detects faces hands a DetectionEvent to the
   AlertDispatcher

The ticker thread only submits work, so a slow camera never delays other
cameras or the next tick. Overlapping ticks are allowed: evaluations share
nothing but the read-only snapshot.
"""
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..dispatch.alert_dispatcher import AlertDispatcher
from ..detectors.contracts import Detector
from ..registry.camera_registry import CameraRegistry
from ...domain.exceptions import EvaluationError
from ...domain.models import Camera, DetectionEvent, FALLBACK_CAMERA
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Scheduler state machine states."""
    IDLE = "IDLE"  # Waiting for the next tick
    TICKING = "TICKING"  # Reading the registry snapshot
    DISPATCHING = "DISPATCHING"  # Submitting evaluations for this tick


@dataclass(frozen=True)
class TickReport:
    """What one tick submitted. Futures resolve to the DetectionEvent or None."""
    tick_number: int
    submitted_camera_ids: Tuple[str, ...]
    skipped_camera_ids: Tuple[str, ...]
    futures: Tuple["Future[Optional[DetectionEvent]]", ...]
    used_fallback: bool = False


@dataclass(frozen=True)
class SchedulerStats:
    ticks: int = 0
    evaluations_submitted: int = 0
    evaluations_completed: int = 0
    evaluations_failed: int = 0
    evaluations_timed_out: int = 0
    evaluations_skipped: int = 0
    detections: int = 0


class DetectionScheduler:
    """
    Runs per-camera evaluations on a fixed cadence.

    Concurrency is bounded twice, independently of fleet size:
    - max_workers evaluation threads
    - max_pending evaluations queued or running; cameras beyond that are
      skipped for the tick and picked up again on the next one
    """

    def __init__(
        self,
        registry: CameraRegistry,
        detector: Detector,
        dispatcher: AlertDispatcher,
        tick_interval_seconds: float = 3.0,
        evaluation_timeout_seconds: float = 10.0,
        max_workers: int = 8,
        max_pending: int = 256,
        fallback_camera: Optional[Camera] = FALLBACK_CAMERA,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry
        self.detector = detector
        self.dispatcher = dispatcher
        self.tick_interval_seconds = tick_interval_seconds
        self.evaluation_timeout_seconds = evaluation_timeout_seconds
        self.fallback_camera = fallback_camera
        self._clock = clock

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="CameraEvaluation",
        )
        self._pending_slots = threading.BoundedSemaphore(max_pending)

        self._state = SchedulerState.IDLE
        self._state_lock = threading.Lock()
        self._tick_count = 0

        self._stats_lock = threading.Lock()
        self._counters: Dict[str, int] = {name: 0 for name in SchedulerStats.__dataclass_fields__}

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def state(self) -> SchedulerState:
        with self._state_lock:
            return self._state

    def start(self) -> None:
        """
        Start the ticker thread. The first tick fires one interval after start.

        The evaluation pool does not survive stop(), so a stopped scheduler
        cannot be started again.
        """
        if self.running:
            return
        if self._closed:
            logger.warning("Detection scheduler already stopped, ignoring start()")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._tick_loop,
            daemon=True,
            name="DetectionTicker",
        )
        self._thread.start()
        logger.info(
            f"Detection scheduler started (tick={self.tick_interval_seconds}s, "
            f"detector={getattr(self.detector, 'name', type(self.detector).__name__)})"
        )

    def stop(self, timeout: Optional[float] = 5.0, wait: bool = True) -> None:
        """Stop ticking and shut the evaluation pool down."""
        self._closed = True
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        logger.info("Detection scheduler stopped")

    def _tick_loop(self) -> None:
        while not self._stop_event.wait(self.tick_interval_seconds):
            try:
                self.run_tick()
            except Exception as e:
                logger.error(f"Detection tick failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def run_tick(self) -> TickReport:
        """
        Run one scheduling round.

        Returns as soon as every evaluation for this tick has been submitted;
        it never waits for evaluations or alert delivery to finish.
        """
        with self._state_lock:
            self._tick_count += 1
            tick_number = self._tick_count
        self._increment("ticks")

        self._set_state(SchedulerState.TICKING)
        submitted: List[str] = []
        skipped: List[str] = []
        futures: List[Future] = []
        try:
            cameras = self.registry.snapshot()
            used_fallback = False
            if not cameras and self.fallback_camera is not None:
                cameras = (self.fallback_camera,)
                used_fallback = True

            self._set_state(SchedulerState.DISPATCHING)
            for camera in cameras:
                if not camera.enabled:
                    continue
                future = self._submit(camera, tick_number)
                if future is None:
                    skipped.append(camera.id)
                    continue
                submitted.append(camera.id)
                futures.append(future)
        finally:
            self._set_state(SchedulerState.IDLE)

        if skipped:
            self._increment("evaluations_skipped", len(skipped))
            logger.warning(
                f"Tick {tick_number}: evaluation backlog full, skipped {len(skipped)} camera(s)"
            )
        logger.debug(f"Tick {tick_number}: submitted {len(submitted)} evaluation(s)")

        return TickReport(
            tick_number=tick_number,
            submitted_camera_ids=tuple(submitted),
            skipped_camera_ids=tuple(skipped),
            futures=tuple(futures),
            used_fallback=used_fallback,
        )

    def _submit(self, camera: Camera, tick_number: int) -> Optional[Future]:
        if not self._pending_slots.acquire(blocking=False):
            return None
        try:
            future = self._executor.submit(self._run_evaluation, camera, tick_number)
        except RuntimeError:
            # Pool already shut down
            self._pending_slots.release()
            return None
        self._increment("evaluations_submitted")
        return future

    # ------------------------------------------------------------------
    # Evaluation (runs on pool threads)
    # ------------------------------------------------------------------

    def _run_evaluation(self, camera: Camera, tick_number: int) -> Optional[DetectionEvent]:
        # Slot is freed before the future resolves
        try:
            return self._evaluate(camera, tick_number)
        finally:
            self._pending_slots.release()

    def _evaluate(self, camera: Camera, tick_number: int) -> Optional[DetectionEvent]:
        started = self._clock()
        try:
            result = self.detector.evaluate(camera)
        except EvaluationError as e:
            logger.warning(f"Tick {tick_number}: evaluation failed for camera {camera.id}: {e}")
            self._increment("evaluations_failed")
            return None
        except Exception as e:
            logger.error(
                f"Tick {tick_number}: unexpected error evaluating camera {camera.id}: {e}",
                exc_info=True,
            )
            self._increment("evaluations_failed")
            return None

        elapsed = self._clock() - started
        if elapsed > self.evaluation_timeout_seconds:
            logger.warning(
                f"Tick {tick_number}: evaluation for camera {camera.id} took {elapsed:.1f}s "
                f"(limit {self.evaluation_timeout_seconds}s), discarding result"
            )
            self._increment("evaluations_timed_out")
            return None

        self._increment("evaluations_completed")
        if result is None:
            return None

        try:
            event = DetectionEvent(
                camera_id=camera.id,
                confidence=result.confidence,
                face_count=result.face_count,
                timestamp=utc_now(),
            )
        except ValueError as e:
            logger.warning(f"Tick {tick_number}: invalid detection for camera {camera.id}: {e}")
            self._increment("evaluations_failed")
            return None

        self._increment("detections")
        logger.info(
            f"Face detected: Camera={camera.name or camera.id} ({camera.location}), "
            f"Faces={event.face_count}, Confidence={event.confidence:.2f}"
        )
        self.dispatcher.submit(event)
        return event

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def _set_state(self, state: SchedulerState) -> None:
        with self._state_lock:
            self._state = state

    def _increment(self, counter: str, amount: int = 1) -> None:
        with self._stats_lock:
            self._counters[counter] += amount

    def stats(self) -> SchedulerStats:
        with self._stats_lock:
            return SchedulerStats(**self._counters)
