"""
Simulated detector
------------------

Statistical stand-in for a vision pipeline. Detection odds depend on the
kind of stream locator; confidence and face count are drawn from an injected
random generator so behaviour is reproducible with a fixed seed.
"""
import random
import threading
from typing import Optional

from ...domain.models import Camera, DetectionResult

DEMO_STREAM_LOCATORS = frozenset({"test-camera", "demo-camera"})
UNKNOWN_STREAM_LOCATOR = "unknown"

DEMO_DETECTION_CHANCE = 0.6
STREAM_DETECTION_CHANCE = 0.3
UNKNOWN_DETECTION_CHANCE = 0.1

BASE_CONFIDENCE = 0.6
MAX_CONFIDENCE_VARIATION = 0.39
MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95
MAX_FACE_COUNT = 3


def detection_chance(stream_url: str) -> float:
    """Probability that one evaluation of a stream yields a detection."""
    if stream_url in DEMO_STREAM_LOCATORS:
        return DEMO_DETECTION_CHANCE
    if stream_url and stream_url != UNKNOWN_STREAM_LOCATOR:
        return STREAM_DETECTION_CHANCE
    return UNKNOWN_DETECTION_CHANCE


class SimulatedDetector:
    """Detector that simulates face detections without touching the stream."""

    name = "simulated"

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self._rng = rng if rng is not None else random.Random(seed)
        # random.Random is shared by every evaluation thread
        self._lock = threading.Lock()

    def evaluate(self, camera: Camera) -> Optional[DetectionResult]:
        chance = detection_chance(camera.stream_url)
        with self._lock:
            if self._rng.random() >= chance:
                return None
            face_count = self._rng.randint(1, MAX_FACE_COUNT)
            variation = self._rng.uniform(0.0, MAX_CONFIDENCE_VARIATION)

        confidence = min(max(BASE_CONFIDENCE + variation, MIN_CONFIDENCE), MAX_CONFIDENCE)
        return DetectionResult(confidence=round(confidence, 4), face_count=face_count)
