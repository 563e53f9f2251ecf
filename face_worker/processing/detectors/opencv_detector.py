"""
OpenCV face detector
--------------------

Grabs a single frame from the camera stream and runs OpenCV's Haar
frontal-face cascade on it. All image processing is delegated to OpenCV.
"""
import logging
import math
import threading
from typing import Optional, Tuple

import cv2
import numpy as np

from ...domain.exceptions import EvaluationError
from ...domain.models import Camera, DetectionResult

logger = logging.getLogger(__name__)

DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"


class OpenCVFaceDetector:
    """
    Detector backed by cv2.CascadeClassifier.

    CascadeClassifier instances are not thread-safe, so each evaluation
    thread lazily loads its own copy.
    """

    name = "opencv"

    def __init__(
        self,
        cascade_path: Optional[str] = None,
        timeout_seconds: float = 10.0,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: Tuple[int, int] = (40, 40),
    ):
        self.cascade_path = cascade_path or (cv2.data.haarcascades + DEFAULT_CASCADE)
        self.timeout_ms = int(timeout_seconds * 1000)
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size
        self._local = threading.local()

    def _classifier(self) -> "cv2.CascadeClassifier":
        classifier = getattr(self._local, "classifier", None)
        if classifier is None:
            classifier = cv2.CascadeClassifier(self.cascade_path)
            if classifier.empty():
                raise EvaluationError(f"Could not load face cascade from {self.cascade_path}")
            self._local.classifier = classifier
        return classifier

    def _read_frame(self, camera: Camera) -> np.ndarray:
        if not camera.stream_url:
            raise EvaluationError("Camera has no stream locator", camera_id=camera.id)

        capture = cv2.VideoCapture(
            camera.stream_url,
            cv2.CAP_ANY,
            [
                cv2.CAP_PROP_OPEN_TIMEOUT_MSEC, self.timeout_ms,
                cv2.CAP_PROP_READ_TIMEOUT_MSEC, self.timeout_ms,
            ],
        )
        try:
            if not capture.isOpened():
                raise EvaluationError(
                    f"Could not open stream {camera.stream_url}", camera_id=camera.id
                )
            ok, frame = capture.read()
            if not ok or frame is None:
                raise EvaluationError(
                    f"Could not read frame from {camera.stream_url}", camera_id=camera.id
                )
            return frame
        finally:
            capture.release()

    def evaluate(self, camera: Camera) -> Optional[DetectionResult]:
        frame = self._read_frame(camera)
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame

        faces, _reject_levels, level_weights = self._classifier().detectMultiScale3(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
            outputRejectLevels=True,
        )
        if len(faces) == 0:
            return None

        # Level weights are unbounded cascade scores; squash into [0, 1].
        best_weight = float(np.max(np.asarray(level_weights, dtype=float)))
        confidence = 1.0 / (1.0 + math.exp(-best_weight))
        logger.debug(f"Camera {camera.id}: {len(faces)} face(s), best weight {best_weight:.2f}")
        return DetectionResult(confidence=min(max(confidence, 0.0), 1.0), face_count=len(faces))
