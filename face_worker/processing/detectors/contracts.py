"""
Detector Contracts
------------------

Defines the interface the scheduler relies on. The scheduler does not inspect
the detection algorithm; it only requires this shape.
"""

from typing import Optional, Protocol

from ...domain.models import Camera, DetectionResult


class Detector(Protocol):
    """
    Protocol defining what a face detector looks like.

    Implementations may block (e.g. while reading a live stream); the
    scheduler isolates every call on a worker thread. They must be safe to
    call from several threads at once.
    """

    name: str

    def evaluate(self, camera: Camera) -> Optional[DetectionResult]:
        """
        Evaluate one camera for faces.

        Args:
            camera: Camera to evaluate

        Returns:
            DetectionResult if at least one face was detected, None otherwise

        Raises:
            EvaluationError: If the camera could not be evaluated.
        """
        ...
