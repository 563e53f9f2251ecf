"""
Detector factory
----------------

Creates the configured detector:
- DETECTOR_MODE "simulated" → SimulatedDetector (seeded from DETECTOR_SEED)
- DETECTOR_MODE "opencv" → OpenCVFaceDetector
"""

from ...core.config import Settings
from .contracts import Detector
from .simulated_detector import SimulatedDetector


def create_detector(settings: Settings) -> Detector:
    """
    Build the detector selected by settings.detector_mode.

    Raises:
        ValueError: If the mode is unknown.
    """
    mode = settings.detector_mode
    if mode == "simulated":
        return SimulatedDetector(seed=settings.detector_seed)
    if mode == "opencv":
        # Imported here so the simulated mode does not load OpenCV.
        from .opencv_detector import OpenCVFaceDetector

        return OpenCVFaceDetector(timeout_seconds=settings.evaluation_timeout_seconds)
    raise ValueError(f"Unknown DETECTOR_MODE '{mode}' (expected 'simulated' or 'opencv')")
