from .contracts import Detector
from .factory import create_detector
from .simulated_detector import SimulatedDetector

__all__ = ["Detector", "create_detector", "SimulatedDetector"]
