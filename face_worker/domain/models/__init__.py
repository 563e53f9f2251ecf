from .camera import Camera, FALLBACK_CAMERA
from .detection import DetectionEvent, DetectionResult

__all__ = ["Camera", "FALLBACK_CAMERA", "DetectionEvent", "DetectionResult"]
