# Standard library imports
from dataclasses import dataclass
from datetime import datetime


def _validate_confidence(confidence: float) -> None:
    if not 0.0 <= confidence <= 1.0:
        raise ValueError(f"Confidence must be within [0.0, 1.0], got {confidence}")


def _validate_face_count(face_count: int) -> None:
    if face_count < 1:
        raise ValueError(f"Face count must be at least 1, got {face_count}")


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one positive detector evaluation."""
    confidence: float
    face_count: int

    def __post_init__(self) -> None:
        _validate_confidence(self.confidence)
        _validate_face_count(self.face_count)


@dataclass(frozen=True)
class DetectionEvent:
    """
    A positive detection pending delivery to the backend.

    Events are transient: they live for a single evaluation-and-send cycle
    and are never persisted or deduplicated here.
    """
    camera_id: str
    confidence: float
    face_count: int
    timestamp: datetime

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.camera_id:
            raise ValueError("Camera ID is required")
        _validate_confidence(self.confidence)
        _validate_face_count(self.face_count)
        if self.timestamp.tzinfo is None:
            raise ValueError("Timestamp must be timezone-aware")
