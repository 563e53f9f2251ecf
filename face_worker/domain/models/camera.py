# Standard library imports
from dataclasses import dataclass


@dataclass(frozen=True)
class Camera:
    """
    Pure domain model for Camera entity - no external dependencies.

    Cameras are immutable: a registry refresh builds an entirely new set of
    Camera values instead of changing fields on existing ones.
    """
    id: str
    name: str = ""
    stream_url: str = ""
    enabled: bool = False
    location: str = ""

    def __post_init__(self) -> None:
        """Business validations"""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("Camera ID is required")


# Substituted by the scheduler when the registry is empty so the pipeline
# stays observably alive.
FALLBACK_CAMERA = Camera(
    id="demo-camera",
    name="Demo Camera",
    stream_url="demo-camera",
    enabled=True,
    location="Simulated Location",
)
