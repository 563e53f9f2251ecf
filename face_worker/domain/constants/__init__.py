"""Constants for domain model field names"""

from .camera_fields import CameraFields
from .alert_fields import AlertFields

__all__ = [
    "CameraFields",
    "AlertFields",
]
