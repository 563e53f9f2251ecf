from .camera_registry import CameraRegistry, RegistrySnapshot
from .refresher import RegistryRefresher

__all__ = ["CameraRegistry", "RegistrySnapshot", "RegistryRefresher"]
