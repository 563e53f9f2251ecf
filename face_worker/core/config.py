# Standard library imports
import logging
import os
from typing import Final, Optional

logger = logging.getLogger(__name__)


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _get_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class Settings:
    """
    Worker settings loaded from environment variables.

    This class centralizes all configuration settings for the worker.
    All settings are loaded from environment variables with sensible defaults.

    Raises:
        ValueError: If a numeric setting is not positive, or if the refresh
            interval is smaller than the tick interval.
    """

    def __init__(self) -> None:
        # Backend Configuration
        self.backend_url: Final[str] = os.getenv("BACKEND_URL", "http://localhost:3001").rstrip("/")
        self.http_timeout_seconds: Final[float] = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

        # Status API Configuration
        self.host: Final[str] = os.getenv("HOST", "0.0.0.0")
        self.port: Final[int] = int(os.getenv("PORT", "8080"))
        self.service_name: Final[str] = os.getenv("SERVICE_NAME", "face-alert-worker")

        # Scheduling Configuration
        self.refresh_interval_seconds: Final[float] = float(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))
        self.tick_interval_seconds: Final[float] = float(os.getenv("TICK_INTERVAL_SECONDS", "3"))
        self.evaluation_timeout_seconds: Final[float] = float(os.getenv("EVALUATION_TIMEOUT_SECONDS", "10"))
        self.max_evaluation_workers: Final[int] = int(os.getenv("MAX_EVALUATION_WORKERS", "8"))
        self.max_pending_evaluations: Final[int] = int(os.getenv("MAX_PENDING_EVALUATIONS", "256"))
        self.max_dispatch_workers: Final[int] = int(os.getenv("MAX_DISPATCH_WORKERS", "4"))
        self.max_pending_alerts: Final[int] = int(os.getenv("MAX_PENDING_ALERTS", "64"))
        self.fallback_camera_enabled: Final[bool] = _get_bool("FALLBACK_CAMERA_ENABLED", "true")

        # Detector Configuration
        self.detector_mode: Final[str] = os.getenv("DETECTOR_MODE", "simulated").strip().lower()
        self.detector_seed: Final[Optional[int]] = _get_optional_int("DETECTOR_SEED")

        # Logging
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()

        self._validate()

    def _validate(self) -> None:
        positive = {
            "HTTP_TIMEOUT_SECONDS": self.http_timeout_seconds,
            "REFRESH_INTERVAL_SECONDS": self.refresh_interval_seconds,
            "TICK_INTERVAL_SECONDS": self.tick_interval_seconds,
            "EVALUATION_TIMEOUT_SECONDS": self.evaluation_timeout_seconds,
            "MAX_EVALUATION_WORKERS": self.max_evaluation_workers,
            "MAX_PENDING_EVALUATIONS": self.max_pending_evaluations,
            "MAX_DISPATCH_WORKERS": self.max_dispatch_workers,
            "MAX_PENDING_ALERTS": self.max_pending_alerts,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.refresh_interval_seconds < self.tick_interval_seconds:
            raise ValueError(
                f"REFRESH_INTERVAL_SECONDS ({self.refresh_interval_seconds}) must not be "
                f"smaller than TICK_INTERVAL_SECONDS ({self.tick_interval_seconds})"
            )

        ratio = self.refresh_interval_seconds / self.tick_interval_seconds
        if abs(ratio - round(ratio)) > 1e-9:
            logger.warning(
                f"Refresh interval {self.refresh_interval_seconds}s is not a multiple of "
                f"tick interval {self.tick_interval_seconds}s"
            )


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get worker settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
