from .status_dto import (
    CameraResponse,
    DispatcherStatsResponse,
    HealthResponse,
    SchedulerStatsResponse,
    StatusResponse,
)

__all__ = [
    "CameraResponse",
    "DispatcherStatsResponse",
    "HealthResponse",
    "SchedulerStatsResponse",
    "StatusResponse",
]
