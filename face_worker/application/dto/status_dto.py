from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base DTO serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(CamelModel):
    """DTO for health response"""
    status: str
    service: str
    detector: str
    camera_count: int
    running: bool
    timestamp: str


class SchedulerStatsResponse(CamelModel):
    """DTO for scheduler counters"""
    state: str
    ticks: int
    evaluations_submitted: int
    evaluations_completed: int
    evaluations_failed: int
    evaluations_timed_out: int
    evaluations_skipped: int
    detections: int


class DispatcherStatsResponse(CamelModel):
    """DTO for dispatcher counters"""
    sent: int
    failed: int


class StatusResponse(CamelModel):
    """DTO for detailed worker status"""
    backend_url: str
    total_cameras: int
    active_cameras: int
    last_refresh_succeeded: Optional[bool] = None
    refreshed_at: Optional[str] = None
    registry_version: int
    detector: str
    scheduler: SchedulerStatsResponse
    dispatcher: DispatcherStatsResponse
    timestamp: str


class CameraResponse(CamelModel):
    """DTO for camera response, using the backend wire names"""
    id: str
    name: str
    rtsp_url: str = ""
    is_enabled: bool = False
    location: str = ""
