# Standard library imports
from typing import List

# External package imports
from fastapi import APIRouter, Depends

# Local application imports
from ...application.dto.status_dto import (
    CameraResponse,
    DispatcherStatsResponse,
    HealthResponse,
    SchedulerStatsResponse,
    StatusResponse,
)
from ...di.container import WorkerContainer
from ...utils.datetime_utils import to_rfc3339
from .dependencies import get_worker_container


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    container: WorkerContainer = Depends(get_worker_container),
) -> HealthResponse:
    """
    Liveness and registry size.

    The camera count comes from a single registry snapshot, so it never
    reflects a half-applied refresh.
    """
    status = container.status_exporter.snapshot()
    return HealthResponse(
        status="healthy",
        service=container.settings.service_name,
        detector=container.detector.name,
        camera_count=status.camera_count,
        running=container.running,
        timestamp=to_rfc3339(status.timestamp),
    )


@router.get("/status", response_model=StatusResponse)
async def worker_status(
    container: WorkerContainer = Depends(get_worker_container),
) -> StatusResponse:
    """
    Detailed worker status: registry health plus scheduler and dispatcher counters.
    """
    status = container.status_exporter.snapshot()
    scheduler_stats = container.scheduler.stats()
    dispatcher_stats = container.dispatcher.stats()
    return StatusResponse(
        backend_url=container.settings.backend_url,
        total_cameras=status.camera_count,
        active_cameras=status.enabled_camera_count,
        last_refresh_succeeded=status.last_refresh_succeeded,
        refreshed_at=to_rfc3339(status.refreshed_at),
        registry_version=status.registry_version,
        detector=container.detector.name,
        scheduler=SchedulerStatsResponse(
            state=container.scheduler.state.value,
            ticks=scheduler_stats.ticks,
            evaluations_submitted=scheduler_stats.evaluations_submitted,
            evaluations_completed=scheduler_stats.evaluations_completed,
            evaluations_failed=scheduler_stats.evaluations_failed,
            evaluations_timed_out=scheduler_stats.evaluations_timed_out,
            evaluations_skipped=scheduler_stats.evaluations_skipped,
            detections=scheduler_stats.detections,
        ),
        dispatcher=DispatcherStatsResponse(
            sent=dispatcher_stats.sent,
            failed=dispatcher_stats.failed,
        ),
        timestamp=to_rfc3339(status.timestamp),
    )


@router.get("/cameras", response_model=List[CameraResponse])
async def list_cameras(
    container: WorkerContainer = Depends(get_worker_container),
) -> List[CameraResponse]:
    """List the cameras in the current registry snapshot."""
    return [
        CameraResponse(
            id=camera.id,
            name=camera.name,
            rtsp_url=camera.stream_url,
            is_enabled=camera.enabled,
            location=camera.location,
        )
        for camera in container.status_exporter.cameras()
    ]
