# Standard library imports
import logging
from typing import Any, Dict, List

# External package imports
import httpx

# Local application imports
from .base_backend_client import BaseBackendClient
from ...domain.constants import AlertFields, CameraFields
from ...domain.exceptions import DispatchError, RegistryFetchError
from ...domain.models import Camera

logger = logging.getLogger(__name__)

CAMERAS_PATH = "/api/cameras"
ALERTS_PATH = "/api/alerts"


def _optional_str(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise RegistryFetchError(f"Camera field '{key}' must be a string, got {type(value).__name__}")
    return value


def parse_camera_list(payload: Any) -> List[Camera]:
    """
    Convert the backend camera payload into Camera values.

    The payload must be a JSON array of objects, each with a non-empty
    string ``id``. Any violation rejects the whole payload so that a refresh
    never partially applies.

    Raises:
        RegistryFetchError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, list):
        raise RegistryFetchError(
            f"Expected a JSON array of cameras, got {type(payload).__name__}"
        )

    cameras: List[Camera] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise RegistryFetchError(f"Camera entry {index} is not an object")

        camera_id = item.get(CameraFields.ID)
        if not isinstance(camera_id, str) or not camera_id.strip():
            raise RegistryFetchError(f"Camera entry {index} has no valid '{CameraFields.ID}'")

        stream_key = CameraFields.STREAM_URL if CameraFields.STREAM_URL in item else CameraFields.STREAM_URL_ALIAS
        enabled = item.get(CameraFields.IS_ENABLED, False)
        if not isinstance(enabled, bool):
            raise RegistryFetchError(
                f"Camera '{camera_id}' field '{CameraFields.IS_ENABLED}' must be a boolean"
            )

        cameras.append(
            Camera(
                id=camera_id,
                name=_optional_str(item, CameraFields.NAME),
                stream_url=_optional_str(item, stream_key),
                enabled=enabled,
                location=_optional_str(item, CameraFields.LOCATION),
            )
        )
    return cameras


class BackendClient(BaseBackendClient):
    """
    HTTP client for the backend camera and alert endpoints.

    Both calls are blocking and are made from worker threads (refresher and
    dispatch pool), never from the status API event loop.
    """

    def fetch_cameras(self) -> List[Camera]:
        """
        Fetch the full camera list from the backend.

        Returns:
            List of Camera values (possibly empty)

        Raises:
            RegistryFetchError: On transport failure, non-2xx status, invalid
                JSON or an unexpected payload shape.
        """
        try:
            response = self._client.get(CAMERAS_PATH)
        except httpx.TimeoutException as e:
            raise RegistryFetchError(f"Timeout fetching cameras from {self.base_url}: {e}") from e
        except httpx.HTTPError as e:
            raise RegistryFetchError(f"Cannot fetch cameras from {self.base_url}: {e}") from e

        if not response.is_success:
            raise RegistryFetchError(
                f"Backend returned status {response.status_code} for {CAMERAS_PATH}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryFetchError(
                f"Cannot decode cameras: {e}", status_code=response.status_code
            ) from e

        return parse_camera_list(payload)

    def post_alert(self, payload: Dict[str, Any]) -> int:
        """
        Submit one serialized alert to the backend.

        Args:
            payload: JSON-ready alert body

        Returns:
            HTTP status code of the (successful) acknowledgment

        Raises:
            DispatchError: On transport failure or non-2xx status.
        """
        camera_id = payload.get(AlertFields.CAMERA_ID)
        try:
            response = self._client.post(ALERTS_PATH, json=payload)
        except httpx.TimeoutException as e:
            raise DispatchError(f"Timeout sending alert: {e}", camera_id=camera_id) from e
        except httpx.HTTPError as e:
            raise DispatchError(f"Failed to send alert: {e}", camera_id=camera_id) from e

        if not response.is_success:
            raise DispatchError(
                f"Alert response status: {response.status_code} - {response.text}",
                camera_id=camera_id,
                status_code=response.status_code,
            )
        return response.status_code
