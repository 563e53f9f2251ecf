"""
Unit tests for BackendClient using httpx.MockTransport (no real network).
"""
import json

import httpx
import pytest

from face_worker.domain.exceptions import DispatchError, RegistryFetchError
from face_worker.infrastructure.external.backend_client import BackendClient, parse_camera_list


def _client(handler) -> BackendClient:
    return BackendClient(
        base_url="http://backend.test",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


CAMERA_PAYLOAD = [
    {
        "id": "cam1",
        "name": "Front Door",
        "rtspUrl": "rtsp://10.0.0.5/stream",
        "isEnabled": True,
        "location": "Entrance",
    },
    {
        "id": "cam2",
        "name": "Garage",
        "rtspUrl": "",
        "isEnabled": False,
        "location": "Garage",
    },
]


class TestParseCameraList:
    """Tests for parse_camera_list"""

    def test_parses_fields(self):
        cameras = parse_camera_list(CAMERA_PAYLOAD)
        assert [c.id for c in cameras] == ["cam1", "cam2"]
        assert cameras[0].name == "Front Door"
        assert cameras[0].stream_url == "rtsp://10.0.0.5/stream"
        assert cameras[0].enabled is True
        assert cameras[0].location == "Entrance"
        assert cameras[1].enabled is False

    def test_missing_optional_fields_default(self):
        cameras = parse_camera_list([{"id": "cam1"}])
        assert cameras[0].name == ""
        assert cameras[0].stream_url == ""
        assert cameras[0].enabled is False

    def test_stream_url_alias(self):
        cameras = parse_camera_list([{"id": "cam1", "streamUrl": "test-camera"}])
        assert cameras[0].stream_url == "test-camera"

    def test_empty_list(self):
        assert parse_camera_list([]) == []

    @pytest.mark.parametrize(
        "payload",
        [
            {"cameras": []},
            ["cam1"],
            [{"name": "no id"}],
            [{"id": ""}],
            [{"id": 42}],
            [{"id": "cam1", "isEnabled": "yes"}],
            [{"id": "cam1", "name": 7}],
        ],
    )
    def test_malformed_payload_raises(self, payload):
        with pytest.raises(RegistryFetchError):
            parse_camera_list(payload)


class TestFetchCameras:
    """Tests for GET /api/cameras"""

    def test_success(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/cameras"
            return httpx.Response(200, json=CAMERA_PAYLOAD)

        cameras = _client(handler).fetch_cameras()
        assert len(cameras) == 2

    def test_non_success_status_raises(self):
        client = _client(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(RegistryFetchError) as exc_info:
            client.fetch_cameras()
        assert exc_info.value.status_code == 500

    def test_invalid_json_raises(self):
        client = _client(lambda request: httpx.Response(200, content=b"not json"))
        with pytest.raises(RegistryFetchError, match="Cannot decode cameras"):
            client.fetch_cameras()

    def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RegistryFetchError, match="Cannot fetch cameras"):
            _client(handler).fetch_cameras()


class TestPostAlert:
    """Tests for POST /api/alerts"""

    def test_posts_payload(self):
        received = {}

        def handler(request: httpx.Request) -> httpx.Response:
            received["path"] = request.url.path
            received["body"] = json.loads(request.content)
            return httpx.Response(201, json={"ok": True})

        payload = {"cameraId": "cam1", "confidence": 0.95, "faceCount": 2, "timestamp": "2025-01-15T12:00:00Z"}
        status = _client(handler).post_alert(payload)
        assert status == 201
        assert received["path"] == "/api/alerts"
        assert received["body"] == payload

    def test_non_success_raises_dispatch_error(self):
        client = _client(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(DispatchError) as exc_info:
            client.post_alert({"cameraId": "cam1"})
        assert exc_info.value.status_code == 503
        assert exc_info.value.camera_id == "cam1"

    def test_timeout_raises_dispatch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(DispatchError, match="Timeout"):
            _client(handler).post_alert({"cameraId": "cam1"})
