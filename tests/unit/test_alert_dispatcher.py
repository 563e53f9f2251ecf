"""
Unit tests for AlertDispatcher (serialization and best-effort delivery).
"""
import json
import logging
import threading
from datetime import datetime, timezone

import httpx
import pytest

from face_worker.domain.exceptions import DispatchError
from face_worker.domain.models import DetectionEvent
from face_worker.infrastructure.external.backend_client import BackendClient
from face_worker.processing.dispatch import AlertDispatcher, serialize_event
from tests.fakes import RecordingSink


def _event(**overrides) -> DetectionEvent:
    fields = dict(
        camera_id="cam1",
        confidence=0.95,
        face_count=2,
        timestamp=datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return DetectionEvent(**fields)


class TestSerializeEvent:
    """Tests for serialize_event"""

    def test_wire_format(self):
        assert serialize_event(_event()) == {
            "cameraId": "cam1",
            "confidence": 0.95,
            "faceCount": 2,
            "timestamp": "2025-01-15T12:00:00Z",
        }


class TestDispatch:
    """Tests for synchronous dispatch()"""

    def test_success_returns_ack(self):
        sink = RecordingSink(status_code=201)
        dispatcher = AlertDispatcher(sink)
        try:
            ack = dispatcher.dispatch(_event())
        finally:
            dispatcher.shutdown()
        assert ack.camera_id == "cam1"
        assert ack.status_code == 201
        assert sink.payloads[0]["faceCount"] == 2

    def test_sink_failure_raises(self):
        sink = RecordingSink(error=DispatchError("Alert response status: 500", camera_id="cam1", status_code=500))
        dispatcher = AlertDispatcher(sink)
        try:
            with pytest.raises(DispatchError):
                dispatcher.dispatch(_event())
        finally:
            dispatcher.shutdown()


class TestSubmit:
    """Tests for fire-and-forget submit()"""

    def test_posts_exact_body_to_backend(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True})

        client = BackendClient("http://backend.test", timeout=1.0, transport=httpx.MockTransport(handler))
        dispatcher = AlertDispatcher(client)
        try:
            future = dispatcher.submit(_event(timestamp=datetime.now(timezone.utc)))
            ack = future.result(timeout=5)
        finally:
            dispatcher.shutdown()
            client.close()

        assert ack.status_code == 200
        assert len(bodies) == 1
        body = bodies[0]
        assert set(body) == {"cameraId", "confidence", "faceCount", "timestamp"}
        assert body["cameraId"] == "cam1"
        assert body["confidence"] == 0.95
        assert body["faceCount"] == 2
        assert body["timestamp"].endswith("Z")
        assert datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00")).tzinfo is not None

    def test_non_success_is_logged_and_dropped(self, caplog):
        client = BackendClient(
            "http://backend.test",
            timeout=1.0,
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="error")),
        )
        dispatcher = AlertDispatcher(client)
        try:
            with caplog.at_level(logging.WARNING):
                future = dispatcher.submit(_event())
                assert future.result(timeout=5) is None
        finally:
            dispatcher.shutdown()
            client.close()

        assert dispatcher.stats().failed == 1
        assert dispatcher.stats().sent == 0
        assert "Dropping alert for camera cam1" in caplog.text

    def test_unexpected_error_is_contained(self):
        sink = RecordingSink(error=RuntimeError("boom"))
        dispatcher = AlertDispatcher(sink)
        try:
            assert dispatcher.submit(_event()).result(timeout=5) is None
        finally:
            dispatcher.shutdown()
        assert dispatcher.stats().failed == 1

    def test_counts_sent(self):
        dispatcher = AlertDispatcher(RecordingSink())
        try:
            futures = [dispatcher.submit(_event(camera_id=f"cam{i}")) for i in range(5)]
            for future in futures:
                future.result(timeout=5)
        finally:
            dispatcher.shutdown()
        assert dispatcher.stats().sent == 5

    def test_submit_after_shutdown_drops_event(self):
        dispatcher = AlertDispatcher(RecordingSink())
        dispatcher.shutdown()
        assert dispatcher.submit(_event()) is None
        assert dispatcher.stats().failed == 1


class TestDispatchBacklog:
    """Tests for the bound on queued and in-flight alerts"""

    class BlockingSink:
        def __init__(self):
            self.release = threading.Event()
            self.calls = 0
            self._lock = threading.Lock()

        def post_alert(self, payload):
            with self._lock:
                self.calls += 1
            self.release.wait(timeout=5)
            return 201

    def test_overflow_is_dropped_while_backend_hangs(self, caplog):
        sink = self.BlockingSink()
        dispatcher = AlertDispatcher(sink, max_workers=2, max_pending=4)
        try:
            with caplog.at_level(logging.WARNING):
                futures = [dispatcher.submit(_event(camera_id=f"cam{i}")) for i in range(500)]
            accepted = [future for future in futures if future is not None]

            assert len(accepted) == 4
            assert dispatcher._executor._work_queue.qsize() <= 4
            assert dispatcher.stats().failed == 496
            assert "Alert backlog full" in caplog.text
        finally:
            sink.release.set()
            dispatcher.shutdown()

        assert dispatcher.stats().sent == 4
        assert sink.calls == 4

    def test_slots_are_freed_after_delivery(self):
        sink = self.BlockingSink()
        sink.release.set()
        dispatcher = AlertDispatcher(sink, max_workers=1, max_pending=1)
        try:
            for i in range(3):
                future = dispatcher.submit(_event(camera_id=f"cam{i}"))
                assert future is not None
                assert future.result(timeout=5) is not None
        finally:
            dispatcher.shutdown()
        assert dispatcher.stats().sent == 3
        assert dispatcher.stats().failed == 0

    def test_shutdown_drains_only_the_bounded_backlog(self):
        sink = self.BlockingSink()
        dispatcher = AlertDispatcher(sink, max_workers=1, max_pending=2)
        for i in range(50):
            dispatcher.submit(_event(camera_id=f"cam{i}"))
        sink.release.set()
        dispatcher.shutdown(wait=True)
        assert sink.calls == 2
        assert dispatcher.stats().failed == 48
