"""
Unit tests for CameraRegistry (atomic replace / snapshot).
"""
import threading

from face_worker.processing.registry import CameraRegistry
from tests.fakes import make_camera


class TestCameraRegistry:
    """Tests for single-threaded registry behaviour"""

    def test_starts_empty(self):
        registry = CameraRegistry()
        assert registry.size() == 0
        assert registry.snapshot() == ()
        state = registry.current()
        assert state.version == 0
        assert state.last_refresh_succeeded is None

    def test_replace_installs_complete_set(self):
        registry = CameraRegistry()
        state = registry.replace([make_camera("cam-1"), make_camera("cam-2", enabled=False)])
        assert registry.size() == 2
        assert {c.id for c in registry.snapshot()} == {"cam-1", "cam-2"}
        assert state.version == 1
        assert state.enabled_count == 1
        assert state.last_refresh_succeeded is True
        assert state.refreshed_at is not None

    def test_replace_discards_previous_set(self):
        registry = CameraRegistry()
        registry.replace([make_camera("cam-1"), make_camera("cam-2")])
        registry.replace([make_camera("cam-3")])
        assert [c.id for c in registry.snapshot()] == ["cam-3"]
        assert registry.get("cam-1") is None
        assert registry.get("cam-3").id == "cam-3"

    def test_snapshot_is_stable_after_replace(self):
        registry = CameraRegistry()
        registry.replace([make_camera("cam-1")])
        before = registry.snapshot()
        registry.replace([make_camera("cam-2"), make_camera("cam-3")])
        assert [c.id for c in before] == ["cam-1"]

    def test_duplicate_ids_last_wins(self):
        registry = CameraRegistry()
        registry.replace([make_camera("cam-1", enabled=False), make_camera("cam-1", enabled=True)])
        assert registry.size() == 1
        assert registry.get("cam-1").enabled is True

    def test_empty_replace_empties_registry(self):
        registry = CameraRegistry()
        registry.replace([make_camera("cam-1")])
        registry.replace([])
        assert registry.size() == 0
        assert registry.current().last_refresh_succeeded is True

    def test_record_refresh_failure_keeps_cameras(self):
        registry = CameraRegistry()
        registry.replace([make_camera("cam-1")])
        before = registry.snapshot()
        state = registry.record_refresh_failure("backend down")
        assert registry.snapshot() == before
        assert state.version == 1
        assert state.last_refresh_succeeded is False
        assert state.last_refresh_error == "backend down"

    def test_successful_replace_clears_failure(self):
        registry = CameraRegistry()
        registry.record_refresh_failure("backend down")
        state = registry.replace([make_camera("cam-1")])
        assert state.last_refresh_succeeded is True
        assert state.last_refresh_error is None


class TestCameraRegistryConcurrency:
    """Readers must only ever observe fully installed camera sets"""

    def test_concurrent_readers_never_see_mixed_sets(self):
        registry = CameraRegistry()
        generations = 300
        # Generation g installs g % 7 + 1 cameras, all tagged with g
        registry.replace([make_camera("g0-0")])
        stop = threading.Event()
        violations = []

        def reader():
            while not stop.is_set():
                cameras = registry.snapshot()
                tags = {camera.id.split("-")[0] for camera in cameras}
                if len(tags) != 1:
                    violations.append(tags)
                    continue
                generation = int(tags.pop()[1:])
                if len(cameras) != generation % 7 + 1:
                    violations.append((generation, len(cameras)))

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        try:
            for generation in range(1, generations):
                registry.replace(
                    [make_camera(f"g{generation}-{i}") for i in range(generation % 7 + 1)]
                )
        finally:
            stop.set()
            for thread in readers:
                thread.join(timeout=5)

        assert violations == []
        assert registry.current().version == generations
