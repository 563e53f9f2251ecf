"""
Shared pytest fixtures for face worker tests.
"""
import os
from unittest.mock import patch

import pytest

from face_worker.core.config import Settings


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "BACKEND_URL": "http://backend.test",
        "REFRESH_INTERVAL_SECONDS": "30",
        "TICK_INTERVAL_SECONDS": "3",
        "EVALUATION_TIMEOUT_SECONDS": "10",
        "DETECTOR_MODE": "simulated",
        "DETECTOR_SEED": "42",
        "FALLBACK_CAMERA_ENABLED": "true",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def settings(mock_env) -> Settings:
    return Settings()
