"""
Custom exception hierarchy for the face alert worker.

None of these errors is fatal: each one is recovered locally by the
component that raises or catches it, logged, and then dropped.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class FaceWorkerError(Exception):
    """Base exception for all worker errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# Registry refresh
# -----------------------------------------------------------------------------


class RegistryFetchError(FaceWorkerError):
    """Raised when the camera list cannot be fetched or decoded."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


# -----------------------------------------------------------------------------
# Evaluation
# -----------------------------------------------------------------------------


class EvaluationError(FaceWorkerError):
    """Raised when a single camera evaluation fails or times out."""

    def __init__(
        self,
        message: str,
        camera_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.camera_id = camera_id


# -----------------------------------------------------------------------------
# Alert delivery
# -----------------------------------------------------------------------------


class DispatchError(FaceWorkerError):
    """Raised when an alert cannot be delivered to the backend."""

    def __init__(
        self,
        message: str,
        camera_id: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.camera_id = camera_id
        self.status_code = status_code
