"""
Face Alert Worker root package.

This package contains the status API entry point (main.py), the camera
registry and refresher, the detection scheduler, detectors, and the alert
dispatcher that reports face detections to the backend.
"""
