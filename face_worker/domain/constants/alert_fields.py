"""Constants for alert payload field names"""


class AlertFields:
    """Field name constants for the backend alert payload"""
    CAMERA_ID = "cameraId"
    CONFIDENCE = "confidence"
    FACE_COUNT = "faceCount"
    TIMESTAMP = "timestamp"
