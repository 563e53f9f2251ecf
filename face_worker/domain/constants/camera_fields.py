"""Constants for Camera payload field names"""


class CameraFields:
    """Field name constants for the backend camera payload"""
    ID = "id"
    NAME = "name"
    STREAM_URL = "rtspUrl"
    STREAM_URL_ALIAS = "streamUrl"
    IS_ENABLED = "isEnabled"
    LOCATION = "location"
