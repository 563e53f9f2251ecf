from .status_exporter import StatusExporter, WorkerStatus

__all__ = ["StatusExporter", "WorkerStatus"]
