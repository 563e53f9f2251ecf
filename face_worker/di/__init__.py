from .container import WorkerContainer

__all__ = ["WorkerContainer"]
