# External package imports
from fastapi import Request

# Local application imports
from ...di.container import WorkerContainer


def get_worker_container(request: Request) -> WorkerContainer:
    """Return the WorkerContainer owned by the running application."""
    return request.app.state.container
