# Standard library imports
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Optional
import asyncio
import logging
import os

# External package imports
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

# Local application imports
from .api.v1 import health_router
from .core.config import get_settings
from .di.container import WorkerContainer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.

    Starts the worker (initial camera fetch, refresher and detection
    threads) and stops it on shutdown. Blocking calls run off the event loop.
    """
    container: WorkerContainer = app.state.container
    manage_worker: bool = app.state.manage_worker

    if manage_worker:
        await asyncio.to_thread(container.start)
        logger.info("Worker started during application startup")

    yield

    if manage_worker:
        try:
            await asyncio.to_thread(container.stop)
        except Exception as e:
            logger.error(f"Error stopping worker: {e}", exc_info=True)

    logger.info("Application shutdown complete")


def create_application(
    container: Optional[WorkerContainer] = None,
    manage_worker: bool = True,
) -> FastAPI:
    """
    Create and configure the status API application.

    Args:
        container: Worker components to serve; built from settings if None.
        manage_worker: Start and stop the container with the app lifespan.

    Returns:
        Configured FastAPI application instance
    """
    # Load environment variables from .env file
    env_path = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_path)

    application = FastAPI(
        title="Face Alert Worker",
        version="1.0.0",
        description="Camera fleet face detection worker",
        lifespan=lifespan,
    )
    application.state.container = container or WorkerContainer()
    application.state.manage_worker = manage_worker

    application.include_router(health_router)

    return application


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Run the worker and its status API."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")
    # Before get_settings() so validation warnings use the configured format
    configure_logging(os.getenv("LOG_LEVEL", "INFO").upper())
    settings = get_settings()
    uvicorn.run(create_application(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
