"""FastAPI application entry point.

This module initialises the FastAPI app, configures logging and
registers API routes.  The ``uvicorn`` ASGI server can point to
``serenity.main:app`` to serve the application.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .controllers.activity_controller import router as activity_router
from .controllers.chat_controller import router as chat_router
from .services.pipeline_service import get_task_runner
from .utils.error_handler import SerenityError, http_exception_handler
from .utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.ready = True
    yield
    app.state.ready = False
    # Let background recommendation runs finish before shutdown
    if get_task_runner.cache_info().currsize:
        await get_task_runner().drain()


def create_app() -> FastAPI:
    """Create and configure a FastAPI application."""
    setup_logging()

    app = FastAPI(title="Serenity AI", version="0.1.0", lifespan=lifespan)
    app.state.ready = False

    # Enable CORS for all origins; adjust in production as needed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SerenityError, http_exception_handler)

    app.include_router(chat_router)
    app.include_router(activity_router)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        logger.debug("Health check invoked")
        return {"status": "ok"}

    @app.get("/ready", tags=["Health"])
    async def ready() -> dict[str, bool]:
        return {"ready": bool(app.state.ready)}

    return app


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn

    from .config.app_config import get_app_config

    config = get_app_config()
    uvicorn.run("serenity.main:app", host=config.app_host, port=config.app_port)


# Create an application instance for ASGI servers
app = create_app()
