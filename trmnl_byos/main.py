"""
TRMNL BYOS - backend for "bring your own server" e-ink terminals

Devices poll for setup information, fetch the image to render and push
telemetry logs. An operator uploads one image per screen, which is served
back to the device.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from trmnl_byos import __version__
from trmnl_byos.config import Settings
from trmnl_byos.device_service import DeviceService
from trmnl_byos.exceptions import (
    ImageNotFoundError,
    ImageStorageError,
    InvalidContentTypeError,
    InvalidScreenIdError,
)
from trmnl_byos.image_store import ImageStore
from trmnl_byos.middleware import RequestLoggingMiddleware
from trmnl_byos.models import HealthResponse
from trmnl_byos.routers import devices_router, screens_router
from trmnl_byos.store import ScreenRegistry
from trmnl_byos.telemetry import TelemetrySink

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure the root logger for the whole process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    app.state.image_store.ensure_data_root()
    logger.info(
        f"{settings.service_name} {__version__} starting, "
        f"data root {app.state.image_store.data_root.resolve()}"
    )
    yield
    logger.info(f"{settings.service_name} shutting down")


def register_exception_handlers(app: FastAPI) -> None:
    """Map application exceptions to JSON error responses."""

    @app.exception_handler(InvalidContentTypeError)
    async def handle_invalid_content_type(
        request: Request, exc: InvalidContentTypeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "invalid_content_type", "message": exc.message},
        )

    @app.exception_handler(InvalidScreenIdError)
    async def handle_invalid_screen_id(
        request: Request, exc: InvalidScreenIdError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "invalid_screen_id", "message": exc.message},
        )

    @app.exception_handler(ImageNotFoundError)
    async def handle_not_found(
        request: Request, exc: ImageNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "message": exc.message},
        )

    @app.exception_handler(ImageStorageError)
    async def handle_storage_error(
        request: Request, exc: ImageStorageError
    ) -> JSONResponse:
        logger.error(f"Image storage error: {exc.message} {exc.context}")
        return JSONResponse(
            status_code=500,
            content={"error": "storage_error", "message": exc.message},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its shared service objects.

    The screen registry, image store, device service and telemetry sink are
    created once here and reached by the routes through `app.state`.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="TRMNL BYOS API",
        version=__version__,
        description="""
Backend for TRMNL e-ink terminals: device setup, display polling,
telemetry logs and operator image uploads.
        """,
        lifespan=lifespan,
    )

    registry = ScreenRegistry()
    app.state.settings = settings
    app.state.registry = registry
    app.state.image_store = ImageStore(settings.data_root, registry)
    app.state.device_service = DeviceService(
        registry,
        firmware_path=settings.firmware_path,
        default_refresh_rate=settings.default_refresh_rate,
    )
    app.state.telemetry = TelemetrySink()

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    # Include routers
    app.include_router(devices_router)
    app.include_router(screens_router)

    @app.get("/", response_model=HealthResponse, tags=["Health"])
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", service=settings.service_name)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        "trmnl_byos.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
