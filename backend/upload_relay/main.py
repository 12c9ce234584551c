"""
Upload Relay API
FastAPI application that emails files uploaded from allow-listed web origins.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from upload_relay.config import Settings, load_settings
from upload_relay.cors import cors_middleware
from upload_relay.routers import send

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """
    Plain-text error bodies for framework-raised HTTP errors.

    Unknown paths and wrong methods on known paths are both reported as 404.
    """
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def _log_startup(settings: Settings) -> None:
    if settings.allows_any_origin:
        logger.warning(
            "ALLOWED_ORIGINS is empty; uploads are accepted from any origin"
        )
    else:
        logger.info(f"Accepting uploads from: {', '.join(settings.allowed_origins)}")
    logger.info(
        f"Relaying to {settings.to_email} (max file size {settings.max_file_bytes} bytes)"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the relay app.

    Settings are read from the environment when not supplied and stored on
    ``app.state`` for the ``get_settings`` dependency.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="Upload Relay API",
        description="Relays website file uploads to an inbox as email attachments",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    app.middleware("http")(cors_middleware)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    app.include_router(send.router, prefix="/api", tags=["send"])

    _log_startup(settings)
    return app


app = create_app()
