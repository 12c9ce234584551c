"""
Origin allow-listing and CORS headers.

Every response goes through ``cors_middleware``:

  OPTIONS (any path)   — answered here as a preflight; the app is not called.
  everything else      — passed to the app, then CORS headers are added.

``Access-Control-Allow-Origin`` is only set when the request origin resolves
to an allowed value. ``Vary`` and the allowed methods/headers are always sent.
"""

import logging
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from upload_relay.config import Settings

logger = logging.getLogger(__name__)

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type"
WILDCARD_ORIGIN = "*"


def get_allowed_origin(origin: str, settings: Settings) -> str:
    """
    Resolve the Access-Control-Allow-Origin value for a request origin.

    Returns:
        "*" when no allow-list is configured, the origin itself when it is on
        the allow-list, or "" when the origin is denied (including a missing
        Origin header against a non-empty allow-list).
    """
    if settings.allows_any_origin:
        return WILDCARD_ORIGIN
    if origin and origin in settings.allowed_origins:
        return origin
    return ""


def request_allowed_origin(request: Request, settings: Settings) -> str:
    """Shortcut for resolving the allowed origin of an incoming request."""
    return get_allowed_origin(request.headers.get("origin", ""), settings)


def with_cors(response: Response, allowed_origin: str) -> Response:
    """Attach the CORS header set to a response and return it."""
    if allowed_origin:
        response.headers["Access-Control-Allow-Origin"] = allowed_origin
    response.headers["Vary"] = "Origin"
    response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    return response


def preflight_response(allowed_origin: str) -> Response:
    """Answer a CORS preflight: 204 for allowed origins, 403 otherwise."""
    if not allowed_origin:
        return PlainTextResponse("Forbidden origin", status_code=403)
    return with_cors(Response(status_code=204), allowed_origin)


async def cors_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    settings: Settings = request.app.state.settings
    allowed_origin = request_allowed_origin(request, settings)

    if request.method == "OPTIONS":
        if not allowed_origin:
            logger.info(
                f"Rejected preflight from origin {request.headers.get('origin', '')!r}"
            )
        return preflight_response(allowed_origin)

    response = await call_next(request)
    return with_cors(response, allowed_origin)
