from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger("rotation_proxy.errors")

# Public contract: the plugin shows this list when it hits a wrong URL.
AVAILABLE_ROUTES: tuple[str, ...] = (
    "GET /",
    "POST /predictions",
    "GET /predictions/:id",
    "POST /validate-reset-key",
)


@dataclass
class APIError(Exception):
    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


def error_response(*, status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> JSONResponse:
    payload: dict[str, Any] = {"error": message, "code": code}
    if details:
        payload.update(details)
    return JSONResponse(status_code=int(status_code), content=jsonable_encoder(payload))


async def api_error_handler(req: Request, exc: APIError) -> JSONResponse:
    logger.warning(
        "APIError path=%s status=%s code=%s message=%r",
        req.url.path, exc.status_code, exc.code, exc.message,
    )
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def validation_error_handler(req: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("ValidationError path=%s errors=%s", req.url.path, exc.errors())
    return error_response(
        status_code=400,
        code="invalid_argument",
        message="Request validation failed.",
        details={"errors": exc.errors()},
    )


async def http_error_handler(req: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Wrong method on a known path is reported like an unknown path.
    if exc.status_code in {404, 405}:
        return error_response(
            status_code=404,
            code="not_found",
            message="Route not found",
            details={"availableRoutes": list(AVAILABLE_ROUTES)},
        )
    return error_response(
        status_code=exc.status_code,
        code="http_error",
        message=str(exc.detail) if exc.detail else "HTTP error",
    )


def _cors_headers(req: Request, cfg: Any) -> dict[str, str]:
    """CORS headers for responses built outside CORSMiddleware (unhandled 500s)."""
    origin = req.headers.get("origin")
    origins = tuple(getattr(cfg, "cors_origins", ()) or ())
    if not origin:
        return {}
    if "*" in origins:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in origins:
        return {"Access-Control-Allow-Origin": origin, "Access-Control-Allow-Credentials": "true", "Vary": "Origin"}
    return {}


async def unhandled_error_handler(req: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error at path=%s", req.url.path, exc_info=exc)
    cfg = getattr(req.app.state, "config", None)
    expose = bool(getattr(cfg, "expose_errors", False))
    resp = error_response(
        status_code=500,
        code="internal",
        message="Internal server error",
        details={"message": str(exc) if expose else "Something went wrong"},
    )
    resp.headers.update(_cors_headers(req, cfg))
    return resp
