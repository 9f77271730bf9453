from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from rotation_proxy import __version__
from rotation_proxy.api.errors import (
    APIError,
    api_error_handler,
    http_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from rotation_proxy.api.middleware_logging import configure_logging, register_request_logging
from rotation_proxy.config.load_config import ProxyConfig, load_proxy_config
from rotation_proxy.reset_keys import ResetKeyTable, build_reset_key_table

from .routers.health import router as health_router
from .routers.predictions import router as predictions_router
from .routers.reset_keys import router as reset_keys_router


logger = logging.getLogger("rotation_proxy")


def _log_startup_banner(cfg: ProxyConfig, reset_keys: ResetKeyTable) -> None:
    port = cfg.server.port
    base = cfg.server.public_url or f"http://localhost:{port}"
    logger.info("Figma AI Rotation Proxy Server listening on %s:%s", cfg.server.host, port)
    logger.info("Health check: %s/", base)
    logger.info("Upstream: %s", cfg.upstream.base_url)
    if cfg.has_api_key:
        logger.info("REPLICATE_API_KEY configured; ready to proxy prediction calls")
    else:
        logger.warning("REPLICATE_API_KEY is not set; /predictions will answer 500 until it is")
    logger.info("Endpoints: POST %s/predictions, GET %s/predictions/{id}, POST %s/validate-reset-key", base, base, base)
    logger.info("Reset keys loaded: %d", len(reset_keys))


def create_app(config: ProxyConfig | None = None) -> FastAPI:
    cfg = config or load_proxy_config()
    configure_logging(cfg.server.log_level)
    reset_keys = build_reset_key_table()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ANN202
        _log_startup_banner(cfg, reset_keys)
        yield

    app = FastAPI(title="Rotation Proxy", version=__version__, lifespan=lifespan)
    app.state.config = cfg
    app.state.reset_keys = reset_keys

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    register_request_logging(app)

    # Credentials cannot be combined with a wildcard origin.
    origins = list(cfg.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )

    app.include_router(health_router, tags=["system"])
    app.include_router(predictions_router, tags=["predictions"])
    app.include_router(reset_keys_router, tags=["reset-keys"])

    return app


app = create_app()
