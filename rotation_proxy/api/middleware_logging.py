from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("rotation_proxy.request")


def configure_logging(level: str = "info") -> None:
    # No-op if the host (uvicorn, pytest) already installed root handlers.
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger("rotation_proxy").setLevel(getattr(logging, level.upper(), logging.INFO))


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            # Traceback is logged once, by the 500 handler.
            logger.error(
                "client=%s method=%s path=%s status=%s duration_ms=%.2f UNHANDLED",
                client, method, path, 500, duration_ms,
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            "client=%s method=%s path=%s status=%s duration_ms=%.2f",
            client, method, path, response.status_code, duration_ms,
        )
        return response


def register_request_logging(app: FastAPI) -> None:
    app.add_middleware(RequestLogMiddleware)
