from __future__ import annotations

import importlib.metadata
import time
from typing import Any

from fastapi import APIRouter

from rotation_proxy import __version__


router = APIRouter()

ENDPOINTS: dict[str, str] = {
    "POST /predictions": "Create AI rotation prediction",
    "GET /predictions/:id": "Get prediction status/result",
    "POST /validate-reset-key": "Validate secure reset keys for Aleto plugin",
}


def _pkg_version(name: str) -> str | None:
    try:
        return str(importlib.metadata.version(name))
    except importlib.metadata.PackageNotFoundError:
        return None


@router.get("/")
def service_info() -> dict[str, Any]:
    return {
        "status": "ok",
        "message": "Figma AI Rotation Proxy Server",
        "endpoints": dict(ENDPOINTS),
        "usage": "API key managed server-side via environment variable",
    }


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/version")
def version() -> dict[str, Any]:
    return {
        "service": "rotation-proxy",
        "version": __version__,
        "deps": {
            "fastapi": _pkg_version("fastapi"),
            "uvicorn": _pkg_version("uvicorn"),
            "pydantic": _pkg_version("pydantic"),
        },
        "ts": time.time(),
    }
