from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from rotation_proxy.api.dependencies import get_replicate_client
from rotation_proxy.api.errors import APIError
from rotation_proxy.upstream.replicate_client import (
    ReplicateClient,
    UpstreamResponse,
    UpstreamTransportError,
)


logger = logging.getLogger("rotation_proxy.predictions")

router = APIRouter()


def _model_name(payload: Any) -> str:
    version = payload.get("version") if isinstance(payload, dict) else None
    if isinstance(version, str) and version:
        return version.split(":")[0]
    return "unknown"


def _image_chars(payload: Any) -> int:
    inp = payload.get("input") if isinstance(payload, dict) else None
    image = inp.get("image") if isinstance(inp, dict) else None
    return len(image) if isinstance(image, (str, list)) else 0


def _mirror(resp: UpstreamResponse) -> JSONResponse:
    return JSONResponse(status_code=int(resp.status_code), content=resp.body)


def _transport_failure(e: UpstreamTransportError) -> APIError:
    logger.error("Upstream transport failure: %s", e)
    return APIError(
        status_code=500,
        code="upstream_unavailable",
        message="Proxy server error",
        details={"message": str(e)},
    )


@router.post("/predictions")
def create_prediction(
    payload: Any = Body(default=None),
    client: ReplicateClient = Depends(get_replicate_client),
) -> JSONResponse:
    if payload is None:
        payload = {}
    if isinstance(payload, (bytes, bytearray)):
        raise APIError(status_code=400, code="invalid_argument", message="Request body must be JSON.")

    logger.info(
        "Creating prediction model=%s image_chars=%d", _model_name(payload), _image_chars(payload)
    )
    try:
        resp = client.create_prediction(payload)
    except UpstreamTransportError as e:
        raise _transport_failure(e) from e

    if not resp.ok:
        logger.error("Replicate API error status=%s body=%r", resp.status_code, resp.body)
    else:
        pred_id = resp.body.get("id") if isinstance(resp.body, dict) else None
        logger.info("Prediction created id=%s", pred_id)
    return _mirror(resp)


@router.get("/predictions/{prediction_id}")
def get_prediction(
    prediction_id: str,
    client: ReplicateClient = Depends(get_replicate_client),
) -> JSONResponse:
    logger.info("Checking prediction status id=%s", prediction_id)
    try:
        resp = client.get_prediction(prediction_id)
    except UpstreamTransportError as e:
        raise _transport_failure(e) from e

    if not resp.ok:
        logger.error("Replicate API error status=%s body=%r", resp.status_code, resp.body)
        return _mirror(resp)

    body = resp.body if isinstance(resp.body, dict) else {}
    status = body.get("status")
    logger.info("Prediction status id=%s status=%s", prediction_id, status)
    if status == "succeeded":
        logger.info("Prediction completed id=%s", prediction_id)
    elif status == "failed":
        logger.warning("Prediction failed id=%s error=%r", prediction_id, body.get("error"))
    return _mirror(resp)
