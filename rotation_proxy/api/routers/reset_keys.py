from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rotation_proxy.api.dependencies import get_reset_key_table
from rotation_proxy.reset_keys import ResetKeyTable


logger = logging.getLogger("rotation_proxy.reset_keys")

router = APIRouter()


class ValidateResetKeyRequest(BaseModel):
    # Not typed as str: a non-string key is a lookup miss, not a validation error.
    resetKey: Any = Field(default=None)


def _is_missing(value: Any) -> bool:
    # Same values the plugin's JS treats as "no key": null, "", 0, false.
    if value is None or value == "":
        return True
    return isinstance(value, (bool, int, float)) and not value


def _reset_key_from_body(body: Any) -> Any:
    # Only an object can carry a key; arrays and scalars count as no key.
    if not isinstance(body, dict):
        return None
    return ValidateResetKeyRequest.model_validate(body).resetKey


@router.post("/validate-reset-key")
def validate_reset_key(
    body: Any = Body(default=None),
    table: ResetKeyTable = Depends(get_reset_key_table),
) -> JSONResponse:
    # A wrong key is a 200 with success=false; only a missing key is a 400.
    try:
        reset_key = _reset_key_from_body(body)
        logger.info("Validating reset key")
        if _is_missing(reset_key):
            return JSONResponse(
                status_code=400,
                content={"success": False, "message": "Reset key is required"},
            )

        descriptor = table.lookup(reset_key)
        if descriptor is None:
            logger.warning("Invalid reset key provided")
            return JSONResponse(content={"success": False, "message": "Invalid reset key"})

        logger.info("Valid reset key found reset_type=%s", descriptor.reset_type.value)
        return JSONResponse(content={"success": True, **descriptor.to_api()})
    except Exception:
        logger.exception("Reset key validation error")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Reset key validation failed"},
        )
