from __future__ import annotations

from fastapi import Request

from rotation_proxy.api.errors import APIError
from rotation_proxy.config.load_config import ProxyConfig
from rotation_proxy.reset_keys import ResetKeyTable
from rotation_proxy.upstream.replicate_client import ReplicateClient, UpstreamConfigError


def get_proxy_config(request: Request) -> ProxyConfig:
    return request.app.state.config


def get_reset_key_table(request: Request) -> ResetKeyTable:
    return request.app.state.reset_keys


def get_replicate_client(request: Request) -> ReplicateClient:
    """FastAPI dependency: a ReplicateClient bound to the configured credential.

    The credential is read once at startup, but its absence is only reported here,
    per request, so the rest of the service stays usable without it.
    """
    cfg = get_proxy_config(request)
    try:
        return ReplicateClient(
            api_key=cfg.upstream.api_key,
            base_url=cfg.upstream.base_url,
            timeout_s=cfg.upstream.timeout_s,
        )
    except UpstreamConfigError as e:
        raise APIError(status_code=500, code="configuration", message=str(e)) from e
