from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any


DEFAULT_UPSTREAM_BASE = "https://api.replicate.com/v1"
DEFAULT_PORT = 3001


class ConfigError(RuntimeError):
    pass


def _as_int(value: Any, *, key: str) -> int:
    try:
        return int(value)
    except Exception as e:
        raise ConfigError(f"Invalid int for {key}: {value!r}") from e


def _as_float(value: Any, *, key: str) -> float:
    try:
        return float(value)
    except Exception as e:
        raise ConfigError(f"Invalid float for {key}: {value!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _cors_origins_from_env() -> tuple[str, ...]:
    raw = os.getenv("ROTATION_PROXY_CORS_ORIGINS", "").strip()
    if not raw:
        # The plugin runs inside a sandboxed iframe with a `null` origin.
        return ("*",)
    return tuple(o.strip() for o in raw.split(",") if o.strip())


@dataclass(frozen=True)
class UpstreamConfig:
    api_key: str | None
    base_url: str
    timeout_s: float | None


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    reload: bool
    log_level: str
    public_url: str | None


@dataclass(frozen=True)
class ProxyConfig:
    upstream: UpstreamConfig
    server: ServerConfig
    cors_origins: tuple[str, ...]
    expose_errors: bool

    @property
    def has_api_key(self) -> bool:
        return bool(self.upstream.api_key)


def load_proxy_config() -> ProxyConfig:
    """Read the process environment into an immutable ProxyConfig.

    A missing REPLICATE_API_KEY is not an error here: it is reported per request
    by the upstream client, so the server still boots and serves `/` and the
    reset-key endpoint.
    """
    timeout_raw = _env_str("ROTATION_PROXY_UPSTREAM_TIMEOUT_S")
    timeout_s = (
        _as_float(timeout_raw, key="ROTATION_PROXY_UPSTREAM_TIMEOUT_S") if timeout_raw is not None else None
    )
    if timeout_s is not None and timeout_s <= 0:
        raise ConfigError(f"Invalid ROTATION_PROXY_UPSTREAM_TIMEOUT_S: must be > 0, got {timeout_s!r}")

    port = _as_int(os.getenv("PORT", str(DEFAULT_PORT)), key="PORT")
    if not (0 < port < 65536):
        raise ConfigError(f"Invalid PORT: {port}")

    base_url = (_env_str("ROTATION_PROXY_UPSTREAM_BASE") or DEFAULT_UPSTREAM_BASE).rstrip("/")

    return ProxyConfig(
        upstream=UpstreamConfig(
            api_key=_env_str("REPLICATE_API_KEY"),
            base_url=base_url,
            timeout_s=timeout_s,
        ),
        server=ServerConfig(
            host=os.getenv("ROTATION_PROXY_HOST", "0.0.0.0"),
            port=port,
            reload=_env_bool("ROTATION_PROXY_RELOAD", False),
            log_level=os.getenv("ROTATION_PROXY_LOG_LEVEL", "info").strip().lower() or "info",
            public_url=_env_str("RAILWAY_STATIC_URL"),
        ),
        cors_origins=_cors_origins_from_env(),
        expose_errors=_env_bool("ROTATION_PROXY_EXPOSE_ERRORS", False),
    )
