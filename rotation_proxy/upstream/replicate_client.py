from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any


class UpstreamError(RuntimeError):
    pass


class UpstreamConfigError(UpstreamError):
    pass


class UpstreamTransportError(UpstreamError):
    pass


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= int(self.status_code) < 300


def _decode_json(raw: bytes, *, url: str) -> Any:
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except Exception as e:
        raise UpstreamTransportError(f"Invalid JSON from upstream {url}: {e}") from e


def _http_request_json(
    method: str,
    url: str,
    *,
    headers: dict[str, str],
    body: bytes | None,
    timeout_s: float | None,
) -> tuple[int, Any]:
    """Single HTTP exchange; returns (status, parsed JSON) for any HTTP status.

    Upstream 4xx/5xx are not errors here: their JSON body is returned as-is so the
    caller can mirror it. Only network failures and unparseable bodies raise.
    """
    req = urllib.request.Request(url, data=body, headers=headers, method=method)
    try:
        if timeout_s is None:
            resp_cm = urllib.request.urlopen(req)
        else:
            resp_cm = urllib.request.urlopen(req, timeout=float(timeout_s))
        with resp_cm as resp:
            return int(resp.status), _decode_json(resp.read(), url=url)
    except urllib.error.HTTPError as e:
        try:
            raw = e.read()
        except Exception:
            raw = b""
        finally:
            e.close()
        return int(e.code), _decode_json(raw, url=url)
    except urllib.error.URLError as e:
        raise UpstreamTransportError(f"Network error for {url}: {e.reason}") from e
    except (OSError, ValueError, http.client.HTTPException) as e:
        # Timeouts, dropped connections, truncated bodies, malformed URLs.
        raise UpstreamTransportError(f"Request to {url} failed: {e}") from e


class ReplicateClient:
    """Thin pass-through client for the Replicate predictions API.

    One instance per request is fine: it holds no connection state, only the
    credential and the base URL. There is no retry; whatever the upstream answers
    is returned to the caller.
    """

    def __init__(self, *, api_key: str | None, base_url: str, timeout_s: float | None = None) -> None:
        if not (api_key or "").strip():
            raise UpstreamConfigError(
                "Server configuration error: REPLICATE_API_KEY environment variable not set"
            )
        self.api_key = str(api_key).strip()
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def _headers(self, *, with_body: bool) -> dict[str, str]:
        headers = {
            "Authorization": f"Token {self.api_key}",
            "Accept": "application/json",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def create_prediction(self, payload: Any) -> UpstreamResponse:
        url = f"{self.base_url}/predictions"
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        status, obj = _http_request_json(
            "POST",
            url,
            headers=self._headers(with_body=True),
            body=body,
            timeout_s=self.timeout_s,
        )
        return UpstreamResponse(status_code=status, body=obj)

    def get_prediction(self, prediction_id: str) -> UpstreamResponse:
        encoded = urllib.parse.quote(str(prediction_id), safe="")
        url = f"{self.base_url}/predictions/{encoded}"
        status, obj = _http_request_json(
            "GET",
            url,
            headers=self._headers(with_body=False),
            body=None,
            timeout_s=self.timeout_s,
        )
        return UpstreamResponse(status_code=status, body=obj)
