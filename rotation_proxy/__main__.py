from __future__ import annotations

import sys

from rotation_proxy.config.load_config import ConfigError, load_proxy_config


def main() -> int:
    try:
        cfg = load_proxy_config()
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        import uvicorn  # type: ignore
    except Exception as e:
        print("Missing dependency: uvicorn. Install it in your runtime environment.", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 1

    uvicorn.run(
        "rotation_proxy.api.app:app",
        host=cfg.server.host,
        port=cfg.server.port,
        reload=cfg.server.reload,
        log_level=cfg.server.log_level,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
