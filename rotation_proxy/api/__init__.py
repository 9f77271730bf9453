"""HTTP API layer (FastAPI).

Routes are unversioned because the published plugin calls them by these exact
paths:
- `POST /predictions`, `GET /predictions/{id}`: pass-through to Replicate
- `POST /validate-reset-key`: static credit-reset key lookup
- `GET /`: service info

The layer stays thin: outbound calls live in `rotation_proxy.upstream`, the key
table in `rotation_proxy.reset_keys`.
"""
