"""HMAC request signing for the Comlink API.

Comlink verifies ``Authorization: HMAC-SHA256 Credential=<access>,Signature=<sig>``
where the signature covers the request time, method, path and the MD5 of
the JSON body.
"""

from __future__ import annotations

import time

from fakehelp._crypto.hashing import hmac_sha256_hex, md5_hex


def build_signature(secret_key: str, request_time: str, method: str, path: str, body: str) -> str:
    """Build the hex signature for a single request.

    Algorithm:
      1. HMAC-SHA256 keyed with the secret key
      2. Feed the request time (epoch milliseconds as a string)
      3. Feed the upper-cased HTTP method
      4. Feed the request path (e.g. ``/metadata``)
      5. Feed the lowercase hex MD5 of the serialized JSON body
    """
    return hmac_sha256_hex(secret_key, request_time, method.upper(), path, md5_hex(body))


def build_auth_headers(
    access_key: str,
    secret_key: str,
    method: str,
    path: str,
    body: str,
    *,
    now_ms: int | None = None,
) -> dict[str, str]:
    """Return the ``X-Date`` and ``Authorization`` headers for a request."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    request_time = str(now_ms)
    signature = build_signature(secret_key, request_time, method, path, body)
    return {
        "X-Date": request_time,
        "Authorization": f"HMAC-SHA256 Credential={access_key},Signature={signature}",
    }
