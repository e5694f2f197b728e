"""Hash functions used for Comlink request signing."""

from __future__ import annotations

import hashlib
import hmac


def md5_hex(value: str) -> str:
    """Compute MD5 of a UTF-8 string, returning lowercase hex.

    Parameters
    ----------
    value : str
        The string to hash.

    Returns
    -------
    str
        32-character lowercase hex digest.
    """
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def hmac_sha256_hex(secret: str, *parts: str) -> str:
    """HMAC-SHA256 over the concatenation of *parts*, keyed with *secret*."""
    digest = hmac.new(secret.encode("utf-8"), digestmod=hashlib.sha256)
    for part in parts:
        digest.update(part.encode("utf-8"))
    return digest.hexdigest()
