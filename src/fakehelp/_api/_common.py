"""Shared helpers for Comlink endpoint modules.

This module centralizes the most repeated patterns:
- wrapping a payload in the Comlink request body
- posting it through the transport
- mapping Comlink error bodies to the exception hierarchy

It is internal to fakehelp and may change at any time.
"""

from __future__ import annotations

from typing import Any, NoReturn

from fakehelp._constants import ERROR_DESCRIPTIONS, NOT_FOUND_CODES
from fakehelp._transport import Transport
from fakehelp.exceptions import HelpApiError, HelpNotFoundError, HelpTransportError


def build_body(payload: dict[str, Any] | None = None, **extra: Any) -> dict[str, Any]:
    """Build a Comlink request body; enum names are never requested."""
    body: dict[str, Any] = {"payload": payload or {}, "enums": False}
    body.update(extra)
    return body


def _error_code(body: Any) -> int | None:
    if not isinstance(body, dict):
        return None
    code = body.get("code")
    try:
        return int(code) if code is not None else None
    except (TypeError, ValueError):
        return None


def raise_for_error_body(exc: HelpTransportError) -> NoReturn:
    """Re-raise a transport error as an API error when Comlink sent a code."""
    code = _error_code(exc.body)
    if code is None:
        raise exc
    message = str(exc.body.get("message") or ERROR_DESCRIPTIONS.get(code, "Error"))
    error_cls = HelpNotFoundError if code in NOT_FOUND_CODES else HelpApiError
    raise error_cls(
        f"{exc.endpoint} failed: code={code} message={message}",
        code=code,
        endpoint=exc.endpoint,
        status_code=exc.status_code,
    ) from exc


async def post_json(transport: Transport, endpoint: str, body: dict[str, Any]) -> Any:
    """Post a Comlink request and return the decoded reply."""
    try:
        return await transport.post_json(endpoint, body)
    except HelpTransportError as exc:
        raise_for_error_body(exc)


def expect_dict(endpoint: str, decoded: Any) -> dict[str, Any]:
    if not isinstance(decoded, dict):
        raise HelpApiError(f"{endpoint} returned {type(decoded).__name__}, expected an object", endpoint=endpoint)
    return decoded
