"""HTTP transport for the Comlink API with optional HMAC signing."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from fakehelp._constants import USER_AGENT
from fakehelp._crypto.signing import build_auth_headers
from fakehelp._redact import redact_for_log
from fakehelp.config import HelpConfig
from fakehelp.exceptions import HelpTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        ...

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """aiohttp transport that signs requests and decodes JSON replies."""

    def __init__(self, config: HelpConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _build_headers(self, method: str, endpoint: str, body: str) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept-encoding": "gzip" if self._config.compression else "identity",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.signing_enabled:
            assert self._config.access_key is not None  # noqa: S101
            assert self._config.secret_key is not None  # noqa: S101
            headers.update(
                build_auth_headers(
                    self._config.access_key,
                    self._config.secret_key,
                    method,
                    endpoint,
                    body,
                )
            )
        return headers

    async def _request(self, method: str, endpoint: str, body: str | None) -> Any:
        url = f"{self._config.client_url.rstrip('/')}{endpoint}"
        headers = self._build_headers(method, endpoint, body if body is not None else "{}")

        _logger.debug("%s %s headers=%s", method, url, redact_for_log(headers))

        try:
            async with self._http.request(method, url, data=body, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                status = resp.status
        except aiohttp.ClientError as exc:
            raise HelpTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise HelpTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        try:
            decoded = json.loads(text) if text else None
        except json.JSONDecodeError as exc:
            raise HelpTransportError(
                f"Invalid JSON from {endpoint} (HTTP {status}): {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if status != 200:
            raise HelpTransportError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
                body=decoded,
            )

        _logger.debug("%s %s -> %s", method, endpoint, redact_for_log(decoded, max_string=128))
        return decoded

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        """POST *body* as JSON and return the decoded JSON reply."""
        return await self._request("POST", endpoint, json.dumps(body, separators=(",", ":")))

    async def get_json(self, endpoint: str) -> Any:
        """GET *endpoint* and return the decoded JSON reply."""
        return await self._request("GET", endpoint, None)
