"""Service configuration for fakehelp."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fakehelp._constants import DEFAULT_CLIENT_URL
from fakehelp.exceptions import HelpConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise HelpConfigError(f"{env_key} must be a number, got {value!r}") from exc


def _parse_languages(value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    items = value.split(",") if isinstance(value, str) else value
    return tuple(item.strip().upper() for item in items if item and item.strip())


@dataclasses.dataclass(frozen=True)
class HelpConfig:
    """Service configuration.

    Parameters
    ----------
    client_url : str
        Base URL of the Comlink service.
    access_key : str or None
        HMAC access key. Requests are signed only when both keys are set.
    secret_key : str or None
        HMAC secret key.
    compression : bool
        Ask Comlink for gzip-compressed responses.
    request_timeout : float
        Total timeout in seconds for a single upstream request.
    player_cache_ttl : float
        Seconds a fetched player stays cached. ``0`` or less disables expiry.
    concurrent_players : int
        Maximum in-flight player fetches per batch.
    concurrent_guilds : int
        Maximum in-flight guild fetches per batch.
    languages : tuple of str
        Localization languages to keep (e.g. ``("ENG_US", "GER_DE")``).
    disable_localization : bool
        Skip all localization fetch and persist work.
    use_segments : bool
        Fetch game data segment by segment instead of in one request.
    use_unzip : bool
        Ask Comlink for the pre-expanded localization bundle instead of
        the base64 zip archive.
    update_interval : float
        Minutes between two metadata polls.
    data_path : str
        Directory holding the persisted documents.
    """

    client_url: str = DEFAULT_CLIENT_URL
    access_key: str | None = None
    secret_key: str | None = None
    compression: bool = True
    request_timeout: float = 60.0
    player_cache_ttl: float = 30.0
    concurrent_players: int = 10
    concurrent_guilds: int = 2
    languages: tuple[str, ...] = ("ENG_US",)
    disable_localization: bool = False
    use_segments: bool = False
    use_unzip: bool = False
    update_interval: float = 5.0
    data_path: str = "data"

    def __post_init__(self) -> None:
        if self.concurrent_players < 1:
            raise HelpConfigError(f"concurrent_players must be >= 1, got {self.concurrent_players}")
        if self.concurrent_guilds < 1:
            raise HelpConfigError(f"concurrent_guilds must be >= 1, got {self.concurrent_guilds}")
        if self.update_interval <= 0:
            raise HelpConfigError(f"update_interval must be > 0, got {self.update_interval}")
        # Accept comma separated strings and lists for convenience.
        object.__setattr__(self, "languages", _parse_languages(self.languages))

    @property
    def signing_enabled(self) -> bool:
        return bool(self.access_key and self.secret_key)

    @property
    def update_interval_seconds(self) -> float:
        return self.update_interval * 60.0

    @classmethod
    def from_env(cls, **overrides: Any) -> HelpConfig:
        """Create configuration from environment variables.

        Reads the variable names used by the existing deployments
        (``CLIENT_URL``, ``ACCESS_KEY``, ``PLAYER_CACHE_TIME``, ...).
        ``PLAYER_CACHE_TIME`` is expressed in milliseconds and
        ``UPDATE_INTERVAL`` in minutes. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HelpConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STRING_MAP = {
            "CLIENT_URL": "client_url",
            "ACCESS_KEY": "access_key",
            "SECRET_KEY": "secret_key",
            "DATA_PATH": "data_path",
            "LANGUAGES": "languages",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STRING_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        _ENV_BOOL_MAP = {
            "COMPRESSION": ("compression", True),
            "NO_LOCALIZATION": ("disable_localization", False),
            "USE_SEGMENTS": ("use_segments", False),
            "USE_UNZIP": ("use_unzip", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        cache_time = env.get("PLAYER_CACHE_TIME")
        if cache_time and "player_cache_ttl" not in overrides:
            config_kwargs["player_cache_ttl"] = _env_number("PLAYER_CACHE_TIME", cache_time, float) / 1000.0

        _ENV_NUMBER_MAP = {
            "CONCURRENT_PLAYERS": ("concurrent_players", int),
            "CONCURRENT_GUILDS": ("concurrent_guilds", int),
            "UPDATE_INTERVAL": ("update_interval", float),
            "REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            val = env.get(env_key)
            if val and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
