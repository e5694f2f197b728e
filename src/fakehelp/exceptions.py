"""Custom exception hierarchy for fakehelp."""

from __future__ import annotations

from typing import Any


class HelpError(Exception):
    """Base exception for all fakehelp errors."""


class HelpConfigError(HelpError):
    """Invalid or missing configuration."""


class HelpTransportError(HelpError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON).

    ``body`` holds the decoded JSON error body of a non-200 response when
    there was one, so the endpoint layer can map Comlink error codes.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class HelpApiError(HelpError):
    """Comlink returned an error body (``{"code": ..., "message": ...}``)."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        endpoint: str = "",
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message)


class HelpNotFoundError(HelpApiError):
    """The requested player, guild or event does not exist upstream.

    Kept distinct from :class:`HelpApiError` so a boundary layer can map it
    to a "not found" outcome rather than a generic failure.
    """


class NotInGuildError(HelpNotFoundError):
    """The player exists but is not a member of any guild."""


class HelpStoreError(HelpError):
    """Local data directory read failure."""

    def __init__(self, message: str, *, name: str = "") -> None:
        self.name = name
        super().__init__(message)


class DocumentNotFoundError(HelpStoreError):
    """No persisted document exists under the requested name."""


class DocumentParseError(HelpStoreError):
    """The persisted document is not valid JSON or has the wrong shape."""


class CollectionUnavailableError(HelpStoreError):
    """A collection is still missing or stale after a forced resynchronization.

    Terminal for the read that raised it: no further update is attempted.
    """


class UnknownCollectionError(HelpError):
    """The requested collection is not part of the mirrored game data."""


class UnknownLanguageError(HelpError):
    """The requested language is not in the configured allow-list."""


class LocalizationBundleError(HelpError):
    """The localization bundle could not be decoded."""
