"""Base model for Comlink payloads and persisted records.

Every model inherits from :class:`HelpBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase payload keys map
  automatically to snake_case fields.
* ``populate_by_name=True`` so models can be built with either name.
* ``frozen=True``: state objects are replaced, never mutated.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HelpBaseModel(BaseModel):
    """Base for Comlink payload models and persisted records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_document(self) -> dict[str, Any]:
        """JSON-compatible dict using the camelCase names written to disk."""
        return self.model_dump(mode="json", by_alias=True)
