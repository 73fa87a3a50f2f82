"""Base model for raw XVIZ payloads.

Every raw XVIZ model inherits from :class:`XvizBaseModel` which
provides:

* A ``model_validator(mode="before")`` that drops explicit ``null``
  values so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class XvizBaseModel(BaseModel):
    """Base for raw XVIZ message models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}

        # Keep an explicitly passed raw= untouched.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
