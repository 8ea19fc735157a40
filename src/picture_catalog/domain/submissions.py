"""Immutable command objects submitted to the catalog services."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

REQUIRED_ON_CREATE = ("name", "source", "file", "original_filename")


class PictureSubmission(BaseModel):
    """Metadata and optional binary submitted to create or edit a picture.

    Fields left out of the submission keep their previous value on edit;
    fields passed explicitly as ``None`` are cleared where clearing is allowed.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    source: str | None = None
    description: str | None = None
    taken_at: datetime | None = None
    catalog_id: UUID | None = None
    place_id: UUID | None = None
    license_name: str | None = None
    license_is_edited: bool | None = None
    original_filename: str | None = None
    file: bytes | None = None

    def is_provided(self, field_name: str) -> bool:
        """Return true when the field was explicitly set by the caller."""
        return field_name in self.model_fields_set

    def missing_fields(
        self, required: tuple[str, ...] = REQUIRED_ON_CREATE
    ) -> list[str]:
        """Return required fields that are absent or empty."""
        return [name for name in required if not getattr(self, name)]


class ChangeProposal(BaseModel):
    """A single field/value pair proposed for review."""

    model_config = ConfigDict(frozen=True)

    field: str
    value: Any = None
