"""Request models and response serializers for the HTTP API."""

import base64
import binascii
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from picture_catalog.domain.documents import change_to_document, picture_to_document
from picture_catalog.domain.errors import ValidationError
from picture_catalog.domain.pictures import Picture
from picture_catalog.domain.submissions import ChangeProposal, PictureSubmission


class PictureRequest(BaseModel):
    """JSON body for creating or editing a picture.

    The binary travels base64-encoded, optionally as a ``data:`` URL.
    """

    name: str | None = None
    source: str | None = None
    description: str | None = None
    taken_at: datetime | None = None
    catalog_id: UUID | None = None
    place_id: UUID | None = None
    license_name: str | None = None
    license_is_edited: bool | None = None
    original_filename: str | None = None
    file_base64: str | None = None

    def to_submission(self) -> PictureSubmission:
        """Return the submission, keeping only the fields the client sent."""
        data = self.model_dump(exclude_unset=True, exclude={"file_base64"})
        if self.file_base64:
            data["file"] = decode_file(self.file_base64)
        return PictureSubmission(**data)


class ProposeChangesRequest(BaseModel):
    changes: list[ChangeProposal]


class ChangeIdsRequest(BaseModel):
    change_ids: list[UUID]


def decode_file(encoded: str) -> bytes:
    """Decode a base64 payload, accepting a ``data:`` URL prefix."""
    _, separator, payload = encoded.partition(";base64,")
    if not separator:
        payload = encoded
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("file_base64 is not valid base64") from exc


def serialize_picture(picture: Picture, file_url: str | None) -> dict[str, object]:
    """Return the picture as a plain mapping with a resolvable file reference."""
    document = picture_to_document(picture)
    file_document = document["file"]
    if isinstance(file_document, dict):
        file_document["url"] = file_url
    validated = next(
        version
        for version in document["versions"]
        if version["id"] == document["validated_version_id"]
    )
    return {
        **document,
        "validated_version": validated,
        "changes": [
            change_to_document(change) for change in picture.object_changes.values()
        ],
    }
