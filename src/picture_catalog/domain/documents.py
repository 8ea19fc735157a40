"""Mapping between catalog aggregates and plain JSON documents."""

from datetime import datetime
from uuid import UUID

from picture_catalog.domain.pictures import (
    ChangeRecord,
    ChangeStatus,
    Exif,
    FileRecord,
    License,
    Picture,
    Position,
    Resolution,
    Version,
)


def picture_to_document(picture: Picture) -> dict[str, object]:
    """Serialize a picture with its embedded versions."""
    return {
        "id": str(picture.id),
        "catalog_id": _uuid_str(picture.catalog_id),
        "original_file_name": picture.original_file_name,
        "file": _file_to_document(picture.file),
        "versions": [version_to_document(version) for version in picture.versions],
        "validated_version_id": str(picture.validated_version_id),
        "created_at": picture.created_at.isoformat(),
        "updated_at": picture.updated_at.isoformat(),
    }


def picture_from_document(document: dict[str, object]) -> Picture:
    """Rebuild a picture from its stored document."""
    raw_file = document.get("file")
    return Picture(
        id=UUID(str(document["id"])),
        catalog_id=_uuid_or_none(document.get("catalog_id")),
        original_file_name=str(document["original_file_name"]),
        file=_file_from_document(raw_file) if isinstance(raw_file, dict) else None,
        versions=[
            version_from_document(raw) for raw in document.get("versions", [])
        ],
        validated_version_id=UUID(str(document["validated_version_id"])),
        created_at=datetime.fromisoformat(str(document["created_at"])),
        updated_at=datetime.fromisoformat(str(document["updated_at"])),
    )


def version_to_document(version: Version) -> dict[str, object]:
    return {
        "id": str(version.id),
        "name": version.name,
        "description": version.description,
        "source": version.source,
        "taken_at": version.taken_at.isoformat() if version.taken_at else None,
        "created_at": version.created_at.isoformat(),
        "place_id": _uuid_str(version.place_id),
        "exif": _exif_to_document(version.exif),
        "position": (
            {"lat": version.position.lat, "lng": version.position.lng}
            if version.position
            else None
        ),
        "resolutions": [
            {"slug": res.slug, "width": res.width, "height": res.height}
            for res in version.resolutions
        ],
        "license": {
            "name": version.license.name,
            "is_edited": version.license.is_edited,
        },
    }


def version_from_document(document: dict[str, object]) -> Version:
    exif = document.get("exif")
    position = document.get("position")
    license_doc = document.get("license") or {}
    taken_at = document.get("taken_at")
    return Version(
        id=UUID(str(document["id"])),
        name=str(document["name"]),
        description=document.get("description"),
        source=str(document["source"]),
        taken_at=datetime.fromisoformat(str(taken_at)) if taken_at else None,
        created_at=datetime.fromisoformat(str(document["created_at"])),
        place_id=_uuid_or_none(document.get("place_id")),
        exif=Exif(**exif) if isinstance(exif, dict) else None,
        position=Position(**position) if isinstance(position, dict) else None,
        resolutions=tuple(
            Resolution(**raw) for raw in document.get("resolutions", [])
        ),
        license=License(
            name=license_doc.get("name"),
            is_edited=bool(license_doc.get("is_edited", False)),
        ),
    )


def change_to_document(change: ChangeRecord) -> dict[str, object]:
    """Serialize a change record as a table row."""
    return {
        "id": str(change.id),
        "picture_id": str(change.picture_id),
        "field": change.field,
        "value": change.value,
        "status": change.status.value,
        "created_at": change.created_at.isoformat(),
        "created_by": change.created_by,
    }


def change_from_document(row: dict[str, object]) -> ChangeRecord:
    return ChangeRecord(
        id=UUID(str(row["id"])),
        picture_id=UUID(str(row["picture_id"])),
        field=str(row["field"]),
        value=row.get("value"),
        status=ChangeStatus(row["status"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        created_by=str(row["created_by"]),
    )


def _file_to_document(file: FileRecord | None) -> dict[str, object] | None:
    if file is None:
        return None
    return {
        "path": file.path,
        "mime_type": file.mime_type,
        "hash": file.hash,
        "original_name": file.original_name,
        "size": file.size,
    }


def _file_from_document(document: dict[str, object]) -> FileRecord:
    return FileRecord(
        path=str(document["path"]),
        mime_type=str(document["mime_type"]),
        hash=str(document["hash"]),
        original_name=str(document["original_name"]),
        size=int(document["size"]),
    )


def _exif_to_document(exif: Exif | None) -> dict[str, object] | None:
    if exif is None:
        return None
    return {
        "model": exif.model,
        "aperture": exif.aperture,
        "iso": exif.iso,
        "exposure": exif.exposure,
        "focal_length": exif.focal_length,
    }


def _uuid_str(value: UUID | None) -> str | None:
    return str(value) if value else None


def _uuid_or_none(value: object) -> UUID | None:
    return UUID(str(value)) if value else None
