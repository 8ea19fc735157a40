"""Pure construction of picture versions."""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from picture_catalog.domain.pictures import (
    ORIGINAL_RESOLUTION,
    Exif,
    ExifData,
    License,
    Position,
    Resolution,
    Version,
)
from picture_catalog.domain.submissions import PictureSubmission

_REQUIRED_TEXT = ("name", "source")
_CLEARABLE = ("description", "taken_at")


@dataclass(frozen=True)
class VersionBuilder:
    """Builds versions from submissions, EXIF data and reviewed changes."""

    def build(  # noqa: PLR0913
        self,
        previous: Version | None,
        submitted: PictureSubmission,
        exif: ExifData | None,
        place_id: UUID | None,
        resolved_license: License,
    ) -> Version:
        """Return a new file-backed version patched over the previous one."""
        fields = self._patched_fields(previous, submitted)
        if not fields.get("name") or not fields.get("source"):
            raise ValueError("A version needs a name and a source")
        return Version(
            id=uuid4(),
            created_at=datetime.now(tz=UTC),
            place_id=place_id,
            exif=_build_exif(exif),
            position=_resolve_position(exif),
            resolutions=(_original_resolution(exif),),
            license=resolved_license,
            **fields,
        )

    def merge(
        self,
        version: Version,
        submitted: PictureSubmission,
        place_id: UUID | None,
        resolved_license: License,
    ) -> Version:
        """Return the version with submitted metadata merged in, same id."""
        fields = self._patched_fields(version, submitted)
        return replace(
            version, place_id=place_id, license=resolved_license, **fields
        )

    def apply_changes(
        self, baseline: Version, changes: Iterable[tuple[str, object]]
    ) -> Version:
        """Return a new version with field overrides applied in order.

        File-derived data (EXIF, position, resolutions) is carried forward
        from the baseline since the binary does not change.
        """
        overrides: dict[str, object] = {}
        for field_name, value in changes:
            coerced = _coerce(field_name, value)
            if field_name in _REQUIRED_TEXT and not coerced:
                continue
            overrides[field_name] = coerced
        return replace(
            baseline, id=uuid4(), created_at=datetime.now(tz=UTC), **overrides
        )

    @staticmethod
    def same_content(left: Version, right: Version) -> bool:
        """Return true when two versions describe the same metadata."""
        return replace(left, id=right.id, created_at=right.created_at) == right

    @staticmethod
    def _patched_fields(
        previous: Version | None, submitted: PictureSubmission
    ) -> dict[str, object]:
        fields: dict[str, object] = {}
        for name in _REQUIRED_TEXT:
            value = getattr(submitted, name)
            fields[name] = value or (getattr(previous, name) if previous else None)
        for name in _CLEARABLE:
            if submitted.is_provided(name):
                fields[name] = getattr(submitted, name) or None
            else:
                fields[name] = getattr(previous, name) if previous else None
        return fields


def _build_exif(exif: ExifData | None) -> Exif | None:
    if exif is None:
        return None
    return Exif(
        model=exif.camera_model or None,
        aperture=exif.aperture or None,
        iso=exif.iso or None,
        exposure=exif.exposure or None,
        focal_length=exif.focal_length or None,
    )


def _original_resolution(exif: ExifData | None) -> Resolution:
    if exif is None:
        return Resolution(slug=ORIGINAL_RESOLUTION)
    return Resolution(
        slug=ORIGINAL_RESOLUTION,
        width=exif.width or None,
        height=exif.height or None,
    )


def _resolve_position(exif: ExifData | None) -> Position | None:
    """Coordinates are left to upstream geocoding; nothing is derived here."""
    return None


def _coerce(field_name: str, value: object) -> object:
    if value is None or value == "":
        return None
    if field_name == "taken_at" and isinstance(value, str):
        return datetime.fromisoformat(value)
    if field_name == "place_id" and not isinstance(value, UUID):
        return UUID(str(value))
    if field_name == "license":
        if isinstance(value, License):
            return value
        return License(name=str(value), is_edited=True)
    return value
