"""Domain models for pictures, their versions and proposed changes."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID

ORIGINAL_RESOLUTION = "original"

MODERATED_FIELDS = frozenset(
    {"name", "description", "source", "taken_at", "place_id", "license"}
)


class ChangeStatus(str, Enum):
    """Lifecycle states of a proposed change."""

    PROPOSED = "PROPOSED"
    VALIDATED = "VALIDATED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Exif:
    """Camera settings copied from the file's EXIF block."""

    model: str | None = None
    aperture: str | None = None
    iso: int | None = None
    exposure: str | None = None
    focal_length: str | None = None


@dataclass(frozen=True)
class ExifData:
    """Raw extractor output; every field is independently optional."""

    camera_model: str | None = None
    aperture: str | None = None
    iso: int | None = None
    exposure: str | None = None
    focal_length: str | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class Position:
    """Geographic coordinates."""

    lat: float
    lng: float


@dataclass(frozen=True)
class Resolution:
    """A rendition of the picture file."""

    slug: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class License:
    """License attached to a version."""

    name: str | None = None
    is_edited: bool = False


@dataclass(frozen=True)
class FileRecord:
    """Normalized description of an ingested binary."""

    path: str
    mime_type: str
    hash: str
    original_name: str
    size: int


@dataclass(frozen=True)
class Place:
    """A place a version can point at."""

    id: UUID
    name: str


@dataclass(frozen=True)
class Catalog:
    """A catalog a picture can belong to."""

    id: UUID
    name: str


@dataclass(frozen=True)
class Version:
    """Immutable snapshot of a picture's descriptive metadata."""

    id: UUID
    name: str
    source: str
    created_at: datetime
    description: str | None = None
    taken_at: datetime | None = None
    place_id: UUID | None = None
    exif: Exif | None = None
    position: Position | None = None
    resolutions: tuple[Resolution, ...] = ()
    license: License = License()

    @property
    def original_resolution(self) -> Resolution | None:
        """Return the file-backed resolution, if any."""
        for resolution in self.resolutions:
            if resolution.slug == ORIGINAL_RESOLUTION:
                return resolution
        return None


@dataclass(frozen=True)
class ChangeRecord:
    """A proposed edit to a single field of a picture's validated version."""

    id: UUID
    picture_id: UUID
    field: str
    value: object
    status: ChangeStatus
    created_at: datetime
    created_by: str

    def with_status(self, status: ChangeStatus) -> "ChangeRecord":
        """Return a copy of the record in a new state."""
        if self.status is not ChangeStatus.PROPOSED:
            raise ValueError(f"Change {self.id} is already {self.status.value}")
        return replace(self, status=status)


@dataclass
class Picture:
    """Root aggregate owning versions and change records."""

    id: UUID
    original_file_name: str
    versions: list[Version]
    validated_version_id: UUID
    file: FileRecord | None = None
    catalog_id: UUID | None = None
    object_changes: dict[UUID, ChangeRecord] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __post_init__(self) -> None:
        self._ensure_known(self.validated_version_id)

    @property
    def validated_version(self) -> Version:
        """Return the version currently considered authoritative."""
        for version in self.versions:
            if version.id == self.validated_version_id:
                return version
        raise LookupError(f"Validated version missing on picture {self.id}")

    def add_version(self, version: Version) -> None:
        """Append a version; versions are never removed."""
        if any(existing.id == version.id for existing in self.versions):
            raise ValueError(f"Version {version.id} already attached")
        self.versions.append(version)

    def set_validated_version(self, version_id: UUID) -> None:
        """Point the validated version at an attached version."""
        self._ensure_known(version_id)
        self.validated_version_id = version_id

    def replace_version(self, version: Version) -> None:
        """Swap the metadata of an attached version, keeping its position."""
        for index, existing in enumerate(self.versions):
            if existing.id == version.id:
                self.versions[index] = version
                return
        raise ValueError(f"Version {version.id} is not attached to {self.id}")

    def touch(self) -> None:
        self.updated_at = datetime.now(tz=UTC)

    def _ensure_known(self, version_id: UUID) -> None:
        if not any(version.id == version_id for version in self.versions):
            raise ValueError(f"Version {version_id} is not attached to {self.id}")
