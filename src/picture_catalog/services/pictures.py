"""Picture ingestion service: create, edit, delete and read pictures."""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath
from typing import Protocol
from uuid import UUID, uuid4

from picture_catalog.domain.errors import (
    CatalogError,
    CatalogNotFoundError,
    IngestionError,
    MissingFieldError,
    PictureNotFoundError,
    PlaceNotFoundError,
    raise_collected,
)
from picture_catalog.domain.pictures import (
    Catalog,
    ChangeRecord,
    ChangeStatus,
    FileRecord,
    Picture,
    Place,
)
from picture_catalog.domain.submissions import PictureSubmission
from picture_catalog.services.exif import ExifReader
from picture_catalog.services.files import FileIngestor, detect_mime_type
from picture_catalog.services.licenses import LicensePolicy
from picture_catalog.services.versions import VersionBuilder

_logger = logging.getLogger(__name__)


class PictureRepository(Protocol):
    """Document store for picture aggregates with embedded versions."""

    def get_picture(self, picture_id: UUID) -> Picture | None:
        """Return a picture by id."""

    def list_pictures(self) -> list[Picture]:
        """Return all pictures, newest first."""

    def save_picture(self, picture: Picture) -> None:
        """Insert or replace the picture document."""

    def delete_picture(self, picture_id: UUID) -> None:
        """Delete the picture document."""


class ChangeRecordRepository(Protocol):
    """Persistence interface for proposed changes."""

    def create_changes(self, changes: list[ChangeRecord]) -> None:
        """Persist new change records."""

    def find_by_ids(self, change_ids: list[UUID]) -> list[ChangeRecord]:
        """Return the records matching the ids, in any order."""

    def list_for_picture(self, picture_id: UUID) -> list[ChangeRecord]:
        """Return every record attached to a picture."""

    def update_status(self, change_ids: list[UUID], status: ChangeStatus) -> None:
        """Move the given records to a new status."""

    def delete_for_picture(self, picture_id: UUID) -> int:
        """Delete every record attached to a picture and return the count."""


class PlaceRepository(Protocol):
    """Lookup of places referenced by versions."""

    def get_place(self, place_id: UUID) -> Place | None:
        """Return a place by id."""

    def remove_picture(self, place_id: UUID, picture_id: UUID) -> None:
        """Detach a picture from the place."""


class CatalogRepository(Protocol):
    """Lookup of catalogs referenced by pictures."""

    def get_catalog(self, catalog_id: UUID) -> Catalog | None:
        """Return a catalog by id."""


class FileStore(Protocol):
    """Binary storage for picture files."""

    def upload(self, path: str, content: bytes, mime_type: str) -> None:
        """Store the content under the given path."""

    def remove(self, path: str) -> None:
        """Delete the binary stored under the given path."""

    def public_url(self, path: str) -> str:
        """Return a URL clients can fetch the binary from."""


@dataclass
class PictureService:  # noqa: PLR0902
    """Service that ingests binaries into versioned pictures."""

    pictures: PictureRepository
    changes: ChangeRecordRepository
    places: PlaceRepository
    catalogs: CatalogRepository
    file_store: FileStore
    ingestor: FileIngestor
    exif_reader: ExifReader
    builder: VersionBuilder
    license_policy: LicensePolicy

    def create(self, submission: PictureSubmission) -> Picture:
        """Create a picture with its first version from an uploaded file."""
        errors: list[CatalogError] = []
        missing = submission.missing_fields()
        if missing:
            errors.append(MissingFieldError(missing))
        resolved_license = self.license_policy.resolve(None, submission)
        license_error = self.license_policy.check(resolved_license)
        if license_error:
            errors.append(license_error)
        catalog_id = self._resolve_catalog(submission, None, errors)
        place_id = self._resolve_place(submission, None, errors)
        record = self._ingest(submission, submission.original_filename, errors)
        raise_collected(errors)
        if record is None or submission.file is None:
            raise MissingFieldError(["file"])

        exif = self.exif_reader.read(submission.file, record.original_name)
        version = self.builder.build(
            None, submission, exif, place_id, resolved_license
        )
        picture = Picture(
            id=uuid4(),
            original_file_name=record.path,
            versions=[version],
            validated_version_id=version.id,
            file=record,
            catalog_id=catalog_id,
        )
        self.file_store.upload(record.path, submission.file, record.mime_type)
        try:
            self.pictures.save_picture(picture)
        except Exception:
            self.file_store.remove(record.path)
            raise
        _logger.info("Picture created: id=%s file=%s", picture.id, record.path)
        return picture

    def edit(self, picture_id: UUID, submission: PictureSubmission) -> Picture:
        """Apply submitted metadata and, when the binary changed, a new version."""
        picture = self.get_picture(picture_id)
        baseline = picture.validated_version
        errors: list[CatalogError] = []
        resolved_license = self.license_policy.resolve(baseline.license, submission)
        if submission.license_name:
            license_error = self.license_policy.check(resolved_license)
            if license_error:
                errors.append(license_error)
        catalog_id = self._resolve_catalog(submission, picture.catalog_id, errors)
        place_id = self._resolve_place(submission, baseline.place_id, errors)
        record = self._ingest(submission, _declared_name(picture, submission), errors)
        raise_collected(errors)

        picture.catalog_id = catalog_id
        if record is None or submission.file is None or self._same_file(
            picture, record
        ):
            picture.replace_version(
                self.builder.merge(baseline, submission, place_id, resolved_license)
            )
            picture.touch()
            self.pictures.save_picture(picture)
            detach_place(self.places, picture, baseline.place_id)
            _logger.info("Picture metadata merged: id=%s", picture.id)
            return picture

        exif = self.exif_reader.read(submission.file, record.original_name)
        version = self.builder.build(
            baseline, submission, exif, place_id, resolved_license
        )
        previous_file = picture.file
        picture.add_version(version)
        picture.set_validated_version(version.id)
        picture.file = record
        picture.original_file_name = record.path
        picture.touch()
        self.file_store.upload(record.path, submission.file, record.mime_type)
        try:
            self.pictures.save_picture(picture)
        except Exception:
            self.file_store.remove(record.path)
            raise
        detach_place(self.places, picture, baseline.place_id)
        if previous_file is not None:
            self.file_store.remove(previous_file.path)
        _logger.info(
            "Picture file replaced: id=%s version=%s file=%s",
            picture.id,
            version.id,
            record.path,
        )
        return picture

    def delete(self, picture_id: UUID) -> None:
        """Delete a picture, its binary and its change records."""
        picture = self.get_picture(picture_id)
        place_id = picture.validated_version.place_id
        if place_id is not None:
            self.places.remove_picture(place_id, picture.id)
        if picture.file is not None:
            self.file_store.remove(picture.file.path)
        self.changes.delete_for_picture(picture.id)
        self.pictures.delete_picture(picture.id)
        _logger.info("Picture deleted: id=%s", picture.id)

    def get_picture(self, picture_id: UUID) -> Picture:
        """Return a picture with its change records attached."""
        return load_picture(self.pictures, self.changes, picture_id)

    def list_pictures(self) -> list[Picture]:
        """Return all pictures without their change records."""
        return self.pictures.list_pictures()

    def file_url(self, picture: Picture) -> str | None:
        """Return the public URL of the picture's binary."""
        if picture.file is None:
            return None
        return self.file_store.public_url(picture.file.path)

    def _ingest(
        self,
        submission: PictureSubmission,
        filename: str | None,
        errors: list[CatalogError],
    ) -> FileRecord | None:
        if not submission.file:
            return None
        try:
            return self.ingestor.ingest(submission.file, filename or "")
        except IngestionError as exc:
            errors.append(exc)
            return None

    def _resolve_catalog(
        self,
        submission: PictureSubmission,
        current: UUID | None,
        errors: list[CatalogError],
    ) -> UUID | None:
        if not submission.is_provided("catalog_id"):
            return current
        catalog_id = submission.catalog_id
        if catalog_id is None:
            return None
        if self.catalogs.get_catalog(catalog_id) is None:
            errors.append(CatalogNotFoundError(catalog_id))
            return current
        return catalog_id

    def _resolve_place(
        self,
        submission: PictureSubmission,
        current: UUID | None,
        errors: list[CatalogError],
    ) -> UUID | None:
        if not submission.is_provided("place_id"):
            return current
        place_id = submission.place_id
        if place_id is None:
            return None
        if self.places.get_place(place_id) is None:
            errors.append(PlaceNotFoundError(place_id))
            return current
        return place_id

    @staticmethod
    def _same_file(picture: Picture, record: FileRecord) -> bool:
        return picture.file is not None and picture.file.hash == record.hash


def load_picture(
    pictures: PictureRepository,
    changes: ChangeRecordRepository,
    picture_id: UUID,
) -> Picture:
    """Load a picture and attach its change records."""
    picture = pictures.get_picture(picture_id)
    if picture is None:
        raise PictureNotFoundError(picture_id)
    picture.object_changes = {
        change.id: change for change in changes.list_for_picture(picture_id)
    }
    return picture


def detach_place(
    places: PlaceRepository, picture: Picture, previous_place_id: UUID | None
) -> None:
    """Unlink the picture from a place its validated version no longer uses."""
    if previous_place_id is None:
        return
    if previous_place_id == picture.validated_version.place_id:
        return
    places.remove_picture(previous_place_id, picture.id)
    _logger.info(
        "Picture detached from place: id=%s place=%s", picture.id, previous_place_id
    )


def _declared_name(picture: Picture, submission: PictureSubmission) -> str:
    """Return the client file name, deriving one for unnamed replacement files."""
    if submission.original_filename:
        return submission.original_filename
    previous = (
        picture.file.original_name if picture.file else picture.original_file_name
    )
    if not submission.file:
        return previous
    mime_type = detect_mime_type(submission.file, "")
    extension = mimetypes.guess_extension(mime_type)
    if mime_type == "application/octet-stream" or not extension:
        return previous
    stem = PurePath(previous).stem or "picture"
    return f"{stem}{extension}"
