"""Review workflow for proposed field-level changes."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from picture_catalog.domain.errors import (
    CatalogError,
    PlaceNotFoundError,
    ValidationError,
    raise_collected,
)
from picture_catalog.domain.pictures import (
    MODERATED_FIELDS,
    ChangeRecord,
    ChangeStatus,
    License,
    Picture,
)
from picture_catalog.domain.submissions import ChangeProposal
from picture_catalog.services.audit import AuditService
from picture_catalog.services.licenses import LicensePolicy
from picture_catalog.services.pictures import (
    ChangeRecordRepository,
    PictureRepository,
    PlaceRepository,
    detach_place,
    load_picture,
)
from picture_catalog.services.versions import VersionBuilder

_logger = logging.getLogger(__name__)

_TEXT_FIELDS = frozenset({"name", "source", "description"})


@dataclass
class ModerationService:
    """State machine moving change records from proposed to a final status.

    Records only ever leave ``PROPOSED``. Validation appends at most one
    version per batch and saves it before any record changes status, so a
    batch retried after a partial failure finds its values already applied,
    creates no second version and only finishes the status transition.
    """

    pictures: PictureRepository
    changes: ChangeRecordRepository
    places: PlaceRepository
    builder: VersionBuilder
    license_policy: LicensePolicy
    audit_service: AuditService

    def propose(
        self, picture_id: UUID, proposals: list[ChangeProposal], actor: str
    ) -> Picture:
        """Attach one proposed record per field/value pair."""
        picture = load_picture(self.pictures, self.changes, picture_id)
        errors: list[CatalogError] = []
        unknown = sorted({p.field for p in proposals} - MODERATED_FIELDS)
        if unknown:
            errors.append(
                ValidationError(f"Fields cannot be moderated: {', '.join(unknown)}")
            )
        values = [self._normalize(proposal, errors) for proposal in proposals]
        raise_collected(errors)

        now = datetime.now(tz=UTC)
        records = [
            ChangeRecord(
                id=uuid4(),
                picture_id=picture.id,
                field=proposal.field,
                value=value,
                status=ChangeStatus.PROPOSED,
                created_at=now,
                created_by=actor,
            )
            for proposal, value in zip(proposals, values, strict=True)
        ]
        if not records:
            return picture
        self.changes.create_changes(records)
        picture.object_changes.update({record.id: record for record in records})
        self.audit_service.record_event(
            actor=actor,
            picture_id=picture.id,
            event_type="changes_proposed",
            after={"change_ids": [str(record.id) for record in records]},
        )
        _logger.info(
            "Changes proposed: picture=%s count=%s actor=%s",
            picture.id,
            len(records),
            actor,
        )
        return picture

    def validate(
        self, picture_id: UUID, change_ids: list[UUID], actor: str
    ) -> Picture:
        """Promote the picture's pending records into one new version.

        Later records win when several touch the same field. A batch that
        reproduces the validated version creates no version, but its records
        are still marked validated.
        """
        picture = load_picture(self.pictures, self.changes, picture_id)
        records = self._pending_for(picture, change_ids)
        if not records:
            return picture

        baseline = picture.validated_version
        candidate = self.builder.apply_changes(
            baseline, ((record.field, record.value) for record in records)
        )
        if self.builder.same_content(candidate, baseline):
            _logger.info(
                "Validated batch matches current version: picture=%s version=%s",
                picture.id,
                baseline.id,
            )
        else:
            picture.add_version(candidate)
            picture.set_validated_version(candidate.id)
            picture.touch()
            self.pictures.save_picture(picture)
            detach_place(self.places, picture, baseline.place_id)

        self._transition(picture, records, ChangeStatus.VALIDATED)
        self.audit_service.record_event(
            actor=actor,
            picture_id=picture.id,
            event_type="changes_validated",
            before={"validated_version_id": str(baseline.id)},
            after={
                "validated_version_id": str(picture.validated_version_id),
                "change_ids": [str(record.id) for record in records],
            },
        )
        _logger.info(
            "Changes validated: picture=%s count=%s version=%s actor=%s",
            picture.id,
            len(records),
            picture.validated_version_id,
            actor,
        )
        return picture

    def reject(self, picture_id: UUID, change_ids: list[UUID], actor: str) -> Picture:
        """Reject pending records; records of other pictures are skipped."""
        picture = load_picture(self.pictures, self.changes, picture_id)
        records = self._pending_for(picture, change_ids)
        if not records:
            return picture
        self._transition(picture, records, ChangeStatus.REJECTED)
        self.audit_service.record_event(
            actor=actor,
            picture_id=picture.id,
            event_type="changes_rejected",
            after={"change_ids": [str(record.id) for record in records]},
        )
        _logger.info(
            "Changes rejected: picture=%s count=%s actor=%s",
            picture.id,
            len(records),
            actor,
        )
        return picture

    def clear(self, picture_id: UUID, actor: str) -> Picture:
        """Delete every change record of the picture, whatever its status."""
        picture = load_picture(self.pictures, self.changes, picture_id)
        removed_ids = [str(change_id) for change_id in picture.object_changes]
        deleted = self.changes.delete_for_picture(picture.id)
        picture.object_changes = {}
        self.audit_service.record_event(
            actor=actor,
            picture_id=picture.id,
            event_type="changes_cleared",
            before={"change_ids": removed_ids},
        )
        _logger.info(
            "Changes cleared: picture=%s count=%s actor=%s",
            picture.id,
            deleted,
            actor,
        )
        return picture

    def _pending_for(
        self, picture: Picture, change_ids: Iterable[UUID]
    ) -> list[ChangeRecord]:
        ordered_ids = list(dict.fromkeys(change_ids))
        if not ordered_ids:
            return []
        found = {record.id: record for record in self.changes.find_by_ids(ordered_ids)}
        records: list[ChangeRecord] = []
        for change_id in ordered_ids:
            record = found.get(change_id)
            if record is None:
                continue
            if record.picture_id != picture.id:
                _logger.warning(
                    "Skipping change owned by another picture: change=%s picture=%s",
                    change_id,
                    picture.id,
                )
                continue
            if record.status is ChangeStatus.PROPOSED:
                records.append(record)
        return records

    def _transition(
        self, picture: Picture, records: list[ChangeRecord], status: ChangeStatus
    ) -> None:
        self.changes.update_status([record.id for record in records], status)
        for record in records:
            picture.object_changes[record.id] = record.with_status(status)

    def _normalize(
        self, proposal: ChangeProposal, errors: list[CatalogError]
    ) -> object:
        value = proposal.value
        if value is None or value == "":
            return None
        if proposal.field == "taken_at":
            if isinstance(value, datetime):
                return value.isoformat()
            try:
                return datetime.fromisoformat(str(value)).isoformat()
            except ValueError:
                errors.append(ValidationError(f"Invalid taken_at value: {value!r}"))
                return None
        if proposal.field == "place_id":
            try:
                place_id = UUID(str(value))
            except ValueError:
                errors.append(ValidationError(f"Invalid place_id value: {value!r}"))
                return None
            if self.places.get_place(place_id) is None:
                errors.append(PlaceNotFoundError(place_id))
            return str(place_id)
        if proposal.field == "license":
            license_error = self.license_policy.check(
                License(name=str(value), is_edited=True)
            )
            if license_error:
                errors.append(license_error)
            return str(value)
        if proposal.field in _TEXT_FIELDS and not isinstance(value, str):
            errors.append(
                ValidationError(f"{proposal.field} must be text, got {value!r}")
            )
            return None
        return value
