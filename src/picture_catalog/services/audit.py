"""Audit trail for moderation transitions."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class AuditEvent:
    """One recorded transition of a picture's moderation state."""

    actor: str
    picture_id: UUID
    event_type: str
    before: dict[str, object] | None
    after: dict[str, object] | None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(self, event: AuditEvent) -> None:
        """Create an audit event row."""


@dataclass
class AuditService:
    """Service for recording who moved a picture through moderation."""

    repository: AuditRepository

    def record_event(  # noqa: PLR0913
        self,
        actor: str,
        picture_id: UUID,
        event_type: str,
        before: dict[str, object] | None = None,
        after: dict[str, object] | None = None,
    ) -> AuditEvent:
        """Persist an audit event and return it."""
        event = AuditEvent(
            actor=actor,
            picture_id=picture_id,
            event_type=event_type,
            before=before,
            after=after,
        )
        self.repository.create_event(event)
        return event
