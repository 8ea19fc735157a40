"""Supabase repository for moderation audit events."""

from dataclasses import dataclass

from supabase import Client

from picture_catalog.services.audit import AuditEvent, AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Appends audit events to the picture audit table."""

    client: Client

    def create_event(self, event: AuditEvent) -> None:
        """Insert one audit row."""
        self.client.table("picture_audit_events").insert(
            {
                "actor": event.actor,
                "picture_id": str(event.picture_id),
                "event_type": event.event_type,
                "before_json": event.before,
                "after_json": event.after,
                "occurred_at": event.occurred_at.isoformat(),
            }
        ).execute()
