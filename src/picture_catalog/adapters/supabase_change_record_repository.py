"""Supabase-backed change record repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from picture_catalog.domain.documents import change_from_document, change_to_document
from picture_catalog.domain.pictures import ChangeRecord, ChangeStatus
from picture_catalog.services.pictures import ChangeRecordRepository


@dataclass
class SupabaseChangeRecordRepository(ChangeRecordRepository):
    """Supabase implementation for proposed picture changes."""

    client: Client

    def create_changes(self, changes: list[ChangeRecord]) -> None:
        """Insert change record rows."""
        if not changes:
            return
        response = (
            self.client.table("picture_changes")
            .insert([change_to_document(change) for change in changes])
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create change records")

    def find_by_ids(self, change_ids: list[UUID]) -> list[ChangeRecord]:
        """Return change records matching the ids."""
        if not change_ids:
            return []
        response = (
            self.client.table("picture_changes")
            .select("*")
            .in_("id", [str(change_id) for change_id in change_ids])
            .execute()
        )
        return [change_from_document(row) for row in response.data or []]

    def list_for_picture(self, picture_id: UUID) -> list[ChangeRecord]:
        """Return every change record of a picture, oldest first."""
        response = (
            self.client.table("picture_changes")
            .select("*")
            .eq("picture_id", str(picture_id))
            .order("created_at")
            .execute()
        )
        return [change_from_document(row) for row in response.data or []]

    def update_status(self, change_ids: list[UUID], status: ChangeStatus) -> None:
        """Move change records to a new status."""
        if not change_ids:
            return
        self.client.table("picture_changes").update({"status": status.value}).in_(
            "id", [str(change_id) for change_id in change_ids]
        ).execute()

    def delete_for_picture(self, picture_id: UUID) -> int:
        """Delete a picture's change records and return how many were removed."""
        response = (
            self.client.table("picture_changes")
            .delete()
            .eq("picture_id", str(picture_id))
            .execute()
        )
        return len(response.data or [])
