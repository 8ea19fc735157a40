"""Supabase-backed picture document repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from picture_catalog.domain.documents import picture_from_document, picture_to_document
from picture_catalog.domain.pictures import Picture
from picture_catalog.services.pictures import PictureRepository


@dataclass
class SupabasePictureRepository(PictureRepository):
    """Stores each picture, versions included, as one JSON document row."""

    client: Client

    def get_picture(self, picture_id: UUID) -> Picture | None:
        """Return a picture by id, if present."""
        response = (
            self.client.table("pictures")
            .select("document")
            .eq("id", str(picture_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return picture_from_document(response.data[0]["document"])

    def list_pictures(self) -> list[Picture]:
        """Return all pictures, newest first."""
        response = (
            self.client.table("pictures")
            .select("document")
            .order("created_at", desc=True)
            .execute()
        )
        return [picture_from_document(row["document"]) for row in response.data or []]

    def save_picture(self, picture: Picture) -> None:
        """Insert or replace the picture document."""
        document = picture_to_document(picture)
        response = (
            self.client.table("pictures")
            .upsert(
                {
                    "id": document["id"],
                    "catalog_id": document["catalog_id"],
                    "document": document,
                    "created_at": document["created_at"],
                    "updated_at": document["updated_at"],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save picture")

    def delete_picture(self, picture_id: UUID) -> None:
        """Delete the picture row."""
        self.client.table("pictures").delete().eq("id", str(picture_id)).execute()
