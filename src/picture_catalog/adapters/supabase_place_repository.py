"""Supabase-backed place lookups."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from picture_catalog.domain.pictures import Place
from picture_catalog.services.pictures import PlaceRepository


@dataclass
class SupabasePlaceRepository(PlaceRepository):
    """Reads places and maintains their picture links."""

    client: Client

    def get_place(self, place_id: UUID) -> Place | None:
        """Return a place by id, if present."""
        response = (
            self.client.table("places")
            .select("id, name")
            .eq("id", str(place_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Place(id=UUID(row["id"]), name=row["name"])

    def remove_picture(self, place_id: UUID, picture_id: UUID) -> None:
        """Delete the link between a place and a picture."""
        self.client.table("place_pictures").delete().eq("place_id", str(place_id)).eq(
            "picture_id", str(picture_id)
        ).execute()
