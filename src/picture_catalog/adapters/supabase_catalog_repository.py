"""Supabase-backed catalog lookups."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from picture_catalog.domain.pictures import Catalog
from picture_catalog.services.pictures import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    client: Client

    def get_catalog(self, catalog_id: UUID) -> Catalog | None:
        """Return a catalog by id, if present."""
        response = (
            self.client.table("catalogs")
            .select("id, name")
            .eq("id", str(catalog_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Catalog(id=UUID(row["id"]), name=row["name"])
