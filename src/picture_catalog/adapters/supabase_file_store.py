"""Supabase Storage implementation of the picture file store."""

from dataclasses import dataclass

from supabase import Client

from picture_catalog.services.pictures import FileStore


@dataclass
class SupabaseFileStore(FileStore):
    """Keeps picture binaries in a Supabase Storage bucket."""

    client: Client
    bucket: str

    def upload(self, path: str, content: bytes, mime_type: str) -> None:
        """Upload the binary under the given path."""
        self.client.storage.from_(self.bucket).upload(
            path=path,
            file=content,
            file_options={"content-type": mime_type},
        )

    def remove(self, path: str) -> None:
        """Remove the binary stored under the given path."""
        self.client.storage.from_(self.bucket).remove([path])

    def public_url(self, path: str) -> str:
        """Return the bucket's public URL for the path."""
        return self.client.storage.from_(self.bucket).get_public_url(path)
