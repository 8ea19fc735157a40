"""Content-addressed ingestion of uploaded binaries."""

import hashlib
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath
from typing import Protocol
from uuid import uuid4

from picture_catalog.domain.errors import IngestionError
from picture_catalog.domain.pictures import FileRecord

_CHUNK_SIZE = 8192


class FileIngestor(Protocol):
    """Interface for turning raw bytes into a file record."""

    def ingest(self, content: bytes, filename: str) -> FileRecord:
        """Return a normalized file record for the content."""


@dataclass
class HashingFileIngestor(FileIngestor):
    """Ingestor that hashes content and generates a unique storage name."""

    algorithm: str = "sha256"
    prefix: str = "picture"

    def ingest(self, content: bytes, filename: str) -> FileRecord:
        """Hash the content and describe it as a file record."""
        if not content:
            raise IngestionError("Uploaded file is empty", filename=filename)
        mime_type = detect_mime_type(content, filename)
        return FileRecord(
            path=self.storage_name(filename, mime_type),
            mime_type=mime_type,
            hash=compute_hash(content, self.algorithm),
            original_name=filename,
            size=len(content),
        )

    def storage_name(self, filename: str, mime_type: str) -> str:
        """Build a collision-resistant name keeping the original extension."""
        extension = PurePath(filename).suffix.lower()
        if not extension:
            extension = mimetypes.guess_extension(mime_type) or ""
        return f"{self.prefix}{uuid4().hex}{extension}"


def compute_hash(content: bytes, algorithm: str = "sha256") -> str:
    """Return the hex digest of the content."""
    digest = hashlib.new(algorithm)
    view = memoryview(content)
    for start in range(0, len(view), _CHUNK_SIZE):
        digest.update(view[start : start + _CHUNK_SIZE])
    return digest.hexdigest()


def detect_mime_type(content: bytes, filename: str) -> str:
    """Infer a MIME type from file signatures, then from the extension."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    if content[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    if content[:4] in {b"II*\x00", b"MM\x00*"}:
        return "image/tiff"
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"
