"""EXIF extraction port and failure-tolerant reader."""

import logging
from dataclasses import dataclass
from typing import Protocol

from picture_catalog.domain.pictures import ExifData

_logger = logging.getLogger(__name__)


class ExifExtractor(Protocol):
    """Interface for reading EXIF metadata from image content."""

    def extract(self, content: bytes) -> ExifData | None:
        """Return extracted EXIF data, or None when nothing is available."""


@dataclass
class ExifReader:
    """Wraps an extractor so that extraction never fails a request."""

    extractor: ExifExtractor

    def read(self, content: bytes, filename: str) -> ExifData | None:
        """Return EXIF data for the content, treating failures as absent."""
        try:
            return self.extractor.extract(content)
        except Exception:
            _logger.exception("EXIF extraction failed", extra={"file_name": filename})
            return None
