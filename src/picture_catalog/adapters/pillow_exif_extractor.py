"""Pillow-based EXIF extractor."""

from dataclasses import dataclass
from io import BytesIO

from PIL import ExifTags, Image, UnidentifiedImageError

from picture_catalog.domain.pictures import ExifData
from picture_catalog.services.exif import ExifExtractor


@dataclass
class PillowExifExtractor(ExifExtractor):
    """Reads camera settings and pixel size with Pillow."""

    def extract(self, content: bytes) -> ExifData | None:
        """Return EXIF data, or None when the content is not an image."""
        try:
            image = Image.open(BytesIO(content))
        except UnidentifiedImageError:
            return None
        with image:
            width, height = image.size
            exif = image.getexif()
            camera = exif.get_ifd(ExifTags.IFD.Exif)
            return ExifData(
                camera_model=_clean_text(exif.get(ExifTags.Base.Model)),
                aperture=_format_aperture(camera.get(ExifTags.Base.FNumber)),
                iso=_format_iso(camera.get(ExifTags.Base.ISOSpeedRatings)),
                exposure=_format_exposure(camera.get(ExifTags.Base.ExposureTime)),
                focal_length=_format_focal_length(
                    camera.get(ExifTags.Base.FocalLength)
                ),
                width=width or None,
                height=height or None,
            )


def _clean_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip("\x00 ").strip()
    return text or None


def _as_float(value: object) -> float | None:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return number if number > 0 else None


def _format_aperture(value: object) -> str | None:
    number = _as_float(value)
    return f"f/{number:g}" if number else None


def _format_iso(value: object) -> int | None:
    if isinstance(value, tuple | list):
        value = value[0] if value else None
    if isinstance(value, int) and value > 0:
        return value
    return None


def _format_exposure(value: object) -> str | None:
    seconds = _as_float(value)
    if seconds is None:
        return None
    if seconds < 1:
        return f"1/{round(1 / seconds)}"
    return f"{seconds:g}"


def _format_focal_length(value: object) -> str | None:
    number = _as_float(value)
    return f"{number:g}mm" if number else None
