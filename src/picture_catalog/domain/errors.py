"""Request-scoped errors raised by the catalog services."""

from uuid import UUID


class CatalogError(Exception):
    """Base class for recoverable catalog errors.

    Each error carries a stable ``code`` and a context mapping so callers can
    report it without parsing the message.
    """

    code = "CATALOG_ERROR"

    def __init__(self, message: str, **context: object) -> None:
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        context = {
            key: str(value) if isinstance(value, UUID) else value
            for key, value in self.context.items()
        }
        return {"code": self.code, "message": str(self), **context}


class MissingFieldError(CatalogError):
    code = "MISSING_FIELD"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            f'These fields are missing: "{", ".join(fields)}"', fields=fields
        )


class InvalidLicenseError(CatalogError):
    code = "INVALID_LICENSE"

    def __init__(self, name: str | None) -> None:
        self.name = name
        super().__init__(f"License {name!r} is not recognized", license=name)


class PictureNotFoundError(CatalogError):
    code = "PICTURE_NOT_FOUND"

    def __init__(self, picture_id: UUID) -> None:
        super().__init__(f"Picture {picture_id} not found", picture_id=picture_id)


class PlaceNotFoundError(CatalogError):
    code = "PLACE_NOT_FOUND"

    def __init__(self, place_id: UUID) -> None:
        super().__init__(f"Place {place_id} not found", place_id=place_id)


class CatalogNotFoundError(CatalogError):
    code = "CATALOG_NOT_FOUND"

    def __init__(self, catalog_id: UUID) -> None:
        super().__init__(f"Catalog {catalog_id} not found", catalog_id=catalog_id)


class IngestionError(CatalogError):
    code = "INGESTION_FAILED"


class ValidationError(CatalogError):
    """Structural failure, or several errors collected in one pass."""

    code = "VALIDATION_FAILED"

    def __init__(
        self, message: str | None = None, errors: list[CatalogError] | None = None
    ) -> None:
        self.errors = errors or []
        if message is None:
            message = "; ".join(str(error) for error in self.errors)
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = [error.to_dict() for error in self.errors]
        return payload


def raise_collected(errors: list[CatalogError]) -> None:
    """Raise the collected errors, if any, as a single exception."""
    if not errors:
        return
    if len(errors) == 1:
        raise errors[0]
    raise ValidationError(errors=errors)
