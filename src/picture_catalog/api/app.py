"""FastAPI application factory."""

import logging
from uuid import UUID

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from picture_catalog.api.models import PictureRequest, serialize_picture
from picture_catalog.api.moderation import router as moderation_router
from picture_catalog.app_logging import configure_logging
from picture_catalog.containers import AppContainer
from picture_catalog.domain.errors import (
    CatalogError,
    CatalogNotFoundError,
    PictureNotFoundError,
    PlaceNotFoundError,
    ValidationError,
)

_NOT_FOUND_ERRORS = (PictureNotFoundError, PlaceNotFoundError, CatalogNotFoundError)
_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(moderation_router)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(
        request: Request, exc: CatalogError
    ) -> JSONResponse:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if isinstance(exc, _NOT_FOUND_ERRORS)
            else _UNPROCESSABLE
        )
        logger.info("Request failed: path=%s code=%s", request.url.path, exc.code)
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/pictures", status_code=status.HTTP_201_CREATED)
    async def create_picture(
        body: PictureRequest, request: Request
    ) -> dict[str, object]:
        """Create a picture from metadata and a base64 file."""
        state_container: AppContainer = request.app.state.container
        service = state_container.picture_service
        picture = service.create(body.to_submission())
        return serialize_picture(picture, service.file_url(picture))

    @app.get("/pictures")
    async def list_pictures(request: Request) -> dict[str, object]:
        """Return every picture."""
        state_container: AppContainer = request.app.state.container
        service = state_container.picture_service
        return {
            "pictures": [
                serialize_picture(picture, service.file_url(picture))
                for picture in service.list_pictures()
            ]
        }

    @app.get("/pictures/{picture_id}")
    async def get_picture(picture_id: UUID, request: Request) -> dict[str, object]:
        """Return a picture with its change records."""
        state_container: AppContainer = request.app.state.container
        service = state_container.picture_service
        picture = service.get_picture(picture_id)
        return serialize_picture(picture, service.file_url(picture))

    @app.patch("/pictures/{picture_id}")
    async def edit_picture(
        picture_id: UUID, body: PictureRequest, request: Request
    ) -> dict[str, object]:
        """Edit picture metadata, optionally replacing its file."""
        state_container: AppContainer = request.app.state.container
        service = state_container.picture_service
        picture = service.edit(picture_id, body.to_submission())
        return serialize_picture(picture, service.file_url(picture))

    @app.delete("/pictures/{picture_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_picture(picture_id: UUID, request: Request) -> Response:
        """Delete a picture and its binary."""
        state_container: AppContainer = request.app.state.container
        state_container.picture_service.delete(picture_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _error_body(exc: CatalogError) -> dict[str, object]:
    if isinstance(exc, ValidationError) and exc.errors:
        return {"errors": [error.to_dict() for error in exc.errors]}
    return {"errors": [exc.to_dict()]}
