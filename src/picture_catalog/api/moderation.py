"""Change moderation endpoints; review actions need the admin token."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from picture_catalog.api.models import (
    ChangeIdsRequest,
    ProposeChangesRequest,
    serialize_picture,
)

if TYPE_CHECKING:
    from picture_catalog.containers import AppContainer

router = APIRouter(prefix="/pictures/{picture_id}/changes", tags=["moderation"])

_ANONYMOUS = "anonymous"


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


async def current_actor(x_actor: str | None = Header(default=None)) -> str:
    """Return the acting user named by the ``X-Actor`` header."""
    return x_actor.strip() if x_actor and x_actor.strip() else _ANONYMOUS


@router.post("")
async def propose_changes(
    picture_id: UUID,
    body: ProposeChangesRequest,
    request: Request,
    actor: str = Depends(current_actor),
) -> dict[str, object]:
    """Attach proposed changes to a picture."""
    container: AppContainer = request.app.state.container
    picture = container.moderation_service.propose(picture_id, body.changes, actor)
    return serialize_picture(picture, container.picture_service.file_url(picture))


@router.post("/validate", dependencies=[Depends(require_admin)])
async def validate_changes(
    picture_id: UUID,
    body: ChangeIdsRequest,
    request: Request,
    actor: str = Depends(current_actor),
) -> dict[str, object]:
    """Promote proposed changes into a new validated version."""
    container: AppContainer = request.app.state.container
    picture = container.moderation_service.validate(
        picture_id, body.change_ids, actor
    )
    return serialize_picture(picture, container.picture_service.file_url(picture))


@router.post("/reject", dependencies=[Depends(require_admin)])
async def reject_changes(
    picture_id: UUID,
    body: ChangeIdsRequest,
    request: Request,
    actor: str = Depends(current_actor),
) -> dict[str, object]:
    """Reject proposed changes."""
    container: AppContainer = request.app.state.container
    picture = container.moderation_service.reject(picture_id, body.change_ids, actor)
    return serialize_picture(picture, container.picture_service.file_url(picture))


@router.delete("", dependencies=[Depends(require_admin)])
async def clear_changes(
    picture_id: UUID,
    request: Request,
    actor: str = Depends(current_actor),
) -> dict[str, object]:
    """Delete every change record of a picture."""
    container: AppContainer = request.app.state.container
    picture = container.moderation_service.clear(picture_id, actor)
    return serialize_picture(picture, container.picture_service.file_url(picture))
