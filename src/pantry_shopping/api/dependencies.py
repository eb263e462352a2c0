"""Request-scoped dependencies shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from pantry_shopping.api.errors import UnauthorizedError

if TYPE_CHECKING:
    from pantry_shopping.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


async def require_user(request: Request) -> str:
    """Return the caller's user id from the identity header."""
    container = get_container(request)
    user_id = request.headers.get(container.settings.user_id_header)
    if not user_id or not user_id.strip():
        raise UnauthorizedError("Authentication required")
    return user_id.strip()


CurrentUser = Annotated[str, Depends(require_user)]
