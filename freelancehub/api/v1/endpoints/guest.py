"""
Guest Session Endpoints Module

A guest session gives an anonymous visitor a private, in-process store for
clients and projects. The session id travels in an HTTP-only cookie (or the
X-Guest-Session header for API clients); nothing is written to the database.
"""
import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, Request, Response

from freelancehub.core.config import settings
from freelancehub.services.guest_store import GuestSessionRegistry
from freelancehub.api import deps

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/session", status_code=201)
def start_guest_session(
    response: Response,
    registry: GuestSessionRegistry = Depends(deps.get_guest_registry),
) -> Any:
    """
    Start a guest session with an empty store.

    Returns:
        dict: The new session id, also set as the guest session cookie
    """
    session_id = registry.start_session()
    response.set_cookie(
        key=settings.GUEST_SESSION_COOKIE,
        value=session_id,
        httponly=True,
        samesite="lax",
    )
    logger.info("Guest session started (%d active)", len(registry))
    return {"session_id": session_id}


@router.delete("/session")
def end_guest_session(
    request: Request,
    response: Response,
    registry: GuestSessionRegistry = Depends(deps.get_guest_registry),
) -> Any:
    """
    End the caller's guest session and discard its store.

    Also clears the seeded guest identity cookie, so the browser drops back
    to anonymous. Ending a session that is already gone is not an error.
    """
    session_id: Optional[str] = (
        request.headers.get(deps.GUEST_SESSION_HEADER)
        or request.cookies.get(settings.GUEST_SESSION_COOKIE)
    )
    ended = registry.end_session(session_id) if session_id else False
    response.delete_cookie(settings.GUEST_SESSION_COOKIE)
    response.delete_cookie(settings.GUEST_USER_COOKIE)
    return {"status": "success", "ended": ended}
