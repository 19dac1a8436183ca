"""
API Dependencies Module

This module provides FastAPI dependency functions that resolve the acting
identity and hand endpoints a data-access object bound to it.

Three kinds of caller are recognised, checked in this order:
1. Authenticated users: bearer token in the Authorization header or the
   HTTP-only ``access_token`` cookie (for browser clients)
2. Guests with seeded demo data: ``X-Guest-User-Id`` header or cookie naming
   a guest identity minted by the demo data seeder
3. Guests with local data: ``X-Guest-Session`` header or cookie naming a
   session in the guest store registry
"""
from typing import Optional, TypeVar
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from freelancehub.core.config import settings
from freelancehub.core.security import decode_access_token
from freelancehub.db.session import get_db
from freelancehub.models.user import User
from freelancehub.services.guest_store import GuestSessionRegistry
from freelancehub.services.storage import DataAccess, Identity, IdentityMode, Result

T = TypeVar("T")

# Tokens come from the external identity provider; there is no login route here.
# auto_error=False allows us to check cookies and guest credentials as a fallback
bearer_scheme = HTTPBearer(auto_error=False)

GUEST_USER_HEADER = "X-Guest-User-Id"
GUEST_SESSION_HEADER = "X-Guest-Session"


def get_guest_registry(request: Request) -> GuestSessionRegistry:
    return request.app.state.guest_registry


def _bearer_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials:
        return credentials.credentials
    token = request.cookies.get("access_token")
    # Cookie format is "Bearer <token>", so we need to extract the token
    if token and token.startswith("Bearer "):
        token = token.replace("Bearer ", "", 1)
    return token or None


def get_current_identity(
    request: Request,
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """
    Resolve the acting identity, or None for an anonymous request.

    Raises:
        HTTPException 403: If a token is presented but cannot be validated
        HTTPException 404: If the token or guest header names an unknown user
    """
    token = _bearer_token(request, credentials)
    if token:
        user_id = decode_access_token(token)
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Could not validate credentials",
            )
        user = db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return Identity(mode=IdentityMode.guest if user.is_guest else IdentityMode.user, user_id=user.id)

    guest_user_id = request.headers.get(GUEST_USER_HEADER) or request.cookies.get(settings.GUEST_USER_COOKIE)
    if guest_user_id:
        user = db.get(User, guest_user_id)
        # Only seeded guest identities may be claimed without a token
        if not user or not user.is_guest:
            raise HTTPException(status_code=404, detail="Guest user not found")
        return Identity(mode=IdentityMode.guest, user_id=user.id)

    guest_session = request.headers.get(GUEST_SESSION_HEADER) or request.cookies.get(settings.GUEST_SESSION_COOKIE)
    if guest_session:
        return Identity(mode=IdentityMode.guest, guest_session=guest_session)

    return None


def require_identity(identity: Optional[Identity] = Depends(get_current_identity)) -> Identity:
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def get_current_user(
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency that requires an authenticated, non-guest user.
    """
    if identity.is_guest or not identity.user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return db.get(User, identity.user_id)


def get_data_access(
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
    registry: GuestSessionRegistry = Depends(get_guest_registry),
) -> DataAccess:
    """Data access bound to the caller's storage backend."""
    return DataAccess.for_identity(identity, db, registry)


# HTTP status for each data-access error kind
ERROR_STATUS = {
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation": 422,
    "conflict": status.HTTP_409_CONFLICT,
    "backend": status.HTTP_502_BAD_GATEWAY,
}


def unwrap(result: Result[T]) -> T:
    """Return a result's data, or raise the HTTP error matching its kind."""
    if result.ok:
        return result.data
    raise HTTPException(status_code=ERROR_STATUS.get(result.kind, status.HTTP_400_BAD_REQUEST), detail=result.error)
