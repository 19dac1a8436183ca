"""
Demo Data Endpoints Module

Populates an empty account with the demo catalog of clients and projects, so
a new visitor has something to explore. Guests can seed too: the seeder mints
a throwaway guest identity and the browser keeps it in a cookie.
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from freelancehub.core.config import settings
from freelancehub.db.session import get_db
from freelancehub.services.demo_data import DemoDataSeeder, DemoDataStatus, SeedSummary
from freelancehub.services.storage import DataAccess, Identity
from freelancehub.api import deps

router = APIRouter()


@router.post("/seed", response_model=SeedSummary, status_code=201)
def seed_demo_data(
    response: Response,
    guest: bool = False,
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(deps.get_current_identity),
) -> Any:
    """
    Seed the demo catalog for the caller.

    Args:
        guest: Mint a new guest identity and seed for it instead of the caller
        db: Database session
        identity: The caller, if any

    Returns:
        SeedSummary: How many clients and projects were created, and the
        guest identity id when guest is true

    Raises:
        HTTPException 401: If guest is false and the caller is not signed in
        HTTPException 403: If demo data is disabled
        HTTPException 409: If the account already has clients
        HTTPException 502: If an insert fails
    """
    if not settings.DEMO_DATA_ENABLED:
        raise HTTPException(status_code=403, detail="Demo data is disabled")

    owner_id = identity.user_id if identity else None
    summary = deps.unwrap(DemoDataSeeder(db).seed(owner_id=owner_id, guest_mode=guest))

    if summary.guest_user_id:
        response.set_cookie(
            key=settings.GUEST_USER_COOKIE,
            value=summary.guest_user_id,
            httponly=True,
            samesite="lax",
        )
    return summary


@router.get("/status", response_model=DemoDataStatus)
def demo_data_status(
    identity: Identity = Depends(deps.require_identity),
    db: Session = Depends(get_db),
    data: DataAccess = Depends(deps.get_data_access),
) -> Any:
    """
    Report whether the caller already has data.

    Used by the dashboard to decide whether to offer seeding.
    """
    if identity.user_id:
        return deps.unwrap(DemoDataSeeder(db).status(identity.user_id))

    client_count = deps.unwrap(data.count_clients())
    project_count = len(deps.unwrap(data.list_projects()))
    return DemoDataStatus(
        has_data=client_count > 0 or project_count > 0,
        client_count=client_count,
        project_count=project_count,
    )
