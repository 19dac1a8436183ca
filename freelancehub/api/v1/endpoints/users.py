"""
User Profile Endpoints Module

Signed-in users can read and edit their own profile. Guests have no profile.
"""
from typing import Any
from fastapi import APIRouter, Depends
from sqlmodel import Session

from freelancehub.db.session import get_db
from freelancehub.models.user import ProfileUpdate, User, UserRead
from freelancehub.utils import utcnow_iso
from freelancehub.api import deps

router = APIRouter()


@router.get("/me", response_model=UserRead)
def read_user_me(
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Get the current authenticated user's profile.

    Returns:
        UserRead: The current user's profile
    """
    return current_user


@router.put("/me", response_model=UserRead)
def update_user_me(
    *,
    db: Session = Depends(get_db),
    user_in: ProfileUpdate,
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Update the current user's own profile.

    Args:
        db: Database session
        user_in: Updated profile data (only provided fields are updated)
        current_user: The authenticated user

    Returns:
        UserRead: The updated user profile
    """
    for field, value in user_in.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    current_user.updated_at = utcnow_iso()

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user
