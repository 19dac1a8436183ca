"""
User Model Module

This module defines the User model: the backing identity record that owns
clients and projects. Users are provisioned by the external identity provider,
except guest users, which the demo data seeder mints on demand.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from freelancehub.utils import utcnow_iso


class UserBase(SQLModel):
    """
    Profile fields shared by the table model and the read schema.
    """
    email: str = Field(unique=True, index=True, nullable=False)

    # Profile information
    full_name: Optional[str] = None
    username: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None

    # Guest identities are throwaway accounts created for demo data
    is_guest: bool = False


class User(UserBase, table=True):
    """
    User model representing an owning identity.

    Attributes:
        id: Unique identifier (UUID), matches the identity provider's user id
        email: User's email address (required, unique, indexed)
        full_name: User's full display name
        username: Public handle shown in the dashboard header
        website: Personal or business website
        avatar_url: URL to user's avatar image
        is_guest: True for identities minted by guest-mode demo seeding
        created_at: ISO timestamp when the user record was created
        updated_at: ISO timestamp of the last profile change
    """
    __tablename__ = "users"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Audit timestamps
    created_at: Optional[str] = Field(default_factory=utcnow_iso)
    updated_at: Optional[str] = Field(default_factory=utcnow_iso)


class UserRead(UserBase):
    """Schema for reading a user profile."""
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdate(SQLModel):
    """Fields a user may change on their own profile."""
    full_name: Optional[str] = None
    username: Optional[str] = None
    website: Optional[str] = None
