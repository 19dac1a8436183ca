"""
Client Model Module

This module defines the Client model representing the customers a freelancer
works for. Every client belongs to exactly one owning identity.
"""
from enum import Enum
from typing import Optional
from pydantic import EmailStr, field_validator
from sqlmodel import SQLModel, Field, AutoString
import uuid

from freelancehub.utils import utcnow_iso


class ClientStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class ClientBase(SQLModel):
    """
    Base properties for a Client.
    """
    # Required contact information
    name: str = Field(nullable=False)
    email: str = Field(nullable=False)

    # Optional contact details
    company: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    status: str = Field(default=ClientStatus.active.value, sa_type=AutoString)


class Client(ClientBase, table=True):
    """
    Client table model.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each client
        name: Client display name (required)
        email: Primary contact email (required)
        company: Company or organization name
        phone: Contact phone number
        notes: Free-form notes about the client
        status: "active" or "inactive"
        user_id: Owning identity; every query is filtered on it
        created_at: ISO timestamp of when the client record was created
        updated_at: ISO timestamp of the last change
    """
    __tablename__ = "clients"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Ownership
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    # Audit timestamps
    created_at: Optional[str] = Field(default_factory=utcnow_iso)
    updated_at: Optional[str] = Field(default_factory=utcnow_iso)


class ClientCreate(SQLModel):
    """Schema for creating a client."""
    name: str = Field(min_length=2)
    email: EmailStr
    company: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: ClientStatus = ClientStatus.active


class ClientUpdate(SQLModel):
    """Schema for a partial client update; only provided fields change."""
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[ClientStatus] = None

    @field_validator("name", "email", "status", mode="before")
    @classmethod
    def required_not_null(cls, v, info):
        # Omit a field to leave it unchanged; null would blank a required column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ClientRead(ClientBase):
    """Schema for reading a client from either storage backend."""
    id: str
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ClientSnapshot(SQLModel):
    """The client fields embedded in project listings and invoices."""
    name: str
    email: Optional[str] = None
    company: Optional[str] = None
