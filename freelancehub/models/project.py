"""
Project Model Module

This module defines the Project model for tracking billable work, its budget,
status and timeline, and its optional link to a client.
"""
from datetime import date
from enum import Enum
from typing import Optional
from pydantic import field_validator
from sqlmodel import SQLModel, Field, AutoString
import uuid

from freelancehub.models.client import ClientSnapshot
from freelancehub.utils import utcnow_iso


class ProjectStatus(str, Enum):
    planning = "planning"
    in_progress = "in_progress"
    completed = "completed"
    on_hold = "on_hold"
    cancelled = "cancelled"


class ProjectBase(SQLModel):
    """
    Base properties for a Project.
    """
    # Basic project information
    title: str = Field(nullable=False)
    description: Optional[str] = None

    # Agreed project value; counted as revenue once the project is completed
    budget: float = Field(default=0)

    # Any status may follow any other
    status: str = Field(default=ProjectStatus.planning.value, sa_type=AutoString)

    # Timeline - dates stored as ISO format strings (YYYY-MM-DD)
    deadline: Optional[str] = None
    start_date: Optional[str] = None
    actual_end_date: Optional[str] = None


class Project(ProjectBase, table=True):
    """
    Project table model.

    Attributes:
        id: Unique identifier (UUID)
        title: Project title (required)
        description: Detailed project description
        budget: Project value, never negative
        status: One of "planning", "in_progress", "completed", "on_hold", "cancelled"
        client_id: Client the project is for; None for unassigned projects
        user_id: Owning identity; every query is filtered on it
        deadline: Due date in ISO format (YYYY-MM-DD)
        start_date: Start date in ISO format
        actual_end_date: Date the work was delivered
        created_at: ISO timestamp when the project was created
        updated_at: ISO timestamp when the project was last modified
    """
    __tablename__ = "projects"

    # Primary key
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Relationships
    client_id: Optional[str] = Field(default=None, foreign_key="clients.id", ondelete="SET NULL")
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)

    # Audit timestamps - automatically managed
    created_at: Optional[str] = Field(default_factory=utcnow_iso, index=True)
    updated_at: Optional[str] = Field(default_factory=utcnow_iso)


class ProjectCreate(SQLModel):
    """Schema for creating a project."""
    title: str = Field(min_length=1)
    description: Optional[str] = None
    budget: float = Field(ge=0)
    status: ProjectStatus = ProjectStatus.planning
    client_id: Optional[str] = None
    deadline: Optional[date] = None
    start_date: Optional[date] = None
    actual_end_date: Optional[date] = None

    @field_validator("client_id", "deadline", "start_date", "actual_end_date", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        # Forms submit "" for an unselected client or an empty date input
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ProjectUpdate(SQLModel):
    """Schema for a partial project update; only provided fields change."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    status: Optional[ProjectStatus] = None
    client_id: Optional[str] = None
    deadline: Optional[date] = None
    start_date: Optional[date] = None
    actual_end_date: Optional[date] = None

    @field_validator("client_id", "deadline", "start_date", "actual_end_date", mode="before")
    @classmethod
    def blank_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("title", "budget", "status", mode="before")
    @classmethod
    def required_not_null(cls, v, info):
        # Omit a field to leave it unchanged; null would blank a required column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class ProjectRead(ProjectBase):
    """Schema for reading a project, with a snapshot of its client."""
    id: str
    client_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    client: Optional[ClientSnapshot] = None
