"""
Project Endpoints Module

This module provides CRUD endpoints for managing projects, plus the invoice
export for completed projects. Users can only see and modify their own
projects.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from freelancehub.exc import ValidationError
from freelancehub.models.project import ProjectCreate, ProjectRead, ProjectUpdate
from freelancehub.services.invoice import InvoiceRecord, build_invoice
from freelancehub.services.storage import DataAccess
from freelancehub.utils import utcnow
from freelancehub.api import deps

router = APIRouter()


@router.get("", response_model=List[ProjectRead])
def list_projects(
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Retrieve the caller's projects, newest first.

    Each project carries a snapshot (name, email, company) of its client, or
    null when it is unassigned.

    Returns:
        List[ProjectRead]: The caller's projects
    """
    return deps.unwrap(data.list_projects())


@router.get("/{project_id}", response_model=ProjectRead)
def read_project(
    project_id: str,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Get a specific project by ID.

    Raises:
        HTTPException 404: If the caller owns no project with this ID
    """
    return deps.unwrap(data.get_project(project_id))


@router.post("", response_model=ProjectRead, status_code=201)
def create_project(
    project_in: ProjectCreate,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Create a new project owned by the caller.

    Args:
        project_in: Project fields; title and a non-negative budget are required
        data: Data access bound to the caller

    Returns:
        ProjectRead: The stored project

    Raises:
        HTTPException 422: If client_id names a client the caller does not own
    """
    return deps.unwrap(data.create_project(project_in))


@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Update an existing project. Any status may be set from any other.

    Raises:
        HTTPException 404: If the caller owns no project with this ID
    """
    return deps.unwrap(data.update_project(project_id, project_update))


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Delete a project. A miss is reported as deleted=false, not as an error.
    """
    deleted = deps.unwrap(data.delete_project(project_id))
    return {"status": "success", "deleted": deleted}


@router.get("/{project_id}/invoice", response_model=InvoiceRecord)
def export_invoice(
    project_id: str,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Build the invoice record for a completed project.

    The record is handed to the PDF renderer as-is; the invoice number is
    derived from the project id, so repeated exports agree.

    Raises:
        HTTPException 404: If the caller owns no project with this ID
        HTTPException 422: If the project is not completed
    """
    project = deps.unwrap(data.get_project(project_id))
    try:
        return build_invoice(project, utcnow().date())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
