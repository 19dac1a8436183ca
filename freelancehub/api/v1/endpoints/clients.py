"""
Client Endpoints Module

This module provides CRUD endpoints for managing clients. Every call is
scoped to the acting identity: authenticated users and seeded guests read and
write database rows they own, local guests read and write their guest store.
"""
from typing import List
from fastapi import APIRouter, Depends
from freelancehub.models.client import ClientCreate, ClientRead, ClientUpdate
from freelancehub.services.storage import DataAccess
from freelancehub.api import deps

router = APIRouter()


@router.get("", response_model=List[ClientRead])
def list_clients(
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Retrieve the caller's clients, newest first.

    Returns:
        List[ClientRead]: The caller's clients

    Raises:
        HTTPException 401: If the caller has no identity or the guest session expired
    """
    return deps.unwrap(data.list_clients())


@router.get("/{client_id}", response_model=ClientRead)
def read_client(
    client_id: str,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Get one of the caller's clients by ID.

    Raises:
        HTTPException 404: If the caller owns no client with this ID
    """
    return deps.unwrap(data.get_client(client_id))


@router.post("", response_model=ClientRead, status_code=201)
def create_client(
    client_in: ClientCreate,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Create a new client owned by the caller.

    Args:
        client_in: Client fields; name and email are required
        data: Data access bound to the caller

    Returns:
        ClientRead: The stored client, with generated id and timestamps
    """
    return deps.unwrap(data.create_client(client_in))


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: str,
    client_update: ClientUpdate,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Update an existing client. Only the provided fields change.

    Raises:
        HTTPException 404: If the caller owns no client with this ID
    """
    return deps.unwrap(data.update_client(client_id, client_update))


@router.delete("/{client_id}")
def delete_client(
    client_id: str,
    data: DataAccess = Depends(deps.get_data_access),
):
    """
    Delete a client.

    Deleting a client the caller does not own (or that no longer exists) is
    not an error. Projects that referenced the client stay, unassigned.

    Returns:
        dict: Success status and whether a row was removed
    """
    deleted = deps.unwrap(data.delete_client(client_id))
    return {"status": "success", "deleted": deleted}
