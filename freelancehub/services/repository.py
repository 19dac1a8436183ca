"""
Owner-scoped CRUD against the relational store.

Every statement here carries an ``owner_id`` predicate; that predicate is the
only isolation between identities.  Database failures surface as
:class:`~freelancehub.exc.BackendError`.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from freelancehub.exc import BackendError, NotFound, ValidationError
from freelancehub.models.client import Client
from freelancehub.models.project import Project
from freelancehub.utils import utcnow_iso

logger = logging.getLogger(__name__)

# Fields a caller may never overwrite through update()
_PROTECTED_FIELDS = ("id", "user_id", "created_at")


@contextmanager
def backend_errors(db: Session, action: str):
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        reason = getattr(e, "orig", None) or e
        logger.error("%s failed: %s", action, reason)
        raise BackendError(f"{action} failed: {reason}") from e


def _apply(record, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        if key not in _PROTECTED_FIELDS:
            setattr(record, key, value)
    record.updated_at = utcnow_iso()


class ClientRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self, owner_id: str) -> List[Client]:
        statement = (
            select(Client)
            .where(Client.user_id == owner_id)
            .order_by(Client.created_at.desc())
        )
        with backend_errors(self.db, "Listing clients"):
            return list(self.db.exec(statement).all())

    def get(self, owner_id: str, client_id: str) -> Optional[Client]:
        statement = select(Client).where(Client.id == client_id, Client.user_id == owner_id)
        with backend_errors(self.db, "Loading client"):
            return self.db.exec(statement).first()

    def count(self, owner_id: str) -> int:
        statement = select(func.count()).select_from(Client).where(Client.user_id == owner_id)
        with backend_errors(self.db, "Counting clients"):
            return self.db.exec(statement).one()

    def create(self, owner_id: str, fields: Dict[str, Any]) -> Client:
        client = Client(**fields, user_id=owner_id)
        with backend_errors(self.db, "Creating client"):
            self.db.add(client)
            self.db.commit()
            self.db.refresh(client)
        return client

    def bulk_create(self, owner_id: str, rows: Iterable[Dict[str, Any]]) -> List[Client]:
        clients = [Client(**row, user_id=owner_id) for row in rows]
        with backend_errors(self.db, "Inserting clients"):
            self.db.add_all(clients)
            self.db.commit()
            for client in clients:
                self.db.refresh(client)
        return clients

    def update(self, owner_id: str, client_id: str, fields: Dict[str, Any]) -> Client:
        client = self.get(owner_id, client_id)
        if client is None:
            raise NotFound("Client", client_id)
        _apply(client, fields)
        with backend_errors(self.db, "Updating client"):
            self.db.add(client)
            self.db.commit()
            self.db.refresh(client)
        return client

    def delete(self, owner_id: str, client_id: str) -> bool:
        """Delete a client; a miss is not an error and returns False."""
        client = self.get(owner_id, client_id)
        if client is None:
            return False
        with backend_errors(self.db, "Deleting client"):
            self.db.delete(client)
            self.db.commit()
        return True


class ProjectRepository:
    def __init__(self, db: Session):
        self.db = db
        self.clients = ClientRepository(db)

    def list(self, owner_id: str) -> List[Tuple[Project, Optional[Client]]]:
        """Owned projects, newest first, each paired with its client (or None)."""
        statement = (
            select(Project, Client)
            .join(Client, Project.client_id == Client.id, isouter=True)
            .where(Project.user_id == owner_id)
            .order_by(Project.created_at.desc())
        )
        with backend_errors(self.db, "Listing projects"):
            return [(project, client) for project, client in self.db.exec(statement).all()]

    def get(self, owner_id: str, project_id: str) -> Optional[Project]:
        statement = select(Project).where(Project.id == project_id, Project.user_id == owner_id)
        with backend_errors(self.db, "Loading project"):
            return self.db.exec(statement).first()

    def count(self, owner_id: str) -> int:
        statement = select(func.count()).select_from(Project).where(Project.user_id == owner_id)
        with backend_errors(self.db, "Counting projects"):
            return self.db.exec(statement).one()

    def _check_client(self, owner_id: str, client_id: Optional[str]) -> None:
        # A project may only point at a client of the same owner
        if client_id and self.clients.get(owner_id, client_id) is None:
            raise ValidationError(f'Client with ID "{client_id}" does not exist')

    def create(self, owner_id: str, fields: Dict[str, Any]) -> Project:
        self._check_client(owner_id, fields.get("client_id"))
        project = Project(**fields, user_id=owner_id)
        with backend_errors(self.db, "Creating project"):
            self.db.add(project)
            self.db.commit()
            self.db.refresh(project)
        return project

    def bulk_create(self, owner_id: str, rows: Iterable[Dict[str, Any]]) -> List[Project]:
        projects = [Project(**row, user_id=owner_id) for row in rows]
        with backend_errors(self.db, "Inserting projects"):
            self.db.add_all(projects)
            self.db.commit()
            for project in projects:
                self.db.refresh(project)
        return projects

    def update(self, owner_id: str, project_id: str, fields: Dict[str, Any]) -> Project:
        project = self.get(owner_id, project_id)
        if project is None:
            raise NotFound("Project", project_id)
        if "client_id" in fields:
            self._check_client(owner_id, fields["client_id"])
        _apply(project, fields)
        with backend_errors(self.db, "Updating project"):
            self.db.add(project)
            self.db.commit()
            self.db.refresh(project)
        return project

    def delete(self, owner_id: str, project_id: str) -> bool:
        """Delete a project; a miss is not an error and returns False."""
        project = self.get(owner_id, project_id)
        if project is None:
            return False
        with backend_errors(self.db, "Deleting project"):
            self.db.delete(project)
            self.db.commit()
        return True
