"""
The data-access boundary.

Clients and projects live either in the database (authenticated users and
seeded guest identities) or in a guest session's key-value store.  Both
backends implement :class:`Storage`; :func:`storage_for` picks one from the
resolved identity so nothing above this module branches on the mode.

:class:`DataAccess` is the outermost layer: it runs a storage call and
returns a :class:`Result` instead of letting a
:class:`~freelancehub.exc.DataAccessError` escape.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from sqlmodel import Session

from freelancehub.exc import DataAccessError, NotFound, Unauthorized, ValidationError
from freelancehub.models.client import ClientCreate, ClientRead, ClientSnapshot, ClientUpdate
from freelancehub.models.project import ProjectCreate, ProjectRead, ProjectUpdate
from freelancehub.services.guest_store import GuestSessionRegistry, GuestStore
from freelancehub.services.repository import ClientRepository, ProjectRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IdentityMode(str, Enum):
    user = "user"
    guest = "guest"


@dataclass(frozen=True)
class Identity:
    """
    The acting identity for a request.

    ``user_id`` is set for authenticated users and for guests whose demo data
    was seeded into the database; ``guest_session`` is set for guests whose
    records live only in a guest store.
    """
    mode: IdentityMode
    user_id: Optional[str] = None
    guest_session: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return self.mode == IdentityMode.guest


@dataclass
class Result(Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: DataAccessError) -> "Result[T]":
        return cls(data=None, error=exc.message, kind=exc.kind)


class Storage(ABC):
    """Client and project CRUD for one owner."""

    @abstractmethod
    def list_clients(self) -> List[ClientRead]: ...

    @abstractmethod
    def get_client(self, client_id: str) -> ClientRead: ...

    @abstractmethod
    def create_client(self, data: ClientCreate) -> ClientRead: ...

    @abstractmethod
    def update_client(self, client_id: str, data: ClientUpdate) -> ClientRead: ...

    @abstractmethod
    def delete_client(self, client_id: str) -> bool: ...

    @abstractmethod
    def list_projects(self) -> List[ProjectRead]: ...

    @abstractmethod
    def get_project(self, project_id: str) -> ProjectRead: ...

    @abstractmethod
    def create_project(self, data: ProjectCreate) -> ProjectRead: ...

    @abstractmethod
    def update_project(self, project_id: str, data: ProjectUpdate) -> ProjectRead: ...

    @abstractmethod
    def delete_project(self, project_id: str) -> bool: ...

    def count_clients(self) -> int:
        return len(self.list_clients())


def _snapshot(client) -> Optional[ClientSnapshot]:
    if client is None:
        return None
    if isinstance(client, dict):
        return ClientSnapshot(name=client.get("name", ""), email=client.get("email"), company=client.get("company"))
    return ClientSnapshot(name=client.name, email=client.email, company=client.company)


class DatabaseStorage(Storage):
    """Storage backed by the relational store, scoped to ``owner_id``."""

    def __init__(self, db: Session, owner_id: str):
        self.owner_id = owner_id
        self.clients = ClientRepository(db)
        self.projects = ProjectRepository(db)

    def list_clients(self) -> List[ClientRead]:
        return [ClientRead.model_validate(c, from_attributes=True) for c in self.clients.list(self.owner_id)]

    def get_client(self, client_id: str) -> ClientRead:
        client = self.clients.get(self.owner_id, client_id)
        if client is None:
            raise NotFound("Client", client_id)
        return ClientRead.model_validate(client, from_attributes=True)

    def count_clients(self) -> int:
        return self.clients.count(self.owner_id)

    def create_client(self, data: ClientCreate) -> ClientRead:
        client = self.clients.create(self.owner_id, data.model_dump(mode="json"))
        return ClientRead.model_validate(client, from_attributes=True)

    def update_client(self, client_id: str, data: ClientUpdate) -> ClientRead:
        client = self.clients.update(self.owner_id, client_id, data.model_dump(mode="json", exclude_unset=True))
        return ClientRead.model_validate(client, from_attributes=True)

    def delete_client(self, client_id: str) -> bool:
        return self.clients.delete(self.owner_id, client_id)

    def _project_read(self, project, client=None) -> ProjectRead:
        read = ProjectRead.model_validate(project, from_attributes=True)
        read.client = _snapshot(client)
        return read

    def list_projects(self) -> List[ProjectRead]:
        return [self._project_read(p, c) for p, c in self.projects.list(self.owner_id)]

    def get_project(self, project_id: str) -> ProjectRead:
        project = self.projects.get(self.owner_id, project_id)
        if project is None:
            raise NotFound("Project", project_id)
        client = self.clients.get(self.owner_id, project.client_id) if project.client_id else None
        return self._project_read(project, client)

    def create_project(self, data: ProjectCreate) -> ProjectRead:
        project = self.projects.create(self.owner_id, data.model_dump(mode="json"))
        return self.get_project(project.id)

    def update_project(self, project_id: str, data: ProjectUpdate) -> ProjectRead:
        self.projects.update(self.owner_id, project_id, data.model_dump(mode="json", exclude_unset=True))
        return self.get_project(project_id)

    def delete_project(self, project_id: str) -> bool:
        return self.projects.delete(self.owner_id, project_id)


class GuestStorage(Storage):
    """Storage backed by one guest session's key-value store."""

    def __init__(self, store: GuestStore):
        self.store = store

    def list_clients(self) -> List[ClientRead]:
        records = sorted(self.store.clients.get_all(), key=lambda r: r.get("created_at") or "", reverse=True)
        return [ClientRead.model_validate(r) for r in records]

    def get_client(self, client_id: str) -> ClientRead:
        record = self.store.clients.get(client_id)
        if record is None:
            raise NotFound("Client", client_id)
        return ClientRead.model_validate(record)

    def create_client(self, data: ClientCreate) -> ClientRead:
        return ClientRead.model_validate(self.store.clients.add(data.model_dump(mode="json")))

    def update_client(self, client_id: str, data: ClientUpdate) -> ClientRead:
        record = self.store.clients.update(client_id, data.model_dump(mode="json", exclude_unset=True))
        if record is None:
            raise NotFound("Client", client_id)
        return ClientRead.model_validate(record)

    def delete_client(self, client_id: str) -> bool:
        deleted = self.store.clients.delete(client_id)
        if deleted:
            # Mirror ON DELETE SET NULL for projects that pointed at the client
            for project in self.store.projects.get_all():
                if project.get("client_id") == client_id:
                    self.store.projects.update(project["id"], {"client_id": None})
        return deleted

    def _project_read(self, record: Dict[str, Any]) -> ProjectRead:
        read = ProjectRead.model_validate(record)
        if read.client_id:
            read.client = _snapshot(self.store.clients.get(read.client_id))
        return read

    def _check_client(self, client_id: Optional[str]) -> None:
        if client_id and self.store.clients.get(client_id) is None:
            raise ValidationError(f'Client with ID "{client_id}" does not exist')

    def list_projects(self) -> List[ProjectRead]:
        records = sorted(self.store.projects.get_all(), key=lambda r: r.get("created_at") or "", reverse=True)
        return [self._project_read(r) for r in records]

    def get_project(self, project_id: str) -> ProjectRead:
        record = self.store.projects.get(project_id)
        if record is None:
            raise NotFound("Project", project_id)
        return self._project_read(record)

    def create_project(self, data: ProjectCreate) -> ProjectRead:
        self._check_client(data.client_id)
        return self._project_read(self.store.projects.add(data.model_dump(mode="json")))

    def update_project(self, project_id: str, data: ProjectUpdate) -> ProjectRead:
        changes = data.model_dump(mode="json", exclude_unset=True)
        if "client_id" in changes:
            self._check_client(changes["client_id"])
        record = self.store.projects.update(project_id, changes)
        if record is None:
            raise NotFound("Project", project_id)
        return self._project_read(record)

    def delete_project(self, project_id: str) -> bool:
        return self.store.projects.delete(project_id)


def storage_for(identity: Optional[Identity], db: Session, registry: GuestSessionRegistry) -> Storage:
    """Pick the storage backend for ``identity``."""
    if identity is None:
        raise Unauthorized()
    if identity.user_id:
        return DatabaseStorage(db, identity.user_id)
    store = registry.get(identity.guest_session)
    if store is None:
        raise Unauthorized("Guest session has expired")
    return GuestStorage(store)


class DataAccess:
    """
    Runs storage operations and converts failures into tagged results.

    ``storage`` may be None when the identity could not be resolved; every
    call then yields an ``unauthorized`` result.
    """

    def __init__(self, storage: Optional[Storage], unavailable: Optional[DataAccessError] = None):
        self.storage = storage
        self.unavailable = unavailable or Unauthorized()

    @classmethod
    def for_identity(cls, identity: Optional[Identity], db: Session, registry: GuestSessionRegistry) -> "DataAccess":
        try:
            return cls(storage_for(identity, db, registry))
        except DataAccessError as e:
            return cls(None, unavailable=e)

    def _run(self, operation: Callable[[Storage], T]) -> Result[T]:
        if self.storage is None:
            return Result.failure(self.unavailable)
        try:
            return Result(data=operation(self.storage))
        except DataAccessError as e:
            logger.warning("Data access failed (%s): %s", e.kind, e.message)
            return Result.failure(e)

    def list_clients(self) -> Result[List[ClientRead]]:
        return self._run(lambda s: s.list_clients())

    def get_client(self, client_id: str) -> Result[ClientRead]:
        return self._run(lambda s: s.get_client(client_id))

    def count_clients(self) -> Result[int]:
        return self._run(lambda s: s.count_clients())

    def create_client(self, data: ClientCreate) -> Result[ClientRead]:
        return self._run(lambda s: s.create_client(data))

    def update_client(self, client_id: str, data: ClientUpdate) -> Result[ClientRead]:
        return self._run(lambda s: s.update_client(client_id, data))

    def delete_client(self, client_id: str) -> Result[bool]:
        return self._run(lambda s: s.delete_client(client_id))

    def list_projects(self) -> Result[List[ProjectRead]]:
        return self._run(lambda s: s.list_projects())

    def get_project(self, project_id: str) -> Result[ProjectRead]:
        return self._run(lambda s: s.get_project(project_id))

    def create_project(self, data: ProjectCreate) -> Result[ProjectRead]:
        return self._run(lambda s: s.create_project(data))

    def update_project(self, project_id: str, data: ProjectUpdate) -> Result[ProjectRead]:
        return self._run(lambda s: s.update_project(project_id, data))

    def delete_project(self, project_id: str) -> Result[bool]:
        return self._run(lambda s: s.delete_project(project_id))
