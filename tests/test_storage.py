"""Tests for the storage backends and the data-access boundary."""

import pytest
from pydantic import ValidationError as SchemaError

from freelancehub.exc import NotFound, ValidationError
from freelancehub.models.client import ClientCreate, ClientUpdate
from freelancehub.models.project import ProjectCreate, ProjectUpdate
from freelancehub.services.storage import (
    DataAccess,
    DatabaseStorage,
    GuestStorage,
    Identity,
    IdentityMode,
    storage_for,
)


@pytest.fixture(params=["database", "guest"])
def storage(request, db_session, user, guest_store):
    """Run each test against both storage backends."""
    if request.param == "database":
        return DatabaseStorage(db_session, user.id)
    return GuestStorage(guest_store)


def new_client(name="Acme Corp", email="billing@acme.com", **fields):
    return ClientCreate(name=name, email=email, **fields)


class TestStorageBackends:
    """Behaviour shared by DatabaseStorage and GuestStorage."""

    def test_client_round_trip(self, storage):
        created = storage.create_client(new_client(company="Acme", phone="555-0100"))
        fetched = storage.get_client(created.id)
        assert fetched.name == "Acme Corp"
        assert fetched.email == "billing@acme.com"
        assert fetched.company == "Acme"
        assert fetched.status == "active"
        assert [c.id for c in storage.list_clients()] == [created.id]

    def test_update_client_changes_only_given_fields(self, storage):
        created = storage.create_client(new_client(company="Acme"))
        updated = storage.update_client(created.id, ClientUpdate(status="inactive"))
        assert updated.status == "inactive"
        assert updated.company == "Acme"
        assert updated.created_at == created.created_at

    def test_update_missing_client_raises(self, storage):
        with pytest.raises(NotFound):
            storage.update_client("missing", ClientUpdate(name="Renamed"))

    def test_delete_missing_is_silent(self, storage):
        assert storage.delete_client("missing") is False
        assert storage.delete_project("missing") is False

    def test_project_carries_client_snapshot(self, storage):
        client = storage.create_client(new_client(company="Acme"))
        project = storage.create_project(ProjectCreate(title="Website", budget=2500, client_id=client.id))
        listed = storage.list_projects()
        assert [p.id for p in listed] == [project.id]
        assert listed[0].client.name == "Acme Corp"
        assert listed[0].client.company == "Acme"

    def test_unassigned_project(self, storage):
        project = storage.create_project(ProjectCreate(title="Side gig", budget=0, client_id=""))
        assert project.client_id is None
        assert project.client is None

    def test_project_with_unknown_client_rejected(self, storage):
        with pytest.raises(ValidationError):
            storage.create_project(ProjectCreate(title="Website", budget=1, client_id="nope"))

    def test_update_project_status(self, storage):
        project = storage.create_project(ProjectCreate(title="Website", budget=100))
        updated = storage.update_project(project.id, ProjectUpdate(status="completed", deadline="2024-05-01"))
        assert updated.status == "completed"
        assert updated.deadline == "2024-05-01"
        assert updated.budget == 100

    def test_update_missing_project_raises(self, storage):
        with pytest.raises(NotFound):
            storage.update_project("missing", ProjectUpdate(title="x"))

    def test_deleting_client_unassigns_projects(self, storage):
        client = storage.create_client(new_client())
        project = storage.create_project(ProjectCreate(title="Website", budget=100, client_id=client.id))
        assert storage.delete_client(client.id) is True
        remaining = storage.get_project(project.id)
        assert remaining.client_id is None
        assert remaining.client is None

    def test_count_clients(self, storage):
        storage.create_client(new_client(name="One"))
        storage.create_client(new_client(name="Two", email="two@example.com"))
        assert storage.count_clients() == 2


class TestOwnerIsolation:
    def test_users_see_only_their_rows(self, db_session, user, other_user):
        mine = DatabaseStorage(db_session, user.id)
        theirs = DatabaseStorage(db_session, other_user.id)
        client = mine.create_client(new_client())

        assert theirs.list_clients() == []
        with pytest.raises(NotFound):
            theirs.get_client(client.id)
        with pytest.raises(NotFound):
            theirs.update_client(client.id, ClientUpdate(name="Stolen"))
        assert theirs.delete_client(client.id) is False
        assert mine.get_client(client.id).name == "Acme Corp"

    def test_cannot_attach_another_users_client(self, db_session, user, other_user):
        client = DatabaseStorage(db_session, user.id).create_client(new_client())
        with pytest.raises(ValidationError):
            DatabaseStorage(db_session, other_user.id).create_project(
                ProjectCreate(title="Website", budget=1, client_id=client.id)
            )


class TestStorageFor:
    """Test cases for storage_for() and DataAccess.for_identity()."""

    def test_user_identity_uses_database(self, db_session, user, guest_registry):
        identity = Identity(mode=IdentityMode.user, user_id=user.id)
        assert isinstance(storage_for(identity, db_session, guest_registry), DatabaseStorage)

    def test_guest_session_uses_guest_store(self, db_session, guest_registry):
        identity = Identity(mode=IdentityMode.guest, guest_session=guest_registry.start_session())
        assert isinstance(storage_for(identity, db_session, guest_registry), GuestStorage)

    def test_no_identity_is_unauthorized(self, db_session, guest_registry):
        result = DataAccess.for_identity(None, db_session, guest_registry).list_clients()
        assert not result.ok
        assert result.kind == "unauthorized"
        assert result.data is None

    def test_expired_guest_session(self, db_session, guest_registry):
        identity = Identity(mode=IdentityMode.guest, guest_session="gone")
        result = DataAccess.for_identity(identity, db_session, guest_registry).list_projects()
        assert result.kind == "unauthorized"
        assert result.error == "Guest session has expired"


class TestDataAccessResults:
    """Errors cross the data-access boundary as tagged results."""

    @pytest.fixture
    def data(self, guest_store):
        return DataAccess(GuestStorage(guest_store))

    def test_success(self, data):
        result = data.create_client(new_client())
        assert result.ok
        assert result.error is None
        assert result.data.name == "Acme Corp"

    def test_not_found(self, data):
        result = data.update_project("missing", ProjectUpdate(title="x"))
        assert result.kind == "not_found"
        assert 'Project with ID "missing" does not exist' == result.error

    def test_validation(self, data):
        result = data.create_project(ProjectCreate(title="x", budget=1, client_id="nope"))
        assert result.kind == "validation"

    def test_delete_miss_is_success(self, data):
        result = data.delete_client("missing")
        assert result.ok
        assert result.data is False


class TestUpdateSchemas:
    @pytest.mark.parametrize("field", ["name", "email", "status"])
    def test_client_update_rejects_null_required_field(self, field):
        with pytest.raises(SchemaError):
            ClientUpdate(**{field: None})

    @pytest.mark.parametrize("field", ["title", "budget", "status"])
    def test_project_update_rejects_null_required_field(self, field):
        with pytest.raises(SchemaError):
            ProjectUpdate(**{field: None})

    def test_omitted_fields_stay_unset(self):
        assert ClientUpdate(company=None).model_dump(exclude_unset=True) == {"company": None}
        assert ProjectUpdate().model_dump(exclude_unset=True) == {}
