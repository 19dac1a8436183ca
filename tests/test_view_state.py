"""Tests for optimistic view updates."""

import pytest

from freelancehub.models.client import ClientCreate
from freelancehub.services.storage import DataAccess, GuestStorage, Result
from freelancehub.services.view_state import MutationState, OptimisticView


def records():
    return [
        {"id": "c2", "name": "Beta", "status": "active"},
        {"id": "c1", "name": "Alpha", "status": "active"},
    ]


class TestInsert:
    def test_committed_insert_takes_server_record(self):
        view = OptimisticView(records())
        mutation = view.insert(
            {"name": "Gamma"},
            lambda: Result(data={"id": "c3", "name": "Gamma", "status": "active"}),
        )
        assert mutation.state == MutationState.committed
        assert view.records[0] == {"id": "c3", "name": "Gamma", "status": "active"}
        assert len(view.records) == 3

    def test_pending_record_visible_during_commit(self):
        view = OptimisticView(records())
        seen = []

        def commit():
            seen.extend(view.records)
            return Result(data={"id": "c3", "name": "Gamma"})

        view.insert({"name": "Gamma"}, commit)
        assert seen[0]["name"] == "Gamma"
        assert seen[0]["id"].startswith("pending-")

    def test_failed_insert_rolls_back(self):
        view = OptimisticView(records())
        mutation = view.insert({"name": "Gamma"}, lambda: Result(error="Backend down", kind="backend"))
        assert mutation.state == MutationState.rolled_back
        assert mutation.error == "Backend down"
        assert view.records == records()

    def test_insert_through_data_access(self, guest_store):
        data = DataAccess(GuestStorage(guest_store))
        view = OptimisticView()
        view.insert(
            {"name": "Acme", "email": "hi@acme.com"},
            lambda: data.create_client(ClientCreate(name="Acme", email="hi@acme.com")),
        )
        assert view.records[0]["id"].startswith("guest_client_")
        assert view.records[0]["email"] == "hi@acme.com"


class TestReplaceAndRemove:
    def test_committed_replace(self):
        view = OptimisticView(records())
        mutation = view.replace(
            "c1", {"status": "inactive"},
            lambda: Result(data={"id": "c1", "name": "Alpha", "status": "inactive", "updated_at": "later"}),
        )
        assert mutation.state == MutationState.committed
        assert view.records[1]["updated_at"] == "later"

    def test_failed_replace_restores_record(self):
        view = OptimisticView(records())
        mutation = view.replace(
            "c1", {"status": "inactive"},
            lambda: Result(error='Client with ID "c1" does not exist', kind="not_found"),
        )
        assert mutation.state == MutationState.rolled_back
        assert view.records[1]["status"] == "active"

    def test_remove(self):
        view = OptimisticView(records())
        mutation = view.remove("c2", lambda: Result(data=True))
        assert mutation.state == MutationState.committed
        assert [r["id"] for r in view.records] == ["c1"]

    def test_failed_remove_restores_position(self):
        view = OptimisticView(records())
        view.remove("c2", lambda: Result(error="Unauthorized", kind="unauthorized"))
        assert [r["id"] for r in view.records] == ["c2", "c1"]

    def test_commit_exception_rolls_back_and_propagates(self):
        view = OptimisticView(records())

        def commit():
            raise RuntimeError("connection reset")

        with pytest.raises(RuntimeError):
            view.remove("c1", commit)
        assert view.records == records()
        assert view.history[-1].state == MutationState.rolled_back

    def test_history(self):
        view = OptimisticView(records())
        view.remove("c1", lambda: Result(data=True))
        view.replace("c2", {"name": "B"}, lambda: Result(error="nope", kind="backend"))
        assert [(m.action, m.state) for m in view.history] == [
            ("remove", MutationState.committed),
            ("replace", MutationState.rolled_back),
        ]

    def test_records_are_copies(self):
        view = OptimisticView(records())
        view.records[0]["name"] = "Changed"
        assert view.records[0]["name"] == "Beta"


def test_pending_ids_are_per_view():
    seen = []

    def commit_for(view):
        def commit():
            seen.append(view.records[0]["id"])
            return Result(error="offline", kind="backend")
        return commit

    first, second = OptimisticView(), OptimisticView()
    first.insert({"name": "A"}, commit_for(first))
    second.insert({"name": "B"}, commit_for(second))
    assert seen == ["pending-1", "pending-1"]
