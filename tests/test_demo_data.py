"""Tests for the demo data seeder."""

from datetime import date, datetime, time, timezone
from unittest.mock import patch

import pytest

from freelancehub.exc import BackendError
from freelancehub.models.user import User
from freelancehub.schemas.dashboard import RevenueWindow
from freelancehub.services import aggregation
from freelancehub.services.demo_data import DEMO_CLIENTS, DEMO_PROJECTS, DemoDataSeeder
from freelancehub.services.repository import ClientRepository, ProjectRepository

TODAY = date(2024, 6, 15)
NOW = datetime.combine(TODAY, time(12, 0), tzinfo=timezone.utc)


@pytest.fixture
def seeder(db_session):
    return DemoDataSeeder(db_session)


class TestCatalog:
    """The fixed catalog drives the headline dashboard numbers."""

    def test_sizes(self):
        assert len(DEMO_CLIENTS) == 5
        assert len(DEMO_PROJECTS) == 10

    def test_catalog_metrics(self):
        rows = [p.row(TODAY) for p in DEMO_PROJECTS]
        metrics = aggregation.aggregate(rows)
        assert metrics.total_revenue == 90000
        assert metrics.completed_projects == 6
        assert metrics.active_projects == 3
        assert metrics.completion_rate == 60
        assert metrics.average_project_value == 15000

    def test_completed_projects_dated_by_delivery(self):
        rows = {p.title: p.row(TODAY) for p in DEMO_PROJECTS}
        payment = rows["Payment Gateway Integration"]
        assert payment["actual_end_date"] == "2024-06-11"
        assert payment["created_at"].startswith("2024-06-11T00:00:00")
        seo = rows["SEO Optimization Campaign"]
        assert seo["actual_end_date"] is None
        assert seo["created_at"].startswith(seo["start_date"])

    def test_revenue_lands_in_recent_windows(self):
        rows = [p.row(TODAY) for p in DEMO_PROJECTS]
        assert aggregation.bucket_revenue(rows, RevenueWindow.last_30_days, NOW).total == 41500
        assert aggregation.bucket_revenue(rows, RevenueWindow.last_6_months, NOW).total == 90000


class TestSeed:
    """Test cases for DemoDataSeeder.seed()."""

    def test_seed_for_user(self, seeder, db_session, user):
        result = seeder.seed(owner_id=user.id, today=TODAY)
        assert result.ok
        assert result.data.clients_created == 5
        assert result.data.projects_created == 10
        assert result.data.guest_user_id is None
        assert ClientRepository(db_session).count(user.id) == 5
        assert ProjectRepository(db_session).count(user.id) == 10

    def test_projects_assigned_round_robin(self, seeder, db_session, user):
        seeder.seed(owner_id=user.id, today=TODAY)
        pairs = ProjectRepository(db_session).list(user.id)
        per_client = {}
        for project, client in pairs:
            assert client is not None
            per_client[client.name] = per_client.get(client.name, 0) + 1
        assert sorted(per_client.values()) == [2, 2, 2, 2, 2]

    def test_seeding_twice_is_refused(self, seeder, db_session, user):
        assert seeder.seed(owner_id=user.id, today=TODAY).ok
        second = seeder.seed(owner_id=user.id, today=TODAY)
        assert not second.ok
        assert second.kind == "conflict"
        assert second.error == "Demo data already exists. You have 5 clients."
        assert ClientRepository(db_session).count(user.id) == 5
        assert ProjectRepository(db_session).count(user.id) == 10

    def test_refused_when_user_has_own_clients(self, seeder, db_session, user):
        ClientRepository(db_session).create(user.id, {"name": "Mine", "email": "me@example.com"})
        result = seeder.seed(owner_id=user.id, today=TODAY)
        assert result.error == "Demo data already exists. You have 1 clients."

    def test_requires_owner_or_guest_mode(self, seeder):
        result = seeder.seed()
        assert result.kind == "unauthorized"
        assert result.error == "Please log in first or use guest mode"

    def test_guest_mode_mints_identity(self, seeder, db_session):
        result = seeder.seed(guest_mode=True, today=TODAY)
        assert result.ok
        guest = db_session.get(User, result.data.guest_user_id)
        assert guest.is_guest
        assert guest.email == f"guest-{guest.id}@demo.local"
        assert guest.full_name == "Demo Guest User"
        assert ClientRepository(db_session).count(guest.id) == 5

    def test_guest_mode_ignores_caller(self, seeder, db_session, user):
        result = seeder.seed(owner_id=user.id, guest_mode=True, today=TODAY)
        assert result.data.guest_user_id != user.id
        assert ClientRepository(db_session).count(user.id) == 0

    def test_project_failure_keeps_clients(self, seeder, db_session, user):
        """Test a failed project insert does not undo the client insert."""
        with patch.object(ProjectRepository, "bulk_create", side_effect=BackendError("Inserting projects failed: boom")):
            result = seeder.seed(owner_id=user.id, today=TODAY)
        assert result.kind == "backend"
        assert result.error == "Failed to insert demo projects: Inserting projects failed: boom"
        assert ClientRepository(db_session).count(user.id) == 5
        assert ProjectRepository(db_session).count(user.id) == 0
        assert seeder.seed(owner_id=user.id, today=TODAY).kind == "conflict"


class TestStatus:
    def test_status_before_and_after(self, seeder, user):
        before = seeder.status(user.id)
        assert before.ok
        assert before.data.has_data is False
        seeder.seed(owner_id=user.id, today=TODAY)
        after = seeder.status(user.id).data
        assert after.has_data is True
        assert (after.client_count, after.project_count) == (5, 10)


def test_catalog_status_mix():
    statuses = [p.status for p in DEMO_PROJECTS]
    assert {s: statuses.count(s) for s in set(statuses)} == {
        "completed": 6, "in_progress": 2, "planning": 1, "on_hold": 1,
    }
    assert {c["status"] for c in DEMO_CLIENTS} == {"active", "inactive"}
