"""
Demo data seeding.

Inserts a fixed catalog of clients and projects for an identity so a new
user (or a visitor trying the app as a guest) sees a populated dashboard.
Seeding refuses to run for an owner that already has clients.

Catalog dates are offsets in days from the seed date.  Each project's
``created_at`` is derived from its delivery date (completed projects) or
start date (everything else), never from the wall clock, so seeded revenue
lands in the chart buckets it belongs to.

The project mix is six completed, two in progress, one planning and one on
hold, so the dashboard shows every state: 90,000 revenue, a 60% completion
rate and three active projects.  Client status has only ``active`` and
``inactive``; the one prospect in the catalog is seeded as ``inactive``.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from freelancehub.core.config import settings
from freelancehub.exc import AlreadyExists, BackendError, DataAccessError, Unauthorized
from freelancehub.models.user import User
from freelancehub.services.repository import ClientRepository, ProjectRepository
from freelancehub.services.storage import Result
from freelancehub.utils import date_to_iso_timestamp, utcnow

logger = logging.getLogger(__name__)

DEMO_CLIENT_NOTE = "Demo client data for portfolio showcase"

DEMO_CLIENTS: List[Dict[str, Any]] = [
    {"name": "TechCorp Solutions", "email": "contact@techcorp.com", "company": "TechCorp Solutions Inc.", "status": "active"},
    {"name": "Digital Marketing Agency", "email": "hello@dma.co", "company": "DMA Digital", "status": "active"},
    {"name": "Startup Ventures", "email": "projects@startup.io", "company": "Startup Ventures LLC", "status": "active"},
    {"name": "E-commerce Plus", "email": "info@ecommerceplus.com", "company": "E-commerce Plus", "status": "inactive"},
    {"name": "Financial Services Co", "email": "tech@finserv.net", "company": "Financial Services Co", "status": "active"},
]


@dataclass(frozen=True)
class DemoProject:
    title: str
    description: str
    budget: float
    status: str
    start: int                  # days relative to the seed date
    deadline: int
    delivered: Optional[int] = None

    def row(self, today: date) -> Dict[str, Any]:
        start_date = today + timedelta(days=self.start)
        end_date = today + timedelta(days=self.delivered) if self.delivered is not None else None
        created_from = end_date if self.status == "completed" and end_date else start_date
        return {
            "title": self.title,
            "description": self.description,
            "budget": self.budget,
            "status": self.status,
            "start_date": start_date.isoformat(),
            "deadline": (today + timedelta(days=self.deadline)).isoformat(),
            "actual_end_date": end_date.isoformat() if end_date else None,
            "created_at": date_to_iso_timestamp(created_from),
        }


DEMO_PROJECTS: List[DemoProject] = [
    DemoProject("E-commerce Website Redesign", "Complete redesign of the company e-commerce platform with modern UI/UX",
                15000, "completed", start=-140, deadline=-118, delivered=-120),
    DemoProject("Mobile App Development", "Native iOS and Android app for customer engagement",
                25000, "completed", start=-200, deadline=-93, delivered=-95),
    DemoProject("API Integration Project", "Third-party payment gateway and CRM integration",
                8500, "completed", start=-75, deadline=-48, delivered=-50),
    DemoProject("Content Management System", "Custom CMS for blog and content management",
                12000, "completed", start=-60, deadline=-25, delivered=-25),
    DemoProject("Social Media Dashboard", "Analytics dashboard for social media management",
                9500, "in_progress", start=-20, deadline=45),
    DemoProject("Cloud Infrastructure Setup", "AWS deployment and infrastructure configuration",
                22000, "completed", start=-45, deadline=-12, delivered=-12),
    DemoProject("SEO Optimization Campaign", "Comprehensive SEO audit and implementation",
                6500, "planning", start=-2, deadline=60),
    DemoProject("Payment Gateway Integration", "Stripe and PayPal payment processing integration",
                7500, "completed", start=-30, deadline=-3, delivered=-4),
    DemoProject("Security Audit & Compliance", "Comprehensive security review and GDPR compliance implementation",
                11000, "in_progress", start=-10, deadline=30),
    DemoProject("Database Migration Service", "Legacy database migration to cloud infrastructure",
                18000, "on_hold", start=-90, deadline=20),
]


class SeedSummary(BaseModel):
    clients_created: int
    projects_created: int
    guest_user_id: Optional[str] = None


class DemoDataStatus(BaseModel):
    has_data: bool
    client_count: int
    project_count: int


class DemoDataSeeder:
    """
    Seeds the demo catalog for an authenticated user or a new guest identity.

    Each step commits on its own.  If the project insert fails after the
    clients went in, the clients stay and a later seed attempt is refused
    until they are removed.
    """

    def __init__(self, db: Session):
        self.db = db
        self.clients = ClientRepository(db)
        self.projects = ProjectRepository(db)

    def mint_guest_identity(self) -> User:
        """Provision a backing user row so the seeded rows' foreign keys hold."""
        guest_id = str(uuid.uuid4())
        user = User(
            id=guest_id,
            email=f"guest-{guest_id}@{settings.GUEST_EMAIL_DOMAIN}",
            full_name="Demo Guest User",
            is_guest=True,
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(f"Failed to create guest user: {getattr(e, 'orig', None) or e}") from e
        logger.info("Minted guest identity %s", user.id)
        return user

    def _seed(self, owner_id: Optional[str], guest_mode: bool, today: date) -> SeedSummary:
        if guest_mode:
            owner_id = self.mint_guest_identity().id
        elif not owner_id:
            raise Unauthorized("Please log in first or use guest mode")

        existing = self.clients.count(owner_id)
        if existing > 0:
            raise AlreadyExists(f"Demo data already exists. You have {existing} clients.")

        logger.info("Seeding %d demo clients for %s", len(DEMO_CLIENTS), owner_id)
        try:
            clients = self.clients.bulk_create(
                owner_id, [{**client, "notes": DEMO_CLIENT_NOTE} for client in DEMO_CLIENTS]
            )
        except BackendError as e:
            raise BackendError(f"Failed to insert demo clients: {e.message}") from e

        rows = []
        for index, project in enumerate(DEMO_PROJECTS):
            row = project.row(today)
            row["client_id"] = clients[index % len(clients)].id
            rows.append(row)

        logger.info("Seeding %d demo projects for %s", len(rows), owner_id)
        try:
            projects = self.projects.bulk_create(owner_id, rows)
        except BackendError as e:
            raise BackendError(f"Failed to insert demo projects: {e.message}") from e

        return SeedSummary(
            clients_created=len(clients),
            projects_created=len(projects),
            guest_user_id=owner_id if guest_mode else None,
        )

    def seed(self, owner_id: Optional[str] = None, guest_mode: bool = False, today: Optional[date] = None) -> Result[SeedSummary]:
        try:
            summary = self._seed(owner_id, guest_mode, today or utcnow().date())
        except DataAccessError as e:
            logger.warning("Demo data seeding failed: %s", e.message)
            return Result.failure(e)
        logger.info("Demo data seeded: %s", summary.model_dump())
        return Result(data=summary)

    def status(self, owner_id: str) -> Result[DemoDataStatus]:
        try:
            client_count = self.clients.count(owner_id)
            project_count = self.projects.count(owner_id)
        except DataAccessError as e:
            return Result.failure(e)
        return Result(data=DemoDataStatus(
            has_data=client_count > 0 or project_count > 0,
            client_count=client_count,
            project_count=project_count,
        ))
