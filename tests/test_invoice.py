"""Tests for invoice record building."""

from datetime import date

import pytest

from freelancehub.exc import ValidationError
from freelancehub.models.client import ClientSnapshot
from freelancehub.models.project import ProjectRead
from freelancehub.services.invoice import build_invoice, invoice_file_name, invoice_number


def completed_project(**fields):
    data = {
        "id": "3f2a9c1b-7d4e-4b8a-9c2d-1e5f6a7b8c9d",
        "title": "Website Redesign",
        "description": "New marketing site",
        "budget": 4200,
        "status": "completed",
        "deadline": "2024-03-15",
        "client": ClientSnapshot(name="Acme Corp", email="billing@acme.com", company="Acme"),
    }
    data.update(fields)
    return ProjectRead(**data)


class TestInvoiceNumber:
    def test_uses_first_eight_characters(self):
        assert invoice_number("3f2a9c1b-7d4e") == "INV-3F2A9C1B"

    def test_empty_id(self):
        assert invoice_number("") == "INV-00000000"
        assert invoice_number(None) == "INV-00000000"

    def test_file_name(self):
        assert invoice_file_name("Website  Redesign", "INV-1") == "invoice-website-redesign-INV-1.pdf"


class TestBuildInvoice:
    """Test cases for build_invoice()."""

    def test_record(self):
        record = build_invoice(completed_project(), date(2024, 4, 2))
        assert record.invoice_number == "INV-3F2A9C1B"
        assert record.invoice_date == "Apr 02, 2024"
        assert record.completion_date == "Mar 15, 2024"
        assert record.file_name == "invoice-website-redesign-INV-3F2A9C1B.pdf"
        assert record.tax_rate == 0
        assert record.total_due == record.budget == 4200
        assert record.client.company == "Acme"

    def test_same_project_same_number(self):
        project = completed_project()
        first = build_invoice(project, date(2024, 4, 2))
        second = build_invoice(project, date(2024, 5, 9))
        assert first.invoice_number == second.invoice_number

    def test_missing_client_and_deadline(self):
        record = build_invoice(completed_project(client=None, deadline=None), date(2024, 4, 2))
        assert record.client.name == "N/A"
        assert record.completion_date is None

    def test_status_is_case_insensitive(self):
        assert build_invoice(completed_project(status="Completed"), date(2024, 4, 2)).budget == 4200

    @pytest.mark.parametrize("status", ["planning", "in_progress", "on_hold", "cancelled"])
    def test_only_completed_projects(self, status):
        with pytest.raises(ValidationError):
            build_invoice(completed_project(status=status), date(2024, 4, 2))
