"""
Invoice export.

Builds the plain record an external PDF renderer turns into an invoice for a
completed project.  No rendering happens here.
"""
import re
from datetime import date
from typing import Optional

from pydantic import BaseModel

from freelancehub.exc import ValidationError
from freelancehub.models.client import ClientSnapshot
from freelancehub.models.project import ProjectRead
from freelancehub.utils import normalize_status, parse_timestamp

INVOICE_DATE_FORMAT = "%b %d, %Y"
PAYMENT_TERMS = "Due upon receipt"


class InvoiceRecord(BaseModel):
    invoice_number: str
    invoice_date: str
    file_name: str
    project_id: str
    title: str
    description: Optional[str] = None
    budget: float
    tax_rate: float = 0
    total_due: float
    completion_date: Optional[str] = None
    client: ClientSnapshot
    payment_terms: str = PAYMENT_TERMS


def invoice_number(project_id: Optional[str]) -> str:
    """``INV-`` followed by the first eight characters of the project id."""
    prefix = (project_id or "")[:8].upper()
    return f"INV-{prefix or '00000000'}"


def invoice_file_name(title: str, number: str) -> str:
    slug = re.sub(r"\s+", "-", title.strip().lower())
    return f"invoice-{slug}-{number}.pdf"


def _format_date(value: Optional[str]) -> Optional[str]:
    parsed = parse_timestamp(value)
    return parsed.strftime(INVOICE_DATE_FORMAT) if parsed else None


def build_invoice(project: ProjectRead, issued_on: date) -> InvoiceRecord:
    if normalize_status(project.status) != "completed":
        raise ValidationError("Only completed projects can be invoiced")

    number = invoice_number(project.id)
    budget = float(project.budget or 0)
    return InvoiceRecord(
        invoice_number=number,
        invoice_date=issued_on.strftime(INVOICE_DATE_FORMAT),
        file_name=invoice_file_name(project.title, number),
        project_id=project.id,
        title=project.title,
        description=project.description,
        budget=budget,
        total_due=budget,
        completion_date=_format_date(project.deadline),
        client=project.client or ClientSnapshot(name="N/A"),
    )
