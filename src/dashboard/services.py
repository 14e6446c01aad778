"""Aggregates shown on the client dashboard."""
from billing.models import Invoice
from billing.services import invoice_totals
from catalog.models import CompanyService
from projects.models import Project

RECENT_PROJECTS = 5


def dashboard_summary(company) -> dict:
    """Counts and totals for ``company``'s overview page.

    Returns an empty summary when no company is selected.
    """
    if company is None:
        return {
            "company": None,
            "active_projects": 0,
            "open_invoices": 0,
            "open_total_cents": 0,
            "active_services": 0,
            "recent_projects": [],
        }

    projects = Project.objects.filter(company=company)
    open_invoices = Invoice.objects.filter(company=company, status=Invoice.Status.OPEN)
    return {
        "company": company,
        "active_projects": projects.filter(status=Project.Status.ACTIVE).count(),
        "open_invoices": open_invoices.count(),
        "open_total_cents": invoice_totals(open_invoices)["open_total_cents"],
        "active_services": CompanyService.objects.filter(
            company=company, status=CompanyService.Status.ACTIVE
        ).count(),
        "recent_projects": list(projects.order_by("-created_at")[:RECENT_PROJECTS]),
    }
