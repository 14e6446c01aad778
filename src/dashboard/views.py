"""Client dashboard pages, scoped to the current company."""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from billing.models import Invoice
from billing.services import invoice_totals
from catalog.models import CompanyService
from companies.services import set_current_company_cookie, switch_current_company
from dashboard.services import dashboard_summary
from projects.models import Project

logger = logging.getLogger("portal")


def _company(request):
    return getattr(request, "current_company", None)


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------
@login_required
def overview(request):
    return render(request, "dashboard/overview.html", dashboard_summary(_company(request)))


@login_required
def project_list(request):
    company = _company(request)
    projects = Project.objects.filter(company=company) if company else Project.objects.none()
    return render(request, "dashboard/projects.html", {"projects": projects})


@login_required
def billing(request):
    company = _company(request)
    invoices = Invoice.objects.filter(company=company) if company else Invoice.objects.none()
    context = {"invoices": invoices}
    context.update(invoice_totals(invoices))
    return render(request, "dashboard/billing.html", context)


@login_required
def service_list(request):
    company = _company(request)
    if company:
        company_services = (
            CompanyService.objects
            .filter(company=company)
            .select_related("service", "service__category")
        )
    else:
        company_services = CompanyService.objects.none()
    context = {
        "company_services": company_services,
        "active_count": company_services.filter(status=CompanyService.Status.ACTIVE).count(),
    }
    return render(request, "dashboard/services.html", context)


# ---------------------------------------------------------------------------
# Switch current company (POST only)
# ---------------------------------------------------------------------------
@login_required
def company_switch(request):
    """Store ``company_id`` from the POST body in the current-company cookie."""
    if request.method != "POST":
        return redirect("dashboard:index")

    next_url = request.POST.get("next", request.META.get("HTTP_REFERER", "/dashboard/"))
    if not url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        next_url = "/dashboard/"

    try:
        company = switch_current_company(request.user, request.POST.get("company_id", ""))
    except ValueError as exc:
        messages.error(request, str(exc))
        return redirect(next_url)
    except PermissionDenied:
        messages.error(request, "Company not found or access denied.")
        return redirect(next_url)

    response = redirect(next_url)
    set_current_company_cookie(response, company.pk)
    logger.info("User %s switched to company %s", request.user, company.pk)
    messages.success(request, f"Now viewing {company.name}")
    return response
