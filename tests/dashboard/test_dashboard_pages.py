import datetime

import pytest
from django.conf import settings

from billing.models import Invoice
from catalog.models import CompanyService
from companies.models import CompanyUser
from dashboard.services import dashboard_summary
from projects.models import Project


@pytest.fixture
def company_activity(company, other_company, monthly_service):
    Project.objects.create(
        company=company, name="Website rebuild", slug="website-rebuild", status=Project.Status.ACTIVE,
    )
    Project.objects.create(
        company=company, name="Logo refresh", slug="logo-refresh", status=Project.Status.COMPLETED,
    )
    Project.objects.create(
        company=other_company, name="Lakeside listings", slug="lakeside-listings", status=Project.Status.ACTIVE,
    )
    Invoice.objects.create(
        company=company,
        description="March retainer",
        amount_cents=120000,
        status=Invoice.Status.OPEN,
        due_date=datetime.date(2026, 3, 31),
    )
    Invoice.objects.create(
        company=company, description="February retainer", amount_cents=120000, status=Invoice.Status.PAID,
    )
    Invoice.objects.create(
        company=other_company, description="Lakeside retainer", amount_cents=50000, status=Invoice.Status.OPEN,
    )
    CompanyService.objects.create(company=company, service=monthly_service, status=CompanyService.Status.ACTIVE)


class TestDashboardSummary:
    @pytest.mark.django_db
    def test_counts_only_the_company(self, company, company_activity):
        summary = dashboard_summary(company)

        assert summary["active_projects"] == 1
        assert summary["open_invoices"] == 1
        assert summary["open_total_cents"] == 120000
        assert summary["active_services"] == 1
        assert [p.name for p in summary["recent_projects"]] == ["Logo refresh", "Website rebuild"]

    def test_without_company(self):
        summary = dashboard_summary(None)

        assert summary["company"] is None
        assert summary["recent_projects"] == []


@pytest.mark.django_db
class TestDashboardPages:
    def test_requires_login(self, client):
        response = client.get("/dashboard/")

        assert response.status_code == 302
        assert response.url.startswith(settings.LOGIN_URL)

    def test_overview_without_membership(self, client, client_user):
        client.force_login(client_user)

        response = client.get("/dashboard/")

        assert response.status_code == 200
        assert "not linked to a company" in response.content.decode()

    def test_overview_shows_current_company(self, client, client_user, client_membership, company_activity):
        client.force_login(client_user)

        response = client.get("/dashboard/")

        assert response.status_code == 200
        assert response.context["company"].name == "Bright Smiles Dental"
        assert response.context["active_projects"] == 1
        assert "Website rebuild" in response.content.decode()

    def test_pages_follow_the_cookie(
        self, client, client_user, client_membership, other_company, company_activity, current_company_cookie
    ):
        CompanyUser.objects.create(company=other_company, user=client_user)
        client.force_login(client_user)
        current_company_cookie(other_company)

        projects = client.get("/dashboard/projects/")
        billing = client.get("/dashboard/billing/")

        assert [p.name for p in projects.context["projects"]] == ["Lakeside listings"]
        assert [i.description for i in billing.context["invoices"]] == ["Lakeside retainer"]
        assert billing.context["open_total_cents"] == 50000

    def test_cookie_for_foreign_company_is_ignored(
        self, client, client_user, client_membership, other_company, company_activity, current_company_cookie
    ):
        client.force_login(client_user)
        current_company_cookie(other_company)

        response = client.get("/dashboard/projects/")

        assert sorted(p.name for p in response.context["projects"]) == ["Logo refresh", "Website rebuild"]

    def test_services_page_counts_active_services(self, client, client_user, client_membership, company_activity):
        client.force_login(client_user)

        response = client.get("/dashboard/services/")

        assert response.status_code == 200
        assert response.context["active_count"] == 1
        assert "Social Media Management" in response.content.decode()


@pytest.mark.django_db
class TestSwitchCompany:
    def test_sets_cookie(self, client, client_user, client_membership, other_company):
        CompanyUser.objects.create(company=other_company, user=client_user)
        client.force_login(client_user)

        response = client.post(
            "/dashboard/switch-company/",
            {"company_id": str(other_company.pk), "next": "/dashboard/billing/"},
        )

        assert response.status_code == 302
        assert response.url == "/dashboard/billing/"
        assert response.cookies[settings.CURRENT_COMPANY_COOKIE].value == str(other_company.pk)

    def test_foreign_company_is_refused(self, client, client_user, client_membership, other_company):
        client.force_login(client_user)

        response = client.post(
            "/dashboard/switch-company/",
            {"company_id": str(other_company.pk), "next": "https://evil.example.com/"},
        )

        assert response.status_code == 302
        assert response.url == "/dashboard/"
        assert settings.CURRENT_COMPANY_COOKIE not in response.cookies
