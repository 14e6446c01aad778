import json

import pytest

from integrations.exceptions import IntegrationError
from reports.analyzers import CheckResult
from reports.models import Report, ReportItem


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


@pytest.fixture
def no_analyzers(monkeypatch):
    monkeypatch.setattr("reports.services.run_analyzer", lambda report_type, company, categories: None)


@pytest.fixture
def seeded_company(client, admin_user, company, no_analyzers):
    client.force_login(admin_user)
    post_json(client, "/api/v1/admin/reporting/", {"company_id": str(company.pk)})
    return company


@pytest.mark.django_db
class TestReportingAPI:
    """/api/v1/admin/reporting/"""

    def test_seed_report_set(self, client, admin_user, company, no_analyzers):
        client.force_login(admin_user)

        created = post_json(client, "/api/v1/admin/reporting/", {"company_id": str(company.pk)})
        conflict = post_json(client, "/api/v1/admin/reporting/", {"company_id": str(company.pk)})

        assert created.status_code == 201
        assert created.json()["reports_created"] == 6
        assert conflict.status_code == 409
        assert conflict.json()["report_set_id"] == str(created.json()["report_set_id"])

    def test_seed_report_set_requires_company(self, client, admin_user):
        client.force_login(admin_user)

        assert post_json(client, "/api/v1/admin/reporting/", {}).json() == {"detail": "company_id is required"}

    def test_analyze(self, monkeypatch, client, seeded_company):
        report = Report.objects.get(report_type="website")
        monkeypatch.setattr(
            "reports.services.run_analyzer",
            lambda report_type, company, categories: [CheckResult("Navigation", "pass", 4, "Clear nav.")],
        )

        ok = post_json(
            client, "/api/v1/admin/reporting/analyze/", {"report_id": str(report.pk), "report_type": "website"},
        )
        manual = post_json(
            client, "/api/v1/admin/reporting/analyze/", {"report_id": str(report.pk), "report_type": "guest"},
        )

        assert ok.json() == {"updated": 1, "total": 10}
        assert manual.status_code == 400

    def test_analyze_reports_failures(self, monkeypatch, client, seeded_company):
        report = Report.objects.get(report_type="website")

        def boom(report_type, company, categories):
            raise RuntimeError("down")

        monkeypatch.setattr("reports.services.run_analyzer", boom)

        response = post_json(
            client, "/api/v1/admin/reporting/analyze/", {"report_id": str(report.pk), "report_type": "website"},
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Analysis failed"}


@pytest.mark.django_db
class TestReportReadAndEdit:
    def test_client_reads_own_report_set_only(
        self, client, admin_user, client_user, client_membership, company, other_company, no_analyzers
    ):
        client.force_login(admin_user)
        post_json(client, "/api/v1/admin/reporting/", {"company_id": str(company.pk)})
        post_json(client, "/api/v1/admin/reporting/", {"company_id": str(other_company.pk)})

        client.force_login(client_user)
        response = client.get("/api/v1/report-sets/")

        assert response.status_code == 200
        assert [row["company_slug"] for row in response.json()["results"]] == ["bright-smiles-dental"]

    def test_item_edit_cascades(self, client, seeded_company):
        item = ReportItem.objects.get(report__report_type="competitors", category="Competitor 1")

        response = client.patch(
            f"/api/v1/report-items/{item.pk}/",
            data=json.dumps({"score": 1, "status": "pass"}),
            content_type="application/json",
        )

        assert response.status_code == 200
        item.report.refresh_from_db()
        assert item.report.score == 1
        assert item.report.max_score == 3

    def test_client_cannot_edit_items(self, client, client_user, client_membership, seeded_company):
        item = ReportItem.objects.filter(report__report_set__company=seeded_company).first()

        client.force_login(client_user)
        response = client.patch(
            f"/api/v1/report-items/{item.pk}/", data=json.dumps({"score": 5}), content_type="application/json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestStripeSyncAPI:
    """/api/v1/admin/stripe-sync/"""

    def test_without_key(self, client, admin_user):
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/stripe-sync/", {"dry_run": True})

        assert response.status_code == 502
        assert response.json()["detail"] == "Stripe API error: STRIPE_SECRET_KEY is not set"

    def test_reports_api_errors_once(self, monkeypatch, client, admin_user):
        def boom():
            raise IntegrationError("Stripe API error 401: invalid key")

        monkeypatch.setattr("integrations.stripe_catalog.list_active_products", boom)
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/stripe-sync/", {})

        assert response.status_code == 502
        assert response.json()["detail"] == "Stripe API error: Stripe API error 401: invalid key"

    def test_dry_run(self, monkeypatch, client, admin_user, monthly_service):
        monkeypatch.setattr(
            "integrations.stripe_catalog.list_active_products",
            lambda: [{"id": "prod_1", "name": "social media management", "default_price": "price_1"}],
        )
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/stripe-sync/", {"dry_run": True})

        assert response.status_code == 200
        assert response.json()["dry_run"] is True
        assert response.json()["summary"]["matched"] == 1
        monthly_service.refresh_from_db()
        assert monthly_service.stripe_product_id == ""


@pytest.mark.django_db
class TestClickUpAPI:
    """/api/v1/admin/clickup/"""

    def test_lists_requires_folder(self, client, admin_user):
        client.force_login(admin_user)

        assert client.get("/api/v1/admin/clickup/lists/").json() == {"detail": "folder_id is required"}

    @pytest.mark.parametrize(
        ("url", "detail"),
        [
            ("/api/v1/admin/clickup/folders/", "Failed to fetch ClickUp folders"),
            ("/api/v1/admin/clickup/lists/?folder_id=f1", "Failed to fetch ClickUp lists"),
            ("/api/v1/admin/clickup/members/", "Failed to fetch ClickUp members"),
        ],
    )
    def test_endpoints_without_token(self, client, admin_user, url, detail):
        client.force_login(admin_user)

        response = client.get(url)

        assert response.status_code == 502
        assert response.json() == {"detail": detail}

    def test_folders(self, monkeypatch, client, admin_user):
        monkeypatch.setattr("integrations.clickup.get_folders", lambda: [{"id": "f1", "name": "Clients"}])
        client.force_login(admin_user)

        assert client.get("/api/v1/admin/clickup/folders/").json() == [{"id": "f1", "name": "Clients"}]
