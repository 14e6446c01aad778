import datetime
import json

import pytest
from django.http import HttpResponse
from django.utils import timezone

from agreements.models import Agreement
from agreements.services import generate_agreement
from proposals.models import Proposal


def post_json(client, url, payload, **extra):
    return client.post(url, data=json.dumps(payload), content_type="application/json", **extra)


@pytest.fixture
def draft_agreement(proposal, agreement_templates):
    return generate_agreement(proposal, "marketing_agreement")


@pytest.fixture
def sent_agreement(draft_agreement):
    Agreement.objects.filter(pk=draft_agreement.pk).update(status=Agreement.Status.SENT, sent_at=timezone.now())
    draft_agreement.refresh_from_db()
    return draft_agreement


@pytest.mark.django_db
class TestAdminProposalAPI:
    """/api/v1/admin/proposals/"""

    def test_create(self, client, admin_user, company, monthly_service):
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/proposals/", {
            "company_id": str(company.pk),
            "title": "Social launch",
            "items": [
                {
                    "service_id": str(monthly_service.pk),
                    "name": "Social Media Management",
                    "quantity": 2,
                    "unit_price_cents": 100000,
                },
            ],
        })

        assert response.status_code == 201
        proposal = Proposal.objects.get(pk=response.json()["proposal"]["id"])
        assert response.json()["proposal"]["token"] == str(proposal.token)
        assert proposal.total_amount_cents == 200000
        assert proposal.status == Proposal.Status.DRAFT

    def test_create_requires_items(self, client, admin_user, company):
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/proposals/", {"company_id": str(company.pk), "title": "Empty"})

        assert response.status_code == 400
        assert response.json() == {"detail": "company_id, title, and at least one item are required"}

    def test_update_replaces_items(self, client, admin_user, proposal):
        client.force_login(admin_user)

        response = client.patch(
            f"/api/v1/admin/proposals/{proposal.pk}/",
            data=json.dumps({"title": "Refresh v2", "items": [{"name": "Audit", "unit_price_cents": 50000}]}),
            content_type="application/json",
        )

        assert response.status_code == 200
        proposal.refresh_from_db()
        assert proposal.title == "Refresh v2"
        assert proposal.total_amount_cents == 50000
        assert list(proposal.items.values_list("name", flat=True)) == ["Audit"]

    def test_update_accepted_proposal_is_rejected(self, client, admin_user, proposal):
        Proposal.objects.filter(pk=proposal.pk).update(status=Proposal.Status.ACCEPTED)
        client.force_login(admin_user)

        response = client.patch(
            f"/api/v1/admin/proposals/{proposal.pk}/",
            data=json.dumps({"items": [{"name": "Audit", "unit_price_cents": 1}]}),
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Proposal is accepted and can no longer be edited"}
        proposal.refresh_from_db()
        assert proposal.total_amount_cents == 300000
        assert proposal.items.count() == 2

    def test_send(self, monkeypatch, client, admin_user, proposal, contact):
        monkeypatch.setattr("integrations.resend.send", lambda **kwargs: "re_sent")
        client.force_login(admin_user)

        response = client.post(f"/api/v1/admin/proposals/{proposal.pk}/send/")
        again = client.post(f"/api/v1/admin/proposals/{proposal.pk}/send/")

        assert response.status_code == 200
        assert response.json()["status"] == "sent"
        assert again.json() == {"detail": "Only draft proposals can be sent"}

    def test_generate_requires_company_and_services(self, client, admin_user):
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/proposals/generate/", {"meeting_notes": "x" * 200})

        assert response.status_code == 400

    def test_generate_without_ai_key_is_server_error(self, client, admin_user, company, monthly_service):
        client.force_login(admin_user)

        response = post_json(client, "/api/v1/admin/proposals/generate/", {
            "company_id": str(company.pk),
            "service_ids": [str(monthly_service.pk)],
            "meeting_notes": "Discussed a social media relaunch with two posts a week and a new content calendar. " * 2,
        })

        assert response.status_code == 500
        assert "ANTHROPIC_API_KEY" in response.json()["detail"]

    def test_auto_generate_rejects_short_notes(self, client, admin_user, company, monthly_service):
        client.force_login(admin_user)

        response = post_json(
            client, "/api/v1/admin/proposals/auto-generate/", {"company_id": str(company.pk), "meeting_notes": "short"},
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestPublicProposalAPI:
    """/api/v1/public/proposals/<token>/"""

    def test_json_flow(self, client, sent_proposal):
        view = client.get(f"/api/v1/public/proposals/{sent_proposal.token}/")
        assert view.status_code == 200
        assert view.json()["company_name"] == "Bright Smiles Dental"
        assert [item["name"] for item in view.json()["items"]] == ["Social Media Management", "Landing Page Design"]

        missing_email = post_json(client, f"/api/v1/public/proposals/{sent_proposal.token}/accept/", {})
        assert missing_email.json() == {"detail": "Email is required"}

        accepted = post_json(
            client, f"/api/v1/public/proposals/{sent_proposal.token}/accept/", {"email": "dana@brightsmiles.example.com"},
        )
        assert accepted.status_code == 200
        assert accepted.json()["success"] is True

        declined = client.post(f"/api/v1/public/proposals/{sent_proposal.token}/decline/")
        assert declined.json() == {"detail": "Proposal is accepted"}

    def test_unknown_token(self, client):
        assert client.get("/api/v1/public/proposals/00000000-0000-0000-0000-000000000000/").status_code == 404

    @pytest.mark.parametrize(
        "payload",
        [{"email": 12345}, {"email": ["dana@brightsmiles.example.com"]}, ["dana@brightsmiles.example.com"]],
    )
    def test_accept_rejects_non_string_payloads(self, client, sent_proposal, payload):
        response = post_json(client, f"/api/v1/public/proposals/{sent_proposal.token}/accept/", payload)

        assert response.status_code == 400
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.SENT

    def test_accept_rejects_oversized_email(self, client, sent_proposal):
        response = post_json(
            client, f"/api/v1/public/proposals/{sent_proposal.token}/accept/", {"email": "d" * 300 + "@example.com"},
        )

        assert response.status_code == 400
        assert "email" in response.json()

    def test_accept_records_real_address_when_forwarded_header_is_garbage(self, client, sent_proposal):
        response = post_json(
            client,
            f"/api/v1/public/proposals/{sent_proposal.token}/accept/",
            {"email": "dana@brightsmiles.example.com"},
            HTTP_X_FORWARDED_FOR="spoofed-" * 40,
        )

        assert response.status_code == 200
        sent_proposal.refresh_from_db()
        assert sent_proposal.accepted_by_ip == "127.0.0.1"

    def test_accept_queues_agreement_generation(
        self, client, sent_proposal, agreement_templates, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            response = post_json(
                client,
                f"/api/v1/public/proposals/{sent_proposal.token}/accept/",
                {"email": "dana@brightsmiles.example.com"},
            )

        assert response.status_code == 200
        assert sorted(Agreement.objects.filter(proposal=sent_proposal).values_list("type", flat=True)) == [
            "baa", "marketing_agreement",
        ]


@pytest.mark.django_db
class TestAdminAgreementAPI:
    """/api/v1/admin/agreements/"""

    def test_generate(self, client, admin_user, proposal, agreement_templates):
        client.force_login(admin_user)

        response = post_json(
            client, "/api/v1/admin/agreements/generate/", {"proposal_id": str(proposal.pk), "type": "baa"},
        )

        assert response.status_code == 201
        assert response.json()["type"] == "baa"
        assert response.json()["status"] == "draft"

    def test_generate_without_template(self, client, admin_user, proposal):
        client.force_login(admin_user)

        response = post_json(
            client, "/api/v1/admin/agreements/generate/", {"proposal_id": str(proposal.pk), "type": "baa"},
        )

        assert response.json() == {"detail": "No active template found for type: baa"}

    def test_send(self, monkeypatch, client, admin_user, draft_agreement):
        monkeypatch.setattr("integrations.resend.send", lambda **kwargs: "re_sent")
        client.force_login(admin_user)
        valid_until = timezone.localdate() + datetime.timedelta(days=10)

        response = post_json(
            client, f"/api/v1/admin/agreements/{draft_agreement.pk}/send/", {"valid_until": valid_until.isoformat()},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "sent"
        assert response.json()["valid_until"] == valid_until.isoformat()

    def test_pdf(self, monkeypatch, client, admin_user, draft_agreement):
        rendered = {}

        def fake_render_pdf(template_name, context, filename):
            rendered.update(template=template_name, context=context, filename=filename)
            response = HttpResponse(b"%PDF-1.7", content_type="application/pdf")
            response["Content-Disposition"] = f'attachment; filename="{filename}"'
            return response

        monkeypatch.setattr("core.pdf.render_pdf", fake_render_pdf)
        client.force_login(admin_user)

        response = client.get(f"/api/v1/admin/agreements/{draft_agreement.pk}/pdf/")

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"
        assert rendered["template"] == "agreements/agreement_pdf.html"
        assert rendered["context"]["agreement"] == draft_agreement
        assert rendered["filename"].endswith(".pdf")


@pytest.mark.django_db
class TestPublicAgreementAPI:
    """/api/v1/public/agreements/<token>/"""

    def test_sign(self, client, sent_agreement):
        signer = {"name": "Dana Reed", "email": "dana@brightsmiles.example.com"}

        view = client.get(f"/api/v1/public/agreements/{sent_agreement.token}/")
        signed = post_json(client, f"/api/v1/public/agreements/{sent_agreement.token}/sign/", signer)
        again = post_json(client, f"/api/v1/public/agreements/{sent_agreement.token}/sign/", signer)

        assert view.status_code == 200
        assert view.json()["company_name"] == "Bright Smiles Dental"
        assert signed.status_code == 200
        assert signed.json()["success"] is True
        assert again.json() == {"detail": "Agreement has already been signed"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Dana Reed", "email": 12345},
            {"name": ["Dana"], "email": "dana@brightsmiles.example.com"},
            {"name": "D" * 300, "email": "dana@brightsmiles.example.com"},
            ["Dana Reed"],
        ],
    )
    def test_sign_rejects_malformed_payloads(self, client, sent_agreement, payload):
        response = post_json(client, f"/api/v1/public/agreements/{sent_agreement.token}/sign/", payload)

        assert response.status_code == 400
        sent_agreement.refresh_from_db()
        assert sent_agreement.status == Agreement.Status.SENT
        assert sent_agreement.signed_at is None
