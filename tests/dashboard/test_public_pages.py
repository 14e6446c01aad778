import datetime

import pytest
from django.utils import timezone

from agreements.models import Agreement
from agreements.services import generate_agreement
from proposals.models import Proposal


@pytest.fixture
def shared_agreement(proposal, agreement_templates):
    agreement = generate_agreement(proposal, "marketing_agreement")
    agreement.status = Agreement.Status.SENT
    agreement.sent_at = timezone.now()
    agreement.save(update_fields=["status", "sent_at"])
    return agreement


@pytest.mark.django_db
class TestProposalPages:
    def test_page_marks_viewed(self, client, sent_proposal):
        response = client.get(f"/proposals/{sent_proposal.token}/")

        assert response.status_code == 200
        assert "Marketing refresh" in response.content.decode()
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.VIEWED
        assert sent_proposal.view_count == 1

    def test_unknown_token_is_404(self, client):
        response = client.get("/proposals/00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404

    def test_accept_form_post(self, client, sent_proposal):
        response = client.post(
            f"/proposals/{sent_proposal.token}/accept/",
            {"email": "dana@brightsmiles.example.com"},
            HTTP_USER_AGENT="Safari",
        )

        assert response.status_code == 302
        assert response.url == f"/proposals/{sent_proposal.token}/"
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.ACCEPTED
        assert sent_proposal.accepted_by_user_agent == "Safari"

    def test_accept_without_email_rerenders_with_error(self, client, sent_proposal):
        response = client.post(f"/proposals/{sent_proposal.token}/accept/", {"email": ""})

        assert response.status_code == 400
        assert "Email is required" in response.content.decode()

    def test_accept_with_malformed_email_rerenders_with_error(self, client, sent_proposal):
        response = client.post(f"/proposals/{sent_proposal.token}/accept/", {"email": "not an address"})

        assert response.status_code == 400
        assert "Enter a valid email address" in response.content.decode()
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.SENT

    def test_accept_after_validity_shows_expired(self, client, sent_proposal):
        Proposal.objects.filter(pk=sent_proposal.pk).update(
            valid_until=timezone.localdate() - datetime.timedelta(days=2),
        )

        response = client.post(f"/proposals/{sent_proposal.token}/accept/", {"email": "a@b.com"})

        assert response.status_code == 400
        assert "Proposal has expired" in response.content.decode()
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.EXPIRED

    def test_decline_form_post(self, client, sent_proposal):
        response = client.post(f"/proposals/{sent_proposal.token}/decline/")

        assert response.status_code == 302
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.DECLINED

    def test_accept_requires_post(self, client, sent_proposal):
        assert client.get(f"/proposals/{sent_proposal.token}/accept/").status_code == 405


@pytest.mark.django_db
class TestAgreementPages:
    def test_page_and_sign(self, client, shared_agreement):
        page = client.get(f"/agreements/{shared_agreement.token}/")
        assert page.status_code == 200
        assert "Marketing Services Agreement" in page.content.decode()

        response = client.post(
            f"/agreements/{shared_agreement.token}/sign/",
            {"name": "Dana Reed", "email": "dana@brightsmiles.example.com"},
            REMOTE_ADDR="198.51.100.7",
        )

        assert response.status_code == 302
        shared_agreement.refresh_from_db()
        assert shared_agreement.status == Agreement.Status.SIGNED
        assert shared_agreement.signed_by_ip == "198.51.100.7"

    def test_sign_without_name_rerenders_with_error(self, client, shared_agreement):
        response = client.post(f"/agreements/{shared_agreement.token}/sign/", {"name": "", "email": "a@b.com"})

        assert response.status_code == 400
        assert "Full legal name is required" in response.content.decode()
