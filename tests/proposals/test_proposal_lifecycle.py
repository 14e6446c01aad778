import datetime

import pytest
from django.http import Http404
from django.utils import timezone

from agreements.models import Agreement
from core.models import AuditLog
from notifications.models import EmailLog
from proposals.models import Proposal
from proposals.services import (
    accept_proposal,
    create_proposal,
    decline_proposal,
    expire_overdue_proposals,
    send_proposal,
    update_proposal,
    view_proposal_by_token,
)


@pytest.fixture
def resend_outbox(monkeypatch):
    sent = []

    def fake_send(*, to, subject, html, text=""):
        sent.append({"to": to, "subject": subject, "html": html, "text": text})
        return f"re_{len(sent)}"

    monkeypatch.setattr("integrations.resend.send", fake_send)
    return sent


@pytest.mark.django_db
class TestDrafting:
    def test_create_totals_line_items(self, proposal):
        assert proposal.status == Proposal.Status.DRAFT
        assert proposal.total_amount_cents == 120000 + 2 * 90000
        assert proposal.generation_status == Proposal.GenerationStatus.NONE
        assert [item.sort_order for item in proposal.items.all()] == [0, 1]
        assert len(proposal.token) == 36
        assert AuditLog.objects.filter(action="PROPOSAL_CREATED", entity_id=str(proposal.pk)).exists()

    def test_create_requires_items(self, admin_user, company):
        with pytest.raises(ValueError, match="at least one item"):
            create_proposal(admin_user, company=company, title="Empty", items=[])
        with pytest.raises(ValueError):
            create_proposal(
                admin_user, company=None, title="No company", items=[{"name": "x", "unit_price_cents": 1}],
            )

    def test_create_with_sections_is_marked_generated(self, admin_user, company):
        proposal = create_proposal(
            admin_user,
            company=company,
            title="Generated",
            items=[{"name": "Logo", "unit_price_cents": 5000}],
            sections=[{"type": "overview_and_goals", "title": "Overview", "content": "Hello", "sort_order": 1}],
        )

        assert proposal.generation_status == Proposal.GenerationStatus.COMPLETED
        assert proposal.generated_at is not None

    def test_update_replaces_items(self, admin_user, proposal):
        update_proposal(
            proposal,
            admin_user,
            title="Renamed",
            items=[{"name": "Signage", "quantity": 3, "unit_price_cents": 40000}],
        )

        proposal.refresh_from_db()
        assert proposal.title == "Renamed"
        assert list(proposal.items.values_list("name", "quantity")) == [("Signage", 3)]
        assert proposal.total_amount_cents == 120000

    def test_update_sections_sets_generation_status(self, admin_user, proposal):
        update_proposal(
            proposal,
            admin_user,
            sections=[{"type": "scope_of_project", "title": "Scope", "content": "Details", "sort_order": 2}],
        )

        proposal.refresh_from_db()
        assert proposal.generation_status == Proposal.GenerationStatus.COMPLETED
        assert proposal.sections[0]["type"] == "scope_of_project"

    def test_update_allowed_while_client_is_reviewing(self, admin_user, sent_proposal):
        update_proposal(sent_proposal, admin_user, title="Revised offer")

        sent_proposal.refresh_from_db()
        assert sent_proposal.title == "Revised offer"

    @pytest.mark.parametrize(
        "final_status",
        [Proposal.Status.ACCEPTED, Proposal.Status.DECLINED, Proposal.Status.EXPIRED],
    )
    def test_update_rejected_once_final(self, admin_user, proposal, final_status):
        Proposal.objects.filter(pk=proposal.pk).update(status=final_status)

        with pytest.raises(ValueError, match="can no longer be edited"):
            update_proposal(
                proposal, admin_user, total_amount_cents=1, items=[{"name": "Swap", "unit_price_cents": 1}],
            )

        proposal.refresh_from_db()
        assert proposal.total_amount_cents == 300000
        assert proposal.items.count() == 2
        assert not AuditLog.objects.filter(action="PROPOSAL_UPDATED").exists()


@pytest.mark.django_db
class TestSendAndView:
    def test_send_emails_share_link_after_commit(
        self, admin_user, proposal, resend_outbox, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            sent = send_proposal(proposal, admin_user, ip="192.0.2.1")

        assert sent.status == Proposal.Status.SENT
        assert sent.sent_at is not None
        assert resend_outbox[0]["to"] == "dana@brightsmiles.example.com"
        assert f"/proposals/{proposal.token}/" in resend_outbox[0]["text"]
        log = EmailLog.objects.get(template="proposal_sent")
        assert log.resend_id == "re_1"
        assert log.company == proposal.company

    def test_send_only_from_draft(self, admin_user, sent_proposal):
        with pytest.raises(ValueError, match="Only draft proposals"):
            send_proposal(sent_proposal, admin_user)

    def test_send_survives_email_failure(self, admin_user, proposal, django_capture_on_commit_callbacks):
        # No RESEND_API_KEY in tests: the send fails and is logged, the proposal is still sent.
        with django_capture_on_commit_callbacks(execute=True):
            sent = send_proposal(proposal, admin_user)

        assert sent.status == Proposal.Status.SENT
        assert EmailLog.objects.get(template="proposal_sent").status == EmailLog.Status.FAILED

    def test_view_by_token_counts_views(self, sent_proposal):
        first = view_proposal_by_token(sent_proposal.token)
        second = view_proposal_by_token(sent_proposal.token)

        assert first.status == Proposal.Status.VIEWED
        assert first.first_viewed_at is not None
        assert second.view_count == 2
        assert second.first_viewed_at == first.first_viewed_at

    def test_view_by_token_ignores_drafts_and_unknown_tokens(self, proposal):
        viewed = view_proposal_by_token(proposal.token)

        assert viewed.status == Proposal.Status.DRAFT
        assert viewed.view_count == 0
        with pytest.raises(Http404):
            view_proposal_by_token("00000000-0000-0000-0000-000000000000")


@pytest.mark.django_db
class TestAcceptAndDecline:
    def test_accept_records_signature_audit_trail(self, sent_proposal):
        accepted = accept_proposal(
            sent_proposal.token, " dana@brightsmiles.example.com ", ip="203.0.113.9", user_agent="Firefox",
        )

        assert accepted.status == Proposal.Status.ACCEPTED
        assert accepted.accepted_by_email == "dana@brightsmiles.example.com"
        assert accepted.accepted_by_ip == "203.0.113.9"
        assert accepted.accepted_by_user_agent == "Firefox"
        assert accepted.accepted_at is not None
        log = AuditLog.objects.get(action="PROPOSAL_ACCEPTED")
        assert log.actor is None
        assert log.ip_address == "203.0.113.9"

    def test_accept_rejects_invalid_states(self, proposal):
        with pytest.raises(ValueError, match="Email is required"):
            accept_proposal(proposal.token, "")
        with pytest.raises(ValueError, match="not been sent"):
            accept_proposal(proposal.token, "a@b.com")

    def test_accept_rejects_malformed_email(self, sent_proposal):
        with pytest.raises(ValueError, match="Enter a valid email address"):
            accept_proposal(sent_proposal.token, "12345")
        with pytest.raises(ValueError, match="too long"):
            accept_proposal(sent_proposal.token, "d" * 260 + "@example.com")

        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.SENT

    def test_accept_twice_fails(self, sent_proposal):
        accept_proposal(sent_proposal.token, "a@b.com")

        with pytest.raises(ValueError, match="already been accepted"):
            accept_proposal(sent_proposal.token, "a@b.com")
        with pytest.raises(ValueError, match="Proposal is accepted"):
            decline_proposal(sent_proposal.token)

    def test_accept_after_validity_persists_expiry(self, sent_proposal):
        Proposal.objects.filter(pk=sent_proposal.pk).update(
            valid_until=timezone.localdate() - datetime.timedelta(days=1),
        )

        with pytest.raises(ValueError, match="expired"):
            accept_proposal(sent_proposal.token, "a@b.com")

        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.EXPIRED
        assert sent_proposal.accepted_at is None
        with pytest.raises(ValueError, match="Proposal is expired"):
            accept_proposal(sent_proposal.token, "a@b.com")

    def test_accept_generates_agreements_after_commit(
        self, sent_proposal, agreement_templates, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            accept_proposal(sent_proposal.token, "a@b.com")

        types = set(Agreement.objects.filter(proposal=sent_proposal).values_list("type", flat=True))
        assert types == {"marketing_agreement", "baa"}

    def test_accept_succeeds_when_agreement_generation_fails(self, sent_proposal, django_capture_on_commit_callbacks):
        # No templates: generation raises inside the task, acceptance stands.
        with django_capture_on_commit_callbacks(execute=True):
            accepted = accept_proposal(sent_proposal.token, "a@b.com")

        assert accepted.status == Proposal.Status.ACCEPTED
        assert not Agreement.objects.exists()

    def test_decline(self, sent_proposal):
        declined = decline_proposal(sent_proposal.token, ip="203.0.113.9", user_agent="Safari")

        assert declined.status == Proposal.Status.DECLINED
        assert declined.declined_at is not None
        assert AuditLog.objects.filter(action="PROPOSAL_DECLINED").exists()

    def test_decline_draft_fails(self, proposal):
        with pytest.raises(ValueError, match="not been sent"):
            decline_proposal(proposal.token)

    def test_expire_overdue_proposals(self, sent_proposal):
        Proposal.objects.filter(pk=sent_proposal.pk).update(
            valid_until=timezone.localdate() - datetime.timedelta(days=2),
        )

        assert expire_overdue_proposals() == 1
        sent_proposal.refresh_from_db()
        assert sent_proposal.status == Proposal.Status.EXPIRED
        assert expire_overdue_proposals() == 0
