import json

import pytest
from django.core.exceptions import ImproperlyConfigured

from integrations.exceptions import IntegrationError
from notifications.models import EmailLog
from notifications.services import apply_resend_event, queue_email, send_email
from notifications.tasks import send_email_task

INVITE_CONTEXT = {
    "full_name": "Dana Reed",
    "inviter_name": "Admin User",
    "invite_url": "http://localhost:8000/accounts/reset-password/?uid=abc&token=def",
}


def _invite_kwargs(**extra):
    return {
        "to": "dana@brightsmiles.example.com",
        "subject": "Welcome",
        "template_name": "emails/invite",
        "context": INVITE_CONTEXT,
        "template_key": "invite",
        **extra,
    }


@pytest.fixture
def resend_calls(monkeypatch):
    calls = []

    def fake_send(**kwargs):
        calls.append(kwargs)
        return f"re_{len(calls)}"

    monkeypatch.setattr("integrations.resend.send", fake_send)
    return calls


@pytest.fixture
def sent_log(db):
    return EmailLog.objects.create(
        to_email="dana@brightsmiles.example.com",
        subject="Proposal",
        template="proposal_sent",
        resend_id="re_abc",
    )


@pytest.mark.django_db
class TestSendEmail:
    def test_renders_and_logs(self, resend_calls, company):
        log = send_email(**_invite_kwargs(company=company))

        assert log.status == EmailLog.Status.SENT
        assert log.resend_id == "re_1"
        assert log.company == company
        sent = resend_calls[0]
        assert sent["to"] == "dana@brightsmiles.example.com"
        assert "Hi Dana Reed," in sent["text"]
        assert "Agency Studio" in sent["text"]
        assert INVITE_CONTEXT["invite_url"] in sent["text"]
        assert "<html" in sent["html"]

    def test_failure_is_logged_and_raised(self, monkeypatch):
        def boom(**kwargs):
            raise IntegrationError("Resend API error 422: invalid from")

        monkeypatch.setattr("integrations.resend.send", boom)

        with pytest.raises(IntegrationError):
            send_email(**_invite_kwargs())

        log = EmailLog.objects.get()
        assert log.status == EmailLog.Status.FAILED
        assert log.metadata == {"error": "Resend API error 422: invalid from"}

    def test_without_api_key(self):
        with pytest.raises(ImproperlyConfigured, match="RESEND_API_KEY"):
            send_email(**_invite_kwargs())

        assert EmailLog.objects.get().status == EmailLog.Status.FAILED

    def test_task_swallows_failures(self):
        result = send_email_task(**_invite_kwargs())

        assert result is None
        assert EmailLog.objects.get().status == EmailLog.Status.FAILED

    def test_queue_email_sends_after_commit(self, resend_calls, company, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            queue_email(**_invite_kwargs(company=company))
            assert resend_calls == []

        assert len(callbacks) == 1
        assert len(resend_calls) == 1
        assert EmailLog.objects.get().company == company


@pytest.mark.django_db
class TestResendEvents:
    @pytest.mark.parametrize(
        ("event", "status"),
        [
            ("email.delivered", EmailLog.Status.DELIVERED),
            ("email.bounced", EmailLog.Status.BOUNCED),
            ("email.complained", EmailLog.Status.BOUNCED),
            ("email.delivery_delayed", EmailLog.Status.SENT),
        ],
    )
    def test_apply_event(self, sent_log, event, status):
        updated = apply_resend_event(
            {"type": event, "data": {"email_id": "re_abc", "created_at": "2026-01-05T10:00:00Z"}},
        )

        assert updated == 1
        sent_log.refresh_from_db()
        assert sent_log.status == status
        assert sent_log.metadata == {"resend_event": event, "timestamp": "2026-01-05T10:00:00Z"}

    def test_unknown_or_incomplete_events_are_ignored(self, sent_log):
        assert apply_resend_event({"type": "email.opened", "data": {"email_id": "re_abc"}}) == 0
        assert apply_resend_event({"type": "email.delivered", "data": {}}) == 0
        assert apply_resend_event({}) == 0
        sent_log.refresh_from_db()
        assert sent_log.status == EmailLog.Status.SENT

    def test_webhook_endpoint(self, client, sent_log):
        response = client.post(
            "/api/v1/webhooks/resend/",
            data=json.dumps({"type": "email.delivered", "data": {"email_id": "re_abc"}}),
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        sent_log.refresh_from_db()
        assert sent_log.status == EmailLog.Status.DELIVERED

    def test_webhook_accepts_non_object_bodies(self, client):
        response = client.post("/api/v1/webhooks/resend/", data="[]", content_type="application/json")

        assert response.status_code == 200
