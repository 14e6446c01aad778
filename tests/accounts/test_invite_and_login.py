import pytest
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode

from accounts import services as account_services
from accounts.models import User
from companies.models import CompanyUser
from core.models import AuditLog
from integrations.exceptions import IntegrationError


@pytest.fixture
def sent_invites(monkeypatch):
    sent = []

    def fake_send_email(**kwargs):
        sent.append(kwargs)

    monkeypatch.setattr("notifications.services.send_email", fake_send_email)
    return sent


@pytest.mark.django_db
class TestInviteUser:
    def test_creates_member_and_sends_link(self, admin_user, company, sent_invites):
        user = account_services.invite_user(
            admin_user,
            email="  New.Client@Example.com ",
            full_name="New Client Person",
            role="client",
            client_id=company.pk,
        )

        assert user.email == "new.client@example.com"
        assert user.first_name == "New"
        assert user.last_name == "Client Person"
        assert user.role == User.Role.CLIENT
        assert user.client == company
        assert user.invited_by == admin_user
        assert not user.has_usable_password()
        assert CompanyUser.objects.filter(company=company, user=user).exists()
        assert AuditLog.objects.filter(action="USER_INVITED", entity_id=str(user.pk)).exists()

        assert len(sent_invites) == 1
        assert sent_invites[0]["to"] == user.email
        assert "/accounts/reset-password/?uid=" in sent_invites[0]["context"]["invite_url"]

    def test_rejects_duplicates_and_bad_roles(self, admin_user, client_user, sent_invites):
        with pytest.raises(ValueError, match="already exists"):
            account_services.invite_user(admin_user, email="CLIENT@test.com")
        with pytest.raises(ValueError, match="Invalid role"):
            account_services.invite_user(admin_user, email="x@test.com", role="superhero")
        with pytest.raises(ValueError, match="Email is required"):
            account_services.invite_user(admin_user, email="   ")
        assert sent_invites == []

    def test_keeps_account_when_email_fails(self, admin_user, monkeypatch):
        def failing_send(**kwargs):
            raise IntegrationError("Resend API error 500")

        monkeypatch.setattr("notifications.services.send_email", failing_send)

        user = account_services.invite_user(admin_user, email="admin2@test.com", role="admin")

        assert user.role == User.Role.ADMIN
        assert User.objects.filter(email="admin2@test.com").exists()

    def test_record_login_increments_counter_and_ignores_bad_ip(self, client_user):
        account_services.record_login(client_user, "198.51.100.7")
        account_services.record_login(client_user, "unknown")

        client_user.refresh_from_db()
        assert client_user.login_count == 2
        assert client_user.last_login_ip is None
        assert client_user.last_login is not None


@pytest.mark.django_db
class TestLoginView:
    def test_redirects_to_dashboard(self, client, client_user):
        response = client.post(
            "/accounts/login/",
            {"username": "client@test.com", "password": "testpass123"},
        )

        assert response.status_code == 302
        assert response.url == "/dashboard/"
        client_user.refresh_from_db()
        assert client_user.login_count == 1

    def test_ignores_external_next(self, client, client_user):
        response = client.post(
            "/accounts/login/?next=https://evil.example.com/",
            {"username": "client@test.com", "password": "testpass123"},
        )

        assert response.status_code == 302
        assert response.url == "/dashboard/"

    def test_rejects_wrong_password(self, client, client_user):
        response = client.post(
            "/accounts/login/",
            {"username": "client@test.com", "password": "wrong"},
        )

        assert response.status_code == 200
        assert b"Incorrect email address or password" in response.content


@pytest.mark.django_db
class TestChoosePassword:
    def test_sets_password_from_invite_link(self, client, client_user):
        uid = urlsafe_base64_encode(force_bytes(client_user.pk))
        token = default_token_generator.make_token(client_user)

        page = client.get(f"/accounts/reset-password/?uid={uid}&token={token}")
        assert page.status_code == 200

        response = client.post(
            "/accounts/reset-password/",
            {"uid": uid, "token": token, "new_password1": "Sunflower-Orbit-42", "new_password2": "Sunflower-Orbit-42"},
        )

        assert response.status_code == 302
        assert response.url == "/accounts/login/"
        client_user.refresh_from_db()
        assert client_user.check_password("Sunflower-Orbit-42")

    def test_rejects_invalid_link(self, client):
        response = client.get("/accounts/reset-password/?uid=bm90LWEtdXVpZA&token=nope")

        assert response.status_code == 400
