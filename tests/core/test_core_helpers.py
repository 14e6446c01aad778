import datetime

import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from django.utils import timezone

from accounts.models import User
from companies.models import Company
from core.http import client_ip, user_agent
from core.models import AuditLog
from core.pdf import safe_pdf_filename
from core.services import create_audit_log
from core.templatetags.portal_tags import cents, status_badge
from core.text import format_cents, to_slug, unique_slug
from core.verification import build_public_url, is_past_validity, validate_signer_email


class TestText:
    def test_to_slug_strips_punctuation_and_collapses_dashes(self):
        assert to_slug("Website Design & Development") == "website-design-development"
        assert to_slug("  UI/UX   Design ") == "uiux-design"
        assert to_slug("---") == ""

    @pytest.mark.django_db
    def test_unique_slug_appends_counter(self, company):
        assert unique_slug(Company, "Bright Smiles Dental") == "bright-smiles-dental-2"
        Company.objects.create(name="Bright Smiles Dental", slug="bright-smiles-dental-2")
        assert unique_slug(Company, "Bright Smiles Dental") == "bright-smiles-dental-3"
        assert unique_slug(Company, "Bright Smiles Dental", exclude_pk=company.pk) == "bright-smiles-dental"

    def test_format_cents(self):
        assert format_cents(123456) == "$1,234.56"
        assert format_cents(None) == "$0.00"
        assert cents("2500") == "$25.00"
        assert cents("not-a-number") == "$0.00"

    def test_status_badge_falls_back_to_gray(self):
        assert "green" in status_badge("signed")
        assert status_badge("unknown") == "bg-gray-100 text-gray-800"

    def test_safe_pdf_filename(self):
        assert safe_pdf_filename('Agreement: "Acme"/2026') == "Agreement- -Acme-2026.pdf"
        assert safe_pdf_filename("  ", "agreement") == "agreement.pdf"


class TestRequestMetadata:
    def test_client_ip_prefers_first_forwarded_address(self):
        rf = RequestFactory()
        request = rf.get("/", HTTP_X_FORWARDED_FOR="203.0.113.5, 10.0.0.1", HTTP_X_REAL_IP="198.51.100.2")
        assert client_ip(request) == "203.0.113.5"

        request = rf.get("/", HTTP_X_REAL_IP="198.51.100.2")
        assert client_ip(request) == "198.51.100.2"

        request = rf.get("/", REMOTE_ADDR="")
        assert client_ip(request) == "unknown"
        assert user_agent(request) == "unknown"

    def test_client_ip_skips_malformed_forwarded_header(self):
        rf = RequestFactory()
        request = rf.get("/", HTTP_X_FORWARDED_FOR="x" * 500, REMOTE_ADDR="192.0.2.44")
        assert client_ip(request) == "192.0.2.44"

        request = rf.get("/", HTTP_X_FORWARDED_FOR="not-an-ip, 10.0.0.1", HTTP_X_REAL_IP="bogus")
        assert client_ip(request) == "127.0.0.1"

    def test_client_ip_normalises_ipv6(self):
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR=" 2001:DB8::1 ")
        assert client_ip(request) == "2001:db8::1"


class TestVerification:
    def test_is_past_validity_uses_end_of_day(self):
        today = timezone.localdate()
        assert is_past_validity(None) is False
        assert is_past_validity(today) is False
        assert is_past_validity(today - datetime.timedelta(days=1)) is True

    def test_build_public_url(self, settings):
        settings.SITE_URL = "https://portal.example.com/"
        assert build_public_url("proposals", "abc") == "https://portal.example.com/proposals/abc/"

    def test_validate_signer_email(self):
        validate_signer_email("owner@brightsmiles.example")
        with pytest.raises(ValueError, match="valid email"):
            validate_signer_email("12345")
        with pytest.raises(ValueError, match="too long"):
            validate_signer_email("a" * 250 + "@example.com")


@pytest.mark.django_db
class TestAuditLog:
    def test_create_audit_log_drops_invalid_ip_and_anonymous_actor(self, company):
        entry = create_audit_log(
            actor=AnonymousUser(),
            company=company,
            action="TEST",
            entity_type="Company",
            entity_id=company.pk,
            ip="unknown",
        )
        assert entry.actor is None
        assert entry.ip_address is None
        assert entry.entity_id == str(company.pk)
        assert AuditLog.objects.count() == 1

    def test_create_audit_log_keeps_actor_and_ip(self, admin_user):
        entry = create_audit_log(
            actor=admin_user,
            company=None,
            action="TEST",
            entity_type="User",
            entity_id=admin_user.pk,
            ip="192.0.2.10",
        )
        assert entry.actor == admin_user
        assert entry.ip_address == "192.0.2.10"
        assert isinstance(entry.actor, User)
