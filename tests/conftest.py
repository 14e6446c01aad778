import datetime

import pytest
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from accounts.models import User
from agreements.models import AgreementTemplate, AgreementType
from catalog.models import Service, ServiceCategory
from companies.models import Company, CompanyUser, Contact
from proposals.models import Proposal
from proposals.services import create_proposal


@pytest.fixture(autouse=True)
def clear_cache():
    """Throttle history and cached lookups must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def manager_user(db):
    return User.objects.create_user(
        email="manager@test.com",
        password="testpass123",
        first_name="Manager",
        last_name="User",
        role=User.Role.MANAGER,
    )


@pytest.fixture
def client_user(db):
    return User.objects.create_user(
        email="client@test.com",
        password="testpass123",
        first_name="Client",
        last_name="User",
        role=User.Role.CLIENT,
    )


@pytest.fixture
def company(db):
    return Company.objects.create(
        name="Bright Smiles Dental",
        slug="bright-smiles-dental",
        type=Company.Type.CLIENT,
        status=Company.Status.ACTIVE,
        industry=Company.Industry.DENTAL,
        website_url="https://brightsmiles.example.com",
        address="12 Main St",
        city="Springfield",
        state="IL",
        postal_code="62701",
        phone="(217) 555-0100",
        contact_name="Dana Reed",
        contact_email="dana@brightsmiles.example.com",
    )


@pytest.fixture
def other_company(db):
    return Company.objects.create(
        name="Lakeside Rentals",
        slug="lakeside-rentals",
        type=Company.Type.CLIENT,
        industry=Company.Industry.REAL_ESTATE,
    )


@pytest.fixture
def contact(company):
    return Contact.objects.create(
        company=company,
        full_name="Dana Reed",
        email="dana@brightsmiles.example.com",
        is_primary=True,
    )


@pytest.fixture
def client_membership(client_user, company):
    return CompanyUser.objects.create(company=company, user=client_user)


@pytest.fixture
def category(db):
    return ServiceCategory.objects.create(name="Marketing Design", slug="marketing", sort_order=2)


@pytest.fixture
def monthly_service(category):
    return Service.objects.create(
        category=category,
        name="Social Media Management",
        slug="social-media-management",
        service_type=Service.ServiceType.RECURRING,
        billing_frequency=Service.BillingFrequency.MONTHLY,
        base_price_cents=120000,
    )


@pytest.fixture
def one_time_service(category):
    return Service.objects.create(
        category=category,
        name="Landing Page Design",
        slug="landing-page-design",
        service_type=Service.ServiceType.ONE_TIME,
        billing_frequency=Service.BillingFrequency.ONE_TIME,
        base_price_cents=180000,
    )


@pytest.fixture
def proposal(admin_user, company, monthly_service, one_time_service):
    return create_proposal(
        admin_user,
        company=company,
        title="Marketing refresh",
        valid_until=timezone.localdate() + datetime.timedelta(days=30),
        items=[
            {
                "service_id": monthly_service.pk,
                "name": monthly_service.name,
                "quantity": 1,
                "unit_price_cents": 120000,
            },
            {
                "service_id": one_time_service.pk,
                "name": one_time_service.name,
                "quantity": 2,
                "unit_price_cents": 90000,
            },
        ],
    )


@pytest.fixture
def sent_proposal(proposal):
    proposal.status = Proposal.Status.SENT
    proposal.sent_at = timezone.now()
    proposal.save(update_fields=["status", "sent_at"])
    return proposal


@pytest.fixture
def agreement_templates(db):
    return [
        AgreementTemplate.objects.create(
            type=AgreementType.MARKETING_AGREEMENT,
            title="Marketing Services Agreement",
            content=(
                "Agreement between {{company_name}} and {{client_name}} effective {{effective_date}}.\n\n"
                "{{services_table}}\n\nMonthly: {{monthly_total}}\nOne-time: {{onetime_total}}\n"
                "Total: {{total_amount}}"
            ),
            version=1,
        ),
        AgreementTemplate.objects.create(
            type=AgreementType.BAA,
            title="Business Associate Agreement",
            content="BAA for {{client_name}} at {{client_address}}.",
            version=1,
        ),
    ]


@pytest.fixture
def current_company_cookie(client):
    """Set the current-company cookie on the test client."""
    def _set(company):
        client.cookies[settings.CURRENT_COMPANY_COOKIE] = str(company.pk)
    return _set
