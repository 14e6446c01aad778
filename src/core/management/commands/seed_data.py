"""Seed the database with agreement templates, the service catalog and an admin user."""
from django.core.management.base import BaseCommand
from django.db import transaction


MARKETING_AGREEMENT = """# Marketing Services Agreement

This Marketing Services Agreement is entered into on {{effective_date}} between {{company_name}} ("Agency") and {{client_name}} ("Client").

**Client:** {{client_name}}
**Address:** {{client_address}}
**Contact:** {{client_contact_name}} ({{client_contact_email}})
**Phone:** {{client_phone}}

## 1. Services

Agency will provide the following services:

{{services_table}}

## 2. Fees

Recurring fees: {{monthly_total}}
One-time fees: {{onetime_total}}
Total agreement value: {{total_amount}}

Recurring fees are invoiced monthly in advance. One-time fees are invoiced on signature.

## 3. Term

This agreement starts on the effective date and continues month to month. Either party may end it with thirty (30) days written notice.

## 4. Ownership

Upon full payment, Client owns the final deliverables. Agency may show the work in its portfolio unless Client objects in writing.

## 5. Acceptance

By signing below, Client agrees to the terms of this agreement.
"""

BAA = """# Business Associate Agreement

This Business Associate Agreement is entered into on {{effective_date}} between {{client_name}} ("Covered Entity") and {{company_name}} ("Business Associate").

**Covered Entity:** {{client_name}}
**Address:** {{client_address}}

## 1. Purpose

Business Associate provides marketing services to Covered Entity that may involve access to protected health information (PHI) as defined by HIPAA.

## 2. Obligations of Business Associate

Business Associate will not use or disclose PHI other than as permitted by this agreement or required by law, will use appropriate safeguards to prevent unauthorized use or disclosure, and will report any such use or disclosure to Covered Entity without unreasonable delay.

## 3. Term and Termination

This agreement remains in effect for as long as Business Associate provides services to Covered Entity. On termination, Business Associate will return or destroy all PHI.

## 4. Acceptance

By signing below, Covered Entity agrees to the terms of this agreement.
"""

AGREEMENT_TEMPLATES = [
    {"type": "marketing_agreement", "title": "Marketing Services Agreement", "content": MARKETING_AGREEMENT},
    {"type": "baa", "title": "Business Associate Agreement", "content": BAA},
]

CATEGORIES = [
    ("Brand Design", "brand", 1),
    ("Marketing Design", "marketing", 2),
    ("Information Design", "information", 3),
    ("Product Design", "product", 4),
    ("Service Design", "service", 5),
]

# (category slug, name, service_type, billing_frequency, base price cents)
SERVICES = [
    ("brand", "Brand Identity Package", "one_time", "one_time", 350000),
    ("brand", "Logo Design", "one_time", "one_time", 150000),
    ("brand", "Business Cards", "add_on", "one_time", 25000),
    ("marketing", "Social Media Management", "recurring", "monthly", 120000),
    ("marketing", "Email Campaign Design", "recurring", "monthly", 60000),
    ("marketing", "Landing Page Design", "one_time", "one_time", 180000),
    ("information", "Website Design & Development", "one_time", "one_time", 850000),
    ("information", "Website Maintenance", "recurring", "monthly", 25000),
    ("information", "Signage", "add_on", "one_time", 40000),
    ("product", "UI/UX Design", "one_time", "one_time", 600000),
    ("service", "Process Mapping", "one_time", "one_time", 200000),
    ("service", "Automation & AI", "recurring", "monthly", 90000),
]


class Command(BaseCommand):
    help = "Seed agreement templates, the service catalog and an optional admin user"

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default="", help="Create an ADMIN user with this email")
        parser.add_argument("--admin-password", default="", help="Password for --admin-email")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding data...")
        templates = self._create_agreement_templates()
        categories = self._create_categories()
        services = self._create_services(categories)
        if options["admin_email"]:
            self._create_admin(options["admin_email"], options["admin_password"])

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: {templates} agreement templates, "
            f"{len(categories)} categories, {services} services"
        ))

    def _create_agreement_templates(self) -> int:
        from agreements.models import AgreementTemplate

        created = 0
        for data in AGREEMENT_TEMPLATES:
            _, was_created = AgreementTemplate.objects.get_or_create(
                type=data["type"],
                version=1,
                defaults={"title": data["title"], "content": data["content"], "is_active": True},
            )
            created += int(was_created)
        return created

    def _create_categories(self) -> dict:
        from catalog.models import ServiceCategory

        categories = {}
        for name, slug, sort_order in CATEGORIES:
            category, _ = ServiceCategory.objects.get_or_create(
                slug=slug,
                defaults={"name": name, "sort_order": sort_order},
            )
            categories[slug] = category
        return categories

    def _create_services(self, categories) -> int:
        from catalog.models import Service
        from core.text import to_slug

        created = 0
        for category_slug, name, service_type, frequency, price in SERVICES:
            _, was_created = Service.objects.get_or_create(
                slug=to_slug(name),
                defaults={
                    "category": categories[category_slug],
                    "name": name,
                    "service_type": service_type,
                    "billing_frequency": frequency,
                    "base_price_cents": price,
                },
            )
            created += int(was_created)
        return created

    def _create_admin(self, email, password):
        from accounts.models import User

        user, created = User.objects.get_or_create(
            email=email.strip().lower(),
            defaults={"role": User.Role.ADMIN, "is_staff": True},
        )
        if created or password:
            if password:
                user.set_password(password)
            else:
                user.set_unusable_password()
            user.save()
        self.stdout.write(f"Admin user {'created' if created else 'updated'}: {user.email}")
