import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("slug", models.SlugField(max_length=255, unique=True, verbose_name="slug")),
                (
                    "type",
                    models.CharField(
                        choices=[("lead", "Lead"), ("prospect", "Prospect"), ("client", "Client")],
                        db_index=True,
                        default="client",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("needs_qualified", "Needs qualified"),
                            ("needs_proposal", "Needs proposal"),
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("archived", "Archived"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "industry",
                    models.CharField(
                        blank=True,
                        choices=[("dental", "Dental"), ("real-estate", "Real Estate")],
                        default="",
                        max_length=50,
                        verbose_name="industry",
                    ),
                ),
                ("website_url", models.URLField(blank=True, default="", max_length=500, verbose_name="website URL")),
                ("address", models.CharField(blank=True, default="", max_length=255, verbose_name="address")),
                ("city", models.CharField(blank=True, default="", max_length=100, verbose_name="city")),
                ("state", models.CharField(blank=True, default="", max_length=100, verbose_name="state")),
                ("postal_code", models.CharField(blank=True, default="", max_length=20, verbose_name="postal code")),
                ("country", models.CharField(blank=True, default="", max_length=100, verbose_name="country")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("contact_name", models.CharField(blank=True, default="", max_length=255, verbose_name="contact name")),
                ("contact_email", models.EmailField(blank=True, default="", max_length=254, verbose_name="contact email")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
            ],
            options={
                "verbose_name": "company",
                "verbose_name_plural": "companies",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("full_name", models.CharField(max_length=255, verbose_name="full name")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="email")),
                ("phone", models.CharField(blank=True, default="", max_length=30, verbose_name="phone")),
                ("title", models.CharField(blank=True, default="", max_length=150, verbose_name="title")),
                (
                    "role",
                    models.CharField(
                        choices=[("client", "Client"), ("manager", "Manager"), ("admin", "Admin")],
                        default="client",
                        max_length=20,
                        verbose_name="role",
                    ),
                ),
                ("is_primary", models.BooleanField(default=False, verbose_name="primary contact")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contacts",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="contacts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="portal user",
                    ),
                ),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "ordering": ["-is_primary", "full_name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_primary", True)),
                        fields=("company",),
                        name="uniq_primary_contact_per_company",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CompanyUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="company_users",
                        to="companies.company",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="company_users",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "company member",
                "verbose_name_plural": "company members",
                "ordering": ["created_at"],
                "unique_together": {("company", "user")},
            },
        ),
    ]
