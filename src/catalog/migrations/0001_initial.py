import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceCategory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("slug", models.SlugField(max_length=100, unique=True, verbose_name="slug")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="sort order")),
            ],
            options={
                "verbose_name": "service category",
                "verbose_name_plural": "service categories",
                "ordering": ["sort_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("slug", models.SlugField(max_length=255, unique=True, verbose_name="slug")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                (
                    "service_type",
                    models.CharField(
                        choices=[("one_time", "One-time"), ("recurring", "Recurring"), ("add_on", "Add-on")],
                        default="one_time",
                        max_length=20,
                        verbose_name="service type",
                    ),
                ),
                (
                    "billing_frequency",
                    models.CharField(
                        choices=[("one_time", "One-time"), ("monthly", "Monthly"), ("yearly", "Yearly")],
                        default="one_time",
                        max_length=20,
                        verbose_name="billing frequency",
                    ),
                ),
                ("base_price_cents", models.PositiveIntegerField(default=0, verbose_name="base price (cents)")),
                ("proposal_copy", models.TextField(blank=True, default="", verbose_name="proposal copy")),
                ("contract_copy", models.TextField(blank=True, default="", verbose_name="contract copy")),
                ("included_scope", models.TextField(blank=True, default="", verbose_name="included scope")),
                ("not_included", models.TextField(blank=True, default="", verbose_name="not included")),
                (
                    "projected_timeline",
                    models.CharField(blank=True, default="", max_length=255, verbose_name="projected timeline"),
                ),
                (
                    "stripe_product_id",
                    models.CharField(blank=True, db_index=True, default="", max_length=100, verbose_name="Stripe product"),
                ),
                ("stripe_price_id", models.CharField(blank=True, default="", max_length=100, verbose_name="Stripe price")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="active")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="services",
                        to="catalog.servicecategory",
                        verbose_name="category",
                    ),
                ),
            ],
            options={
                "verbose_name": "service",
                "verbose_name_plural": "services",
                "ordering": ["category__sort_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="CompanyService",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("paused", "Paused"),
                            ("cancelled", "Cancelled"),
                            ("completed", "Completed"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("started_at", models.DateField(blank=True, null=True, verbose_name="started on")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="company_services",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="company_services",
                        to="catalog.service",
                        verbose_name="service",
                    ),
                ),
            ],
            options={
                "verbose_name": "company service",
                "verbose_name_plural": "company services",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "service"), name="uniq_service_per_company"),
                ],
            },
        ),
    ]
