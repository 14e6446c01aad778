import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("description", models.CharField(blank=True, default="", max_length=500, verbose_name="description")),
                (
                    "amount_cents",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)],
                        verbose_name="amount (cents)",
                    ),
                ),
                ("currency", models.CharField(default="usd", max_length=3, verbose_name="currency")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("open", "Open"),
                            ("paid", "Paid"),
                            ("void", "Void"),
                            ("uncollectible", "Uncollectible"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("invoice_date", models.DateField(blank=True, null=True, verbose_name="invoice date")),
                ("due_date", models.DateField(blank=True, null=True, verbose_name="due date")),
                ("paid_at", models.DateTimeField(blank=True, null=True, verbose_name="paid at")),
                ("invoice_url", models.URLField(blank=True, default="", verbose_name="invoice URL")),
                ("stripe_invoice_id", models.CharField(blank=True, default="", max_length=100, verbose_name="Stripe invoice")),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invoices",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
            ],
            options={
                "verbose_name": "invoice",
                "verbose_name_plural": "invoices",
                "ordering": ["-invoice_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
                ],
            },
        ),
    ]
