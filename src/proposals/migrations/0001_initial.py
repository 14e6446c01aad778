import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("companies", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Proposal",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("title", models.CharField(max_length=255, verbose_name="title")),
                ("token", models.CharField(editable=False, max_length=64, unique=True, verbose_name="token")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("sent", "Sent"),
                            ("viewed", "Viewed"),
                            ("accepted", "Accepted"),
                            ("declined", "Declined"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("valid_until", models.DateField(blank=True, null=True, verbose_name="valid until")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("total_amount_cents", models.PositiveIntegerField(default=0, verbose_name="total (cents)")),
                ("sections", models.JSONField(blank=True, default=list, verbose_name="sections")),
                (
                    "meeting_notes_url",
                    models.URLField(blank=True, default="", max_length=500, verbose_name="meeting notes URL"),
                ),
                ("meeting_notes_content", models.TextField(blank=True, default="", verbose_name="meeting notes")),
                (
                    "generation_status",
                    models.CharField(
                        choices=[("none", "None"), ("completed", "Completed"), ("failed", "Failed")],
                        default="none",
                        max_length=20,
                        verbose_name="generation status",
                    ),
                ),
                ("generated_at", models.DateTimeField(blank=True, null=True, verbose_name="generated at")),
                ("sent_at", models.DateTimeField(blank=True, null=True, verbose_name="sent at")),
                ("first_viewed_at", models.DateTimeField(blank=True, null=True, verbose_name="first viewed at")),
                ("view_count", models.PositiveIntegerField(default=0, verbose_name="views")),
                ("accepted_at", models.DateTimeField(blank=True, null=True, verbose_name="accepted at")),
                ("accepted_by_email", models.EmailField(blank=True, default="", max_length=254, verbose_name="accepted by")),
                ("accepted_by_ip", models.CharField(blank=True, default="", max_length=64, verbose_name="accepted from IP")),
                (
                    "accepted_by_user_agent",
                    models.TextField(blank=True, default="", verbose_name="accepted with user agent"),
                ),
                ("declined_at", models.DateTimeField(blank=True, null=True, verbose_name="declined at")),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="proposals",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="proposals_created",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="created by",
                    ),
                ),
            ],
            options={
                "verbose_name": "proposal",
                "verbose_name_plural": "proposals",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["company", "status"], name="proposal_company_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProposalItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("description", models.TextField(blank=True, default="", verbose_name="description")),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="quantity")),
                ("unit_price_cents", models.PositiveIntegerField(default=0, verbose_name="unit price (cents)")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="sort order")),
                (
                    "proposal",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="proposals.proposal",
                        verbose_name="proposal",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="proposal_items",
                        to="catalog.service",
                        verbose_name="service",
                    ),
                ),
            ],
            options={
                "verbose_name": "proposal item",
                "verbose_name_plural": "proposal items",
                "ordering": ["sort_order"],
            },
        ),
    ]
