import uuid

import django.db.models.deletion
from django.db import migrations, models


TIERS = [("pass", "Pass"), ("fair", "Fair"), ("fail", "Fail")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReportSet",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("in_progress", "In progress"),
                            ("needs_review", "Needs review"),
                            ("completed", "Completed"),
                        ],
                        default="in_progress",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("overall_score", models.FloatField(blank=True, null=True, verbose_name="overall score")),
                ("overall_max_score", models.FloatField(blank=True, null=True, verbose_name="overall max score")),
                (
                    "overall_tier",
                    models.CharField(blank=True, choices=TIERS, default="", max_length=10, verbose_name="overall tier"),
                ),
                (
                    "company",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="report_set",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
            ],
            options={
                "verbose_name": "report set",
                "verbose_name_plural": "report sets",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Report",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "report_type",
                    models.CharField(
                        choices=[
                            ("online_reviews", "Online Listings & Reviews"),
                            ("website", "Website Report"),
                            ("brand_logo", "Brand/Logo Report"),
                            ("competitors", "Competitor Analysis"),
                            ("patient", "Patient Retention"),
                            ("patient_comms", "Patient Communications"),
                            ("guest", "Guest Experience"),
                            ("guest_comms", "Guest Communications"),
                        ],
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("in_progress", "In progress"), ("completed", "Completed")],
                        default="draft",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("score", models.FloatField(blank=True, null=True, verbose_name="score")),
                ("max_score", models.FloatField(blank=True, null=True, verbose_name="max score")),
                ("tier", models.CharField(blank=True, choices=TIERS, default="", max_length=10, verbose_name="tier")),
                ("opportunities_text", models.TextField(blank=True, default="", verbose_name="opportunities")),
                (
                    "report_set",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reports",
                        to="reports.reportset",
                        verbose_name="report set",
                    ),
                ),
            ],
            options={
                "verbose_name": "report",
                "verbose_name_plural": "reports",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("report_set", "report_type"), name="uniq_report_type_per_set"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReportItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("category", models.CharField(max_length=150, verbose_name="category")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pass", "Pass"),
                            ("warning", "Warning"),
                            ("error", "Error"),
                            ("neutral", "Neutral"),
                        ],
                        default="neutral",
                        max_length=10,
                        verbose_name="status",
                    ),
                ),
                ("score", models.FloatField(blank=True, null=True, verbose_name="score")),
                ("rating", models.FloatField(blank=True, null=True, verbose_name="rating")),
                ("total_reviews", models.PositiveIntegerField(blank=True, null=True, verbose_name="total reviews")),
                ("feedback_summary", models.TextField(blank=True, default="", verbose_name="feedback")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="sort order")),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="reports.report",
                        verbose_name="report",
                    ),
                ),
            ],
            options={
                "verbose_name": "report item",
                "verbose_name_plural": "report items",
                "ordering": ["sort_order"],
            },
        ),
    ]
