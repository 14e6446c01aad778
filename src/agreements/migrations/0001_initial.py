import uuid

import django.db.models.deletion
from django.db import migrations, models


AGREEMENT_TYPES = [
    ("marketing_agreement", "Marketing agreement"),
    ("baa", "Business associate agreement"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("companies", "0001_initial"),
        ("proposals", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AgreementTemplate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("type", models.CharField(choices=AGREEMENT_TYPES, max_length=30, verbose_name="type")),
                ("title", models.CharField(max_length=255, verbose_name="title")),
                ("content", models.TextField(verbose_name="content")),
                ("version", models.PositiveIntegerField(default=1, verbose_name="version")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
            ],
            options={
                "verbose_name": "agreement template",
                "verbose_name_plural": "agreement templates",
                "ordering": ["type", "-version"],
                "constraints": [
                    models.UniqueConstraint(fields=("type", "version"), name="uniq_agreement_template_version"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Agreement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("type", models.CharField(choices=AGREEMENT_TYPES, max_length=30, verbose_name="type")),
                ("title", models.CharField(max_length=255, verbose_name="title")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("sent", "Sent"),
                            ("viewed", "Viewed"),
                            ("signed", "Signed"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                ("token", models.CharField(editable=False, max_length=64, unique=True, verbose_name="token")),
                ("content_snapshot", models.TextField(blank=True, default="", verbose_name="content")),
                ("valid_until", models.DateField(blank=True, null=True, verbose_name="valid until")),
                ("sent_at", models.DateTimeField(blank=True, null=True, verbose_name="sent at")),
                ("first_viewed_at", models.DateTimeField(blank=True, null=True, verbose_name="first viewed at")),
                ("view_count", models.PositiveIntegerField(default=0, verbose_name="views")),
                ("signed_at", models.DateTimeField(blank=True, null=True, verbose_name="signed at")),
                ("signed_by_name", models.CharField(blank=True, default="", max_length=255, verbose_name="signed by")),
                ("signed_by_email", models.EmailField(blank=True, default="", max_length=254, verbose_name="signer email")),
                ("signed_by_ip", models.CharField(blank=True, default="", max_length=64, verbose_name="signed from IP")),
                (
                    "signed_by_user_agent",
                    models.TextField(blank=True, default="", verbose_name="signed with user agent"),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="agreements",
                        to="companies.company",
                        verbose_name="company",
                    ),
                ),
                (
                    "proposal",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="agreements",
                        to="proposals.proposal",
                        verbose_name="proposal",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="agreements",
                        to="agreements.agreementtemplate",
                        verbose_name="template",
                    ),
                ),
            ],
            options={
                "verbose_name": "agreement",
                "verbose_name_plural": "agreements",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["company", "status"], name="agreement_company_status_idx"),
                ],
            },
        ),
    ]
