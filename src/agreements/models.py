from django.db import models

from core.models import TimeStampedModel


class AgreementType(models.TextChoices):
    MARKETING_AGREEMENT = "marketing_agreement", "Marketing agreement"
    BAA = "baa", "Business associate agreement"


class AgreementTemplate(TimeStampedModel):
    """Versioned agreement body with ``{{merge_tags}}``."""

    type = models.CharField("type", max_length=30, choices=AgreementType.choices)
    title = models.CharField("title", max_length=255)
    content = models.TextField("content")
    version = models.PositiveIntegerField("version", default=1)
    is_active = models.BooleanField("active", default=True)

    class Meta:
        ordering = ["type", "-version"]
        verbose_name = "agreement template"
        verbose_name_plural = "agreement templates"
        constraints = [
            models.UniqueConstraint(fields=["type", "version"], name="uniq_agreement_template_version"),
        ]

    def __str__(self):
        return f"{self.title} v{self.version}"


class Agreement(TimeStampedModel):
    """A merged agreement sent to a company for e-signature."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SENT = "sent", "Sent"
        VIEWED = "viewed", "Viewed"
        SIGNED = "signed", "Signed"
        EXPIRED = "expired", "Expired"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="agreements",
        verbose_name="company",
    )
    proposal = models.ForeignKey(
        "proposals.Proposal",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="agreements",
        verbose_name="proposal",
    )
    template = models.ForeignKey(
        AgreementTemplate,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="agreements",
        verbose_name="template",
    )
    type = models.CharField("type", max_length=30, choices=AgreementType.choices)
    title = models.CharField("title", max_length=255)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    token = models.CharField("token", max_length=64, unique=True, editable=False)
    content_snapshot = models.TextField("content", blank=True, default="")
    valid_until = models.DateField("valid until", null=True, blank=True)

    sent_at = models.DateTimeField("sent at", null=True, blank=True)
    first_viewed_at = models.DateTimeField("first viewed at", null=True, blank=True)
    view_count = models.PositiveIntegerField("views", default=0)

    signed_at = models.DateTimeField("signed at", null=True, blank=True)
    signed_by_name = models.CharField("signed by", max_length=255, blank=True, default="")
    signed_by_email = models.EmailField("signer email", blank=True, default="")
    signed_by_ip = models.CharField("signed from IP", max_length=64, blank=True, default="")
    signed_by_user_agent = models.TextField("signed with user agent", blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "agreement"
        verbose_name_plural = "agreements"
        indexes = [
            models.Index(fields=["company", "status"], name="agreement_company_status_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_signed(self):
        return self.status == self.Status.SIGNED
