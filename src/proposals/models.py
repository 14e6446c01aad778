from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


class Proposal(TimeStampedModel):
    """Priced proposal shared with a company through a public token link."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SENT = "sent", "Sent"
        VIEWED = "viewed", "Viewed"
        ACCEPTED = "accepted", "Accepted"
        DECLINED = "declined", "Declined"
        EXPIRED = "expired", "Expired"

    class GenerationStatus(models.TextChoices):
        NONE = "none", "None"
        COMPLETED = "completed", "Completed"
        FAILED = "failed", "Failed"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="proposals",
        verbose_name="company",
    )
    title = models.CharField("title", max_length=255)
    token = models.CharField("token", max_length=64, unique=True, editable=False)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    valid_until = models.DateField("valid until", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")
    total_amount_cents = models.PositiveIntegerField("total (cents)", default=0)

    sections = models.JSONField("sections", default=list, blank=True)
    meeting_notes_url = models.URLField("meeting notes URL", max_length=500, blank=True, default="")
    meeting_notes_content = models.TextField("meeting notes", blank=True, default="")
    generation_status = models.CharField(
        "generation status",
        max_length=20,
        choices=GenerationStatus.choices,
        default=GenerationStatus.NONE,
    )
    generated_at = models.DateTimeField("generated at", null=True, blank=True)

    sent_at = models.DateTimeField("sent at", null=True, blank=True)
    first_viewed_at = models.DateTimeField("first viewed at", null=True, blank=True)
    view_count = models.PositiveIntegerField("views", default=0)

    accepted_at = models.DateTimeField("accepted at", null=True, blank=True)
    accepted_by_email = models.EmailField("accepted by", blank=True, default="")
    accepted_by_ip = models.CharField("accepted from IP", max_length=64, blank=True, default="")
    accepted_by_user_agent = models.TextField("accepted with user agent", blank=True, default="")
    declined_at = models.DateTimeField("declined at", null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="proposals_created",
        verbose_name="created by",
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "proposal"
        verbose_name_plural = "proposals"
        indexes = [
            models.Index(fields=["company", "status"], name="proposal_company_status_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_final(self):
        return self.status in (self.Status.ACCEPTED, self.Status.DECLINED, self.Status.EXPIRED)

    @property
    def sorted_sections(self):
        return sorted(self.sections or [], key=lambda s: s.get("sort_order") or 0)


class ProposalItem(models.Model):
    proposal = models.ForeignKey(
        Proposal,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="proposal",
    )
    service = models.ForeignKey(
        "catalog.Service",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="proposal_items",
        verbose_name="service",
    )
    name = models.CharField("name", max_length=255)
    description = models.TextField("description", blank=True, default="")
    quantity = models.PositiveIntegerField("quantity", default=1)
    unit_price_cents = models.PositiveIntegerField("unit price (cents)", default=0)
    sort_order = models.PositiveIntegerField("sort order", default=0)

    class Meta:
        ordering = ["sort_order"]
        verbose_name = "proposal item"
        verbose_name_plural = "proposal items"

    def __str__(self):
        return f"{self.name} x{self.quantity}"

    @property
    def line_total_cents(self):
        return self.unit_price_cents * (self.quantity or 1)

    @property
    def is_monthly(self):
        return bool(self.service_id) and self.service.is_monthly
