from django.core.validators import MinValueValidator
from django.db import models

from core.models import TimeStampedModel


class Invoice(TimeStampedModel):
    """Invoice issued to a company. Amounts are stored in cents."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        OPEN = "open", "Open"
        PAID = "paid", "Paid"
        VOID = "void", "Void"
        UNCOLLECTIBLE = "uncollectible", "Uncollectible"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="invoices",
        verbose_name="company",
    )
    description = models.CharField("description", max_length=500, blank=True, default="")
    amount_cents = models.PositiveIntegerField("amount (cents)", validators=[MinValueValidator(1)])
    currency = models.CharField("currency", max_length=3, default="usd")
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
    )
    invoice_date = models.DateField("invoice date", null=True, blank=True)
    due_date = models.DateField("due date", null=True, blank=True)
    paid_at = models.DateTimeField("paid at", null=True, blank=True)
    invoice_url = models.URLField("invoice URL", blank=True, default="")
    stripe_invoice_id = models.CharField("Stripe invoice", max_length=100, blank=True, default="")

    class Meta:
        ordering = ["-invoice_date", "-created_at"]
        verbose_name = "invoice"
        verbose_name_plural = "invoices"
        indexes = [
            models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
        ]

    def __str__(self):
        return f"{self.company} - {self.description or self.pk}"

    @property
    def is_open(self):
        return self.status == self.Status.OPEN
