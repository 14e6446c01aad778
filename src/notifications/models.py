from django.db import models


class EmailLog(models.Model):
    """One outgoing email and its latest delivery status reported by Resend."""

    class Status(models.TextChoices):
        SENT = "sent", "Sent"
        DELIVERED = "delivered", "Delivered"
        BOUNCED = "bounced", "Bounced"
        FAILED = "failed", "Failed"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="email_logs",
        verbose_name="company",
    )
    to_email = models.EmailField("to")
    subject = models.CharField("subject", max_length=255)
    template = models.CharField("template", max_length=50, db_index=True)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.SENT,
    )
    resend_id = models.CharField("Resend id", max_length=100, blank=True, default="", db_index=True)
    metadata = models.JSONField("metadata", default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "email log"
        verbose_name_plural = "email logs"

    def __str__(self):
        return f"{self.template} -> {self.to_email} ({self.status})"
