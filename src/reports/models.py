"""Models for the marketing reports app."""
from django.db import models

from core.models import TimeStampedModel


class Tier(models.TextChoices):
    PASS = "pass", "Pass"
    FAIR = "fair", "Fair"
    FAIL = "fail", "Fail"


class ReportSet(TimeStampedModel):
    """The marketing analysis of one company, made of one report per type."""

    class Status(models.TextChoices):
        IN_PROGRESS = "in_progress", "In progress"
        NEEDS_REVIEW = "needs_review", "Needs review"
        COMPLETED = "completed", "Completed"

    company = models.OneToOneField(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="report_set",
        verbose_name="company",
    )
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
    )
    overall_score = models.FloatField("overall score", null=True, blank=True)
    overall_max_score = models.FloatField("overall max score", null=True, blank=True)
    overall_tier = models.CharField("overall tier", max_length=10, choices=Tier.choices, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "report set"
        verbose_name_plural = "report sets"

    def __str__(self):
        return f"Reports for {self.company}"


class Report(TimeStampedModel):

    class ReportType(models.TextChoices):
        ONLINE_REVIEWS = "online_reviews", "Online Listings & Reviews"
        WEBSITE = "website", "Website Report"
        BRAND_LOGO = "brand_logo", "Brand/Logo Report"
        COMPETITORS = "competitors", "Competitor Analysis"
        PATIENT = "patient", "Patient Retention"
        PATIENT_COMMS = "patient_comms", "Patient Communications"
        GUEST = "guest", "Guest Experience"
        GUEST_COMMS = "guest_comms", "Guest Communications"

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"

    report_set = models.ForeignKey(
        ReportSet,
        on_delete=models.CASCADE,
        related_name="reports",
        verbose_name="report set",
    )
    report_type = models.CharField("type", max_length=30, choices=ReportType.choices)
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    score = models.FloatField("score", null=True, blank=True)
    max_score = models.FloatField("max score", null=True, blank=True)
    tier = models.CharField("tier", max_length=10, choices=Tier.choices, blank=True, default="")
    opportunities_text = models.TextField("opportunities", blank=True, default="")

    class Meta:
        ordering = ["created_at"]
        verbose_name = "report"
        verbose_name_plural = "reports"
        constraints = [
            models.UniqueConstraint(fields=["report_set", "report_type"], name="uniq_report_type_per_set"),
        ]

    def __str__(self):
        return f"{self.get_report_type_display()} ({self.report_set.company})"


class ReportItem(TimeStampedModel):
    """One scored category of a report."""

    class Status(models.TextChoices):
        PASS = "pass", "Pass"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        NEUTRAL = "neutral", "Neutral"

    report = models.ForeignKey(
        Report,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="report",
    )
    category = models.CharField("category", max_length=150)
    status = models.CharField(
        "status",
        max_length=10,
        choices=Status.choices,
        default=Status.NEUTRAL,
    )
    score = models.FloatField("score", null=True, blank=True)
    rating = models.FloatField("rating", null=True, blank=True)
    total_reviews = models.PositiveIntegerField("total reviews", null=True, blank=True)
    feedback_summary = models.TextField("feedback", blank=True, default="")
    notes = models.TextField("notes", blank=True, default="")
    metadata = models.JSONField("metadata", default=dict, blank=True)
    sort_order = models.PositiveIntegerField("sort order", default=0)

    class Meta:
        ordering = ["sort_order"]
        verbose_name = "report item"
        verbose_name_plural = "report items"

    def __str__(self):
        return self.category

    @property
    def max_score(self):
        return (self.metadata or {}).get("maxScore")
