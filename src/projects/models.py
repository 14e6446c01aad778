from django.db import models

from core.models import TimeStampedModel


class Project(TimeStampedModel):
    """A unit of delivery work for a company, optionally mirrored as a ClickUp task."""

    class Status(models.TextChoices):
        NOT_STARTED = "not_started", "Not started"
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"
        ON_HOLD = "on_hold", "On hold"
        CANCELLED = "cancelled", "Cancelled"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="projects",
        verbose_name="company",
    )
    name = models.CharField("name", max_length=255)
    slug = models.SlugField("slug", max_length=255, unique=True)
    description = models.TextField("description", blank=True, default="")
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.NOT_STARTED,
        db_index=True,
    )
    start_date = models.DateField("start date", null=True, blank=True)
    end_date = models.DateField("end date", null=True, blank=True)
    clickup_task_id = models.CharField("ClickUp task", max_length=50, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "project"
        verbose_name_plural = "projects"

    def __str__(self):
        return self.name
