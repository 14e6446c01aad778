"""Models for the service catalog."""
from django.db import models

from core.models import TimeStampedModel


class ServiceCategory(TimeStampedModel):
    """Top-level service grouping (brand, marketing, information, product, service)."""

    name = models.CharField("name", max_length=100)
    slug = models.SlugField("slug", max_length=100, unique=True)
    sort_order = models.PositiveIntegerField("sort order", default=0)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name = "service category"
        verbose_name_plural = "service categories"

    def __str__(self):
        return self.name


class Service(TimeStampedModel):
    """A service the agency sells. Prices are integer cents."""

    class ServiceType(models.TextChoices):
        ONE_TIME = "one_time", "One-time"
        RECURRING = "recurring", "Recurring"
        ADD_ON = "add_on", "Add-on"

    class BillingFrequency(models.TextChoices):
        ONE_TIME = "one_time", "One-time"
        MONTHLY = "monthly", "Monthly"
        YEARLY = "yearly", "Yearly"

    category = models.ForeignKey(
        ServiceCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="services",
        verbose_name="category",
    )
    name = models.CharField("name", max_length=255)
    slug = models.SlugField("slug", max_length=255, unique=True)
    description = models.TextField("description", blank=True, default="")
    service_type = models.CharField(
        "service type",
        max_length=20,
        choices=ServiceType.choices,
        default=ServiceType.ONE_TIME,
    )
    billing_frequency = models.CharField(
        "billing frequency",
        max_length=20,
        choices=BillingFrequency.choices,
        default=BillingFrequency.ONE_TIME,
    )
    base_price_cents = models.PositiveIntegerField("base price (cents)", default=0)

    # ------------------------------------------------------------------
    # Copy used by proposal generation and agreements
    # ------------------------------------------------------------------
    proposal_copy = models.TextField("proposal copy", blank=True, default="")
    contract_copy = models.TextField("contract copy", blank=True, default="")
    included_scope = models.TextField("included scope", blank=True, default="")
    not_included = models.TextField("not included", blank=True, default="")
    projected_timeline = models.CharField("projected timeline", max_length=255, blank=True, default="")

    stripe_product_id = models.CharField("Stripe product", max_length=100, blank=True, default="", db_index=True)
    stripe_price_id = models.CharField("Stripe price", max_length=100, blank=True, default="")
    is_active = models.BooleanField("active", default=True, db_index=True)

    class Meta:
        ordering = ["category__sort_order", "name"]
        verbose_name = "service"
        verbose_name_plural = "services"

    def __str__(self):
        return self.name

    @property
    def is_monthly(self):
        return self.billing_frequency == self.BillingFrequency.MONTHLY

    @property
    def badge_path(self):
        from catalog.badges import badge_path

        return badge_path(self.slug, self.category.slug if self.category_id else None)


class CompanyService(TimeStampedModel):
    """A service a company is subscribed to or has purchased."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        PAUSED = "paused", "Paused"
        CANCELLED = "cancelled", "Cancelled"
        COMPLETED = "completed", "Completed"

    company = models.ForeignKey(
        "companies.Company",
        on_delete=models.CASCADE,
        related_name="company_services",
        verbose_name="company",
    )
    service = models.ForeignKey(
        Service,
        on_delete=models.PROTECT,
        related_name="company_services",
        verbose_name="service",
    )
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    started_at = models.DateField("started on", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "company service"
        verbose_name_plural = "company services"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "service"],
                name="uniq_service_per_company",
            ),
        ]

    def __str__(self):
        return f"{self.company} - {self.service}"
