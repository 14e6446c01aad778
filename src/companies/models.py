"""Models for the companies app."""
from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import TimeStampedModel

HEALTHCARE_KEYWORDS = (
    "dental",
    "dentist",
    "healthcare",
    "medical",
    "health",
    "clinic",
    "hospital",
    "physician",
    "orthodont",
)


class Company(TimeStampedModel):
    """A lead, prospect or client organisation served by the agency."""

    class Type(models.TextChoices):
        LEAD = "lead", "Lead"
        PROSPECT = "prospect", "Prospect"
        CLIENT = "client", "Client"

    class Status(models.TextChoices):
        NEEDS_QUALIFIED = "needs_qualified", "Needs qualified"
        NEEDS_PROPOSAL = "needs_proposal", "Needs proposal"
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        ARCHIVED = "archived", "Archived"

    class Industry(models.TextChoices):
        DENTAL = "dental", "Dental"
        REAL_ESTATE = "real-estate", "Real Estate"

    name = models.CharField("name", max_length=255)
    slug = models.SlugField("slug", max_length=255, unique=True)
    type = models.CharField(
        "type",
        max_length=20,
        choices=Type.choices,
        default=Type.CLIENT,
        db_index=True,
    )
    status = models.CharField(
        "status",
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    industry = models.CharField(
        "industry",
        max_length=50,
        choices=Industry.choices,
        blank=True,
        default="",
    )
    website_url = models.URLField("website URL", max_length=500, blank=True, default="")
    address = models.CharField("address", max_length=255, blank=True, default="")
    city = models.CharField("city", max_length=100, blank=True, default="")
    state = models.CharField("state", max_length=100, blank=True, default="")
    postal_code = models.CharField("postal code", max_length=20, blank=True, default="")
    country = models.CharField("country", max_length=100, blank=True, default="")
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    contact_name = models.CharField("contact name", max_length=255, blank=True, default="")
    contact_email = models.EmailField("contact email", blank=True, default="")
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "company"
        verbose_name_plural = "companies"
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def full_address(self):
        locality = " ".join(part for part in (self.state, self.postal_code) if part)
        parts = [self.address, self.city, locality]
        return ", ".join(part for part in parts if part)

    @property
    def industry_key(self):
        """Report configuration key for this company's industry, or None."""
        if self.industry in (self.Industry.DENTAL, self.Industry.REAL_ESTATE):
            return self.industry
        return None

    @property
    def is_healthcare(self):
        industry = (self.industry or "").lower()
        return any(keyword in industry for keyword in HEALTHCARE_KEYWORDS)

    @property
    def primary_contact(self):
        return self.contacts.filter(is_primary=True).first() or self.contacts.first()


class Contact(TimeStampedModel):
    """A person at a company. At most one contact per company is primary."""

    class Role(models.TextChoices):
        CLIENT = "client", "Client"
        MANAGER = "manager", "Manager"
        ADMIN = "admin", "Admin"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="contacts",
        verbose_name="company",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contacts",
        verbose_name="portal user",
    )
    full_name = models.CharField("full name", max_length=255)
    email = models.EmailField("email", blank=True, default="")
    phone = models.CharField("phone", max_length=30, blank=True, default="")
    title = models.CharField("title", max_length=150, blank=True, default="")
    role = models.CharField("role", max_length=20, choices=Role.choices, default=Role.CLIENT)
    is_primary = models.BooleanField("primary contact", default=False)
    notes = models.TextField("notes", blank=True, default="")

    class Meta:
        verbose_name = "contact"
        verbose_name_plural = "contacts"
        ordering = ["-is_primary", "full_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["company"],
                condition=Q(is_primary=True),
                name="uniq_primary_contact_per_company",
            ),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.company})"


class CompanyUser(models.Model):
    """Grants a portal user access to a company."""

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="company_users",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="company_users",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("company", "user")]
        ordering = ["created_at"]
        verbose_name = "company member"
        verbose_name_plural = "company members"

    def __str__(self):
        return f"{self.user} - {self.company}"
