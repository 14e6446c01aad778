"""Report types, their scored categories and the industry mapping."""
from __future__ import annotations

from dataclasses import dataclass, field

from reports.models import Report


@dataclass(frozen=True)
class CategoryTemplate:
    category: str
    max_score: float
    default_metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ReportTypeConfig:
    type: str
    label: str
    categories: tuple[CategoryTemplate, ...]

    @property
    def max_score(self) -> float:
        return sum(c.max_score for c in self.categories)

    def category_max(self, category: str) -> float | None:
        for c in self.categories:
            if c.category == category:
                return c.max_score
        return None


REPORT_TYPE_LABELS = dict(Report.ReportType.choices)

ONLINE_REVIEWS_PLATFORMS = {
    "dental": ("Google", "Healthgrades", "WebMD", "Vitals", "Yelp", "Facebook", "Apple Maps"),
    "real-estate": ("Google", "Zillow", "Realtor.com", "TripAdvisor", "Airbnb", "Vrbo", "Facebook", "Booking.com"),
    None: ("Google", "Yelp", "Facebook", "Apple Maps"),
}

LISTING_METADATA = {"name_on_listing": "", "phone_listed": "", "address_listed": ""}
METRIC_METADATA = {"metric": "", "industry_standard": ""}
COMPETITOR_METADATA = {
    "competitor_name": "",
    "distance": "",
    "services_offered": "",
    "website_score": None,
    "website_score_explanation": "",
    "listings_reviews_score": None,
    "listings_review_score_explanation": "",
}


def _scored(*categories, max_score=5, metadata=None):
    return tuple(CategoryTemplate(c, max_score, dict(metadata or {})) for c in categories)


def online_reviews_config(industry: str | None) -> ReportTypeConfig:
    platforms = ONLINE_REVIEWS_PLATFORMS.get(industry, ONLINE_REVIEWS_PLATFORMS[None])
    return ReportTypeConfig(
        Report.ReportType.ONLINE_REVIEWS,
        REPORT_TYPE_LABELS[Report.ReportType.ONLINE_REVIEWS],
        _scored(*platforms, max_score=1, metadata=LISTING_METADATA),
    )


WEBSITE_CONFIG = ReportTypeConfig(
    Report.ReportType.WEBSITE,
    REPORT_TYPE_LABELS[Report.ReportType.WEBSITE],
    _scored(
        "Overall Design",
        "Mobile Responsiveness",
        "Navigation",
        "Content Clarity",
        "Booking/Inquiries",
        "Photos & Media",
        "SEO Optimization",
        "Speed & Performance",
        "Branding Consistency",
        "Trust Signals",
    ),
)

BRAND_LOGO_CONFIG = ReportTypeConfig(
    Report.ReportType.BRAND_LOGO,
    REPORT_TYPE_LABELS[Report.ReportType.BRAND_LOGO],
    _scored(
        "Logo Usage",
        "Logo Consistency",
        "Logo Legibility",
        "Color Palette",
        "Typography",
        "Photography & Imagery",
        "Brand Voice & Messaging",
        "Social Media Branding",
        "Signage & Onsite Branding",
        "Overall Brand Cohesion",
    ),
)

COMPETITORS_CONFIG = ReportTypeConfig(
    Report.ReportType.COMPETITORS,
    REPORT_TYPE_LABELS[Report.ReportType.COMPETITORS],
    _scored("Competitor 1", "Competitor 2", "Competitor 3", max_score=1, metadata=COMPETITOR_METADATA),
)

PATIENT_CONFIG = ReportTypeConfig(
    Report.ReportType.PATIENT,
    REPORT_TYPE_LABELS[Report.ReportType.PATIENT],
    _scored(
        "New Patients per Month",
        "Patient Retention Rate",
        "Recall Compliance",
        "Treatment Acceptance Rate",
        "No-Show Rate",
        "Cancellation Rate",
        "Average Production per Visit",
        "Active Patient Count",
        "Lost Patients",
        "Referral Rate",
        metadata=METRIC_METADATA,
    ),
)

PATIENT_COMMS_CONFIG = ReportTypeConfig(
    Report.ReportType.PATIENT_COMMS,
    REPORT_TYPE_LABELS[Report.ReportType.PATIENT_COMMS],
    _scored(
        "Email Campaigns",
        "Appointment Reminders",
        "Recall Notifications",
        "Review Requests",
        "Post-Treatment Follow-up",
        "Birthday/Holiday Messages",
        "Insurance/Billing Reminders",
        "New Patient Welcome",
    ),
)

GUEST_CONFIG = ReportTypeConfig(
    Report.ReportType.GUEST,
    REPORT_TYPE_LABELS[Report.ReportType.GUEST],
    _scored(
        "Listing Quality",
        "Response Time",
        "Guest Satisfaction",
        "Occupancy Rate",
        "Revenue per Unit",
        "Repeat Guest Rate",
        "Maintenance Response",
        "Amenity Quality",
        metadata=METRIC_METADATA,
    ),
)

GUEST_COMMS_CONFIG = ReportTypeConfig(
    Report.ReportType.GUEST_COMMS,
    REPORT_TYPE_LABELS[Report.ReportType.GUEST_COMMS],
    _scored(
        "Marketing Automation",
        "Booking Confirmations",
        "Pre-Arrival Sequences",
        "Post-Stay Follow-up",
        "Review Requests",
        "Seasonal Promotions",
        "Loyalty/Return Offers",
        "Emergency Communications",
    ),
)

STATIC_CONFIGS = {
    c.type: c
    for c in (
        WEBSITE_CONFIG,
        BRAND_LOGO_CONFIG,
        COMPETITORS_CONFIG,
        PATIENT_CONFIG,
        PATIENT_COMMS_CONFIG,
        GUEST_CONFIG,
        GUEST_COMMS_CONFIG,
    )
}


def get_report_configs(industry: str | None) -> list[ReportTypeConfig]:
    """Report types produced for a company, in display order."""
    configs = [online_reviews_config(industry), WEBSITE_CONFIG, BRAND_LOGO_CONFIG, COMPETITORS_CONFIG]
    if industry == "dental":
        configs += [PATIENT_CONFIG, PATIENT_COMMS_CONFIG]
    elif industry == "real-estate":
        configs += [GUEST_CONFIG, GUEST_COMMS_CONFIG]
    return configs


def get_report_config(report_type: str, industry: str | None = None) -> ReportTypeConfig | None:
    if report_type == Report.ReportType.ONLINE_REVIEWS:
        return online_reviews_config(industry)
    return STATIC_CONFIGS.get(report_type)
