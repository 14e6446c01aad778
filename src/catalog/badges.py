"""Service badge SVG lookup.

Badges live under ``/badges/services/{category}/{badge}.svg``. Services
without a dedicated badge fall back to their category badge.
"""

SERVICE_BADGES = {
    # Brand design
    "brand-identity-package": "brand/brand-design",
    "logo-design": "brand/brand-logo",
    "brand-guidelines-document": "brand/brand-guidelines",
    "business-cards": "brand/brand-business-card",
    "email-signature": "brand/brand-email-signature",
    "brand-stationery": "brand/brand-stationary",
    "brand-listings": "brand/brand-listings",
    # Marketing design
    "social-media-management": "marketing/marketing-social-graphics",
    "email-campaign-design": "marketing/marketing-email",
    "landing-page-design": "marketing/marketing-landing-pages",
    "marketing-consulting": "marketing/marketing-consulting",
    "marketing-swag": "marketing/marketing-swag",
    "website-experience": "marketing/website-experience",
    "patient-experience": "marketing/patient-experience",
    # Information design
    "website-design-development": "information/info-digital-design",
    "website-design--development": "information/info-digital-design",
    "website-maintenance": "information/information-design",
    "infographics": "information/info-infographics",
    "print-design": "information/info-print-design",
    "layout-design": "information/info-layout-design",
    "intake-forms": "information/info-intake-form",
    "sales-materials": "information/info-sales-materials",
    "signage": "information/info-signage",
    "welcome-kit": "information/info-welcome-kit",
    # Product design
    "uiux-design": "product/product-design",
    "design-system": "product/product-design-systems",
    "app-design": "product/product-app-design",
    "content-design": "product/product-content-design",
    "enterprise-design": "product/product-enterprise-design",
    # Service design (back office)
    "process-mapping": "service/back-office-journey-mapping",
    "consulting": "service/back-office-consulting",
    "crm-data": "service/back-office-crm-data",
    "software-audit": "service/back-office-software-audit",
    "sop-creation": "service/back-office-sop-creation",
    "automation-ai": "service/back-office-automation-ai",
    "automated-workflow": "service/back-office-automated-workflow",
    "customer-support": "service/back-office-customer-support",
    "digital-file-organization": "service/back-office-digital-file-organization",
    "training-setup": "service/back-office-training-setup",
    "business-solutions": "service/back-office-business-solutions",
}

CATEGORY_BADGES = {
    "brand": "brand/brand-design",
    "marketing": "marketing/marketing-design",
    "information": "information/information-design",
    "product": "product/product-design",
    "service": "service/back-office-design",
}

DEFAULT_BADGE = "brand/brand-design"


def badge_path(service_slug: str, category_slug: str | None = None) -> str:
    badge = SERVICE_BADGES.get(service_slug)
    if badge is None and category_slug:
        badge = CATEGORY_BADGES.get(category_slug)
    return f"/badges/services/{badge or DEFAULT_BADGE}.svg"


def has_dedicated_badge(service_slug: str) -> bool:
    return service_slug in SERVICE_BADGES
