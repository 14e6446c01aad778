"""AI service recommendations from discovery call notes."""
from __future__ import annotations

import logging

from django.conf import settings

from core.text import format_cents
from integrations.ai import complete_json
from integrations.exceptions import AIError

logger = logging.getLogger("portal")


def _system_prompt() -> str:
    return f"""You are a service consultant for {settings.AGENCY_NAME}, a design and marketing agency. Your job is to analyze discovery call meeting notes and recommend which services from the catalog would address the client's needs.

## How to Recommend
- Match services to specific pain points, goals, or requests mentioned in the meeting notes.
- Recommend foundational services (branding, website) before add-ons (SEO, social media management).
- Be selective: only recommend services that are clearly relevant.
- Typical proposals have 3-8 services. Rarely more than 10.

## Output
Return ONLY a JSON array. Each element has "service_id" (string) and "reason" (one sentence explaining why this service fits)."""


def _catalog_block(services) -> str:
    lines = []
    for s in services:
        price = format_cents(s.base_price_cents) if s.base_price_cents else "Custom pricing"
        if s.billing_frequency == "monthly":
            freq = "/mo"
        elif s.billing_frequency == "one_time":
            freq = " one-time"
        else:
            freq = ""
        category = s.category.name if s.category_id else "General"
        lines.append(
            f"- **{s.name}** (ID: {s.pk}) [{category}] {price}{freq}\n"
            f"  {s.proposal_copy or s.description or 'No description'}"
        )
    return "\n".join(lines)


def recommend_services(meeting_notes: str, services) -> list[dict]:
    """Return ``[{service_id, reason}]`` restricted to ids present in ``services``."""
    services = list(services)
    prompt = (
        "Analyze the following discovery call meeting notes and recommend services from the catalog below.\n\n"
        f"## Meeting Notes\n{meeting_notes}\n\n"
        f"## Service Catalog\n{_catalog_block(services)}\n\n"
        "Return a JSON array of recommended services. Example:\n"
        '[{"service_id": "abc-123", "reason": "Client needs a new website to replace their outdated one."}]'
    )
    parsed = complete_json(
        system=_system_prompt(),
        prompt=prompt,
        max_tokens=2000,
        purpose="service recommendation",
    )
    if not isinstance(parsed, list):
        raise AIError("Failed to parse service recommendation response as JSON")

    valid_ids = {str(s.pk) for s in services}
    recommendations = [
        {"service_id": str(r.get("service_id")), "reason": r.get("reason") or ""}
        for r in parsed
        if isinstance(r, dict) and str(r.get("service_id")) in valid_ids
    ]
    logger.info("AI recommended %d of %d catalog services", len(recommendations), len(services))
    return recommendations
