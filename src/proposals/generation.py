"""AI drafting of proposal sections from discovery call notes."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.conf import settings

from core.text import format_cents
from integrations.ai import complete_json
from integrations.exceptions import AIError

logger = logging.getLogger("portal")

SECTION_TYPES = ("overview_and_goals", "scope_of_project", "project_timeline", "why_agency")

SECTION_SORT_ORDER = {
    "overview_and_goals": 1,
    "scope_of_project": 2,
    "project_timeline": 3,
    "why_agency": 4,
}

FEE_SUMMARY_SECTION = {"type": "fee_summary", "title": "Fee Summary", "content": None, "sort_order": 5}


def section_titles() -> dict[str, str]:
    return {
        "overview_and_goals": "Overview and Goals",
        "scope_of_project": "Scope of Project",
        "project_timeline": "Project Timeline",
        "why_agency": f"Why {settings.AGENCY_NAME}?",
    }


@dataclass
class ServiceDetail:
    id: str
    name: str
    description: str = ""
    proposal_copy: str = ""
    contract_copy: str = ""
    included_scope: str = ""
    not_included: str = ""
    projected_timeline: str = ""
    base_price_cents: int = 0
    billing_frequency: str = ""
    category_name: str = ""
    category_slug: str = ""

    @classmethod
    def from_service(cls, service) -> "ServiceDetail":
        category = service.category
        return cls(
            id=str(service.pk),
            name=service.name,
            description=service.description,
            proposal_copy=service.proposal_copy,
            contract_copy=service.contract_copy,
            included_scope=service.included_scope,
            not_included=service.not_included,
            projected_timeline=service.projected_timeline,
            base_price_cents=service.base_price_cents or 0,
            billing_frequency=service.billing_frequency,
            category_name=category.name if category else "",
            category_slug=category.slug if category else "",
        )


@dataclass
class GenerationInput:
    company_name: str
    company_industry: str
    contact_name: str
    meeting_notes: str
    services: list[ServiceDetail] = field(default_factory=list)

    @classmethod
    def for_company(cls, company, meeting_notes: str, services) -> "GenerationInput":
        contact = company.primary_contact
        return cls(
            company_name=company.name,
            company_industry=company.industry,
            contact_name=contact.full_name if contact else "the team",
            meeting_notes=meeting_notes or "",
            services=[ServiceDetail.from_service(s) for s in services],
        )


def system_prompt() -> str:
    agency = settings.AGENCY_NAME
    return f"""You are a proposal writer for {agency}, a design and marketing agency. You write proposals that combine two proven sales frameworks:

## Sandler Selling Methodology
- Reference specific pains uncovered in the discovery call. Do not generalize.
- Quantify revenue impact where possible.
- Frame solutions as resolving their stated pains, not as features.
- Use their own words back to them when describing problems.
- The proposal should feel like a plan, not a pitch.

## StoryBrand Framework
- The CLIENT is the hero of this story, not {agency}.
- {agency} is the GUIDE who has a plan to help them succeed.
- Clearly identify the PROBLEM (external, internal, philosophical).
- Present the PLAN as clear steps they can follow.
- Describe what accepting this proposal means.
- Paint SUCCESS: what their business looks like afterwards.
- Gently describe what happens if nothing changes.

## Voice
- Warm, optimistic, confident but never pushy.
- Use "we" for {agency} and "you" for the client.
- No pressure tactics or urgency manipulation.
- Clear, simple language. Avoid jargon.

## Formatting Rules
- Write in markdown.
- Use ## for subsection headings within each section.
- Use bullet lists (- ) for lists of items.
- Use **bold** for emphasis on key phrases.
- Keep paragraphs short (2-3 sentences max)."""


def _services_block(services: list[ServiceDetail]) -> str:
    blocks = []
    for s in services:
        freq = "/month" if s.billing_frequency in ("monthly", "recurring") else "one-time"
        blocks.append(
            f"### {s.name} ({s.category_name or 'General'})\n"
            f"- **Price**: {format_cents(s.base_price_cents)} {freq}\n"
            f"- **Proposal Copy**: {s.proposal_copy or s.description or 'No description available'}\n"
            f"- **Included Scope**: {s.included_scope or 'Standard scope'}\n"
            f"- **Not Included**: {s.not_included or 'N/A'}\n"
            f"- **Projected Timeline**: {s.projected_timeline or 'TBD'}"
        )
    return "\n\n".join(blocks)


def build_user_prompt(data: GenerationInput) -> str:
    titles = section_titles()
    schema = ",\n".join(
        f'  "{key}": {{"title": "{titles[key]}", "content": "Markdown content here..."}}'
        for key in SECTION_TYPES
    )
    return f"""Generate a 4-section proposal for the following client. Return ONLY valid JSON matching the exact schema below.

## Client Information
- **Company**: {data.company_name}
- **Industry**: {data.company_industry or 'Not specified'}
- **Primary Contact**: {data.contact_name}

## Discovery Call Meeting Notes
{data.meeting_notes}

## Selected Services
{_services_block(data.services)}

## Required Output Schema
Return a JSON object with exactly 4 keys. Each value is an object with "title" (string) and "content" (markdown string).

{{
{schema}
}}

## Section-Specific Instructions

### 1. Overview and Goals
- Acknowledge the client's current situation using details from the meeting notes.
- Identify their key pain points, in their own words where possible.
- Include an "Our goal is simple" subsection with 4-6 specific, measurable objectives.

### 2. Scope of Project
- For EACH selected service: what is included, a "Deliverables" list, the projected timeline and what is NOT included.
- Open with a brief summary tying all services together.

### 3. Project Timeline
- Organize the services into phases: foundational work, ongoing services, then optimization and growth.
- Format each phase as "**Phase N (Timeline): Phase Name**" with a short bullet list.
- Note what the client needs to provide.

### 4. {titles['why_agency']}
- Open with what most agencies get wrong, then describe how we work differently.
- Include 4-6 concrete ways we address their specific concerns.
- Close honestly, with no pressure and a focus on long-term fit."""


def generate_proposal_sections(data: GenerationInput) -> list[dict]:
    """Draft the four narrative sections, ordered by ``sort_order``.

    The fee summary is rendered from line items and is not generated.
    """
    parsed = complete_json(
        system=system_prompt(),
        prompt=build_user_prompt(data),
        max_tokens=8000,
        purpose="proposal generation",
    )
    if not isinstance(parsed, dict):
        raise AIError("Failed to parse proposal generation response as JSON")

    sections = []
    for key in SECTION_TYPES:
        value = parsed.get(key) or {}
        if not isinstance(value, dict) or not value.get("title") or not value.get("content"):
            raise AIError(f"Missing or incomplete section: {key}")
        sections.append({
            "type": key,
            "title": value["title"],
            "content": value["content"],
            "sort_order": SECTION_SORT_ORDER[key],
        })
    logger.info("Generated %d proposal sections for %s", len(sections), data.company_name)
    return sections


def regenerate_section(data: GenerationInput, section_type: str, current_content: str = "") -> dict:
    if section_type not in SECTION_TYPES:
        raise ValueError("Invalid section_type")
    title = section_titles()[section_type]
    prompt = f'Regenerate ONLY the "{title}" section for this proposal. Return JSON: {{"title": "...", "content": "markdown..."}}\n\n'
    if current_content:
        prompt += (
            f"The current draft is:\n{current_content}\n\n"
            "Please write a fresh version that's different but still addresses the same points.\n\n"
        )
    prompt += build_user_prompt(data)

    parsed = complete_json(
        system=system_prompt(),
        prompt=prompt,
        max_tokens=3000,
        purpose="proposal generation",
    )
    if not isinstance(parsed, dict) or not parsed.get("content"):
        raise AIError(f"Missing or incomplete section: {section_type}")
    return {
        "type": section_type,
        "title": parsed.get("title") or title,
        "content": parsed["content"],
        "sort_order": SECTION_SORT_ORDER[section_type],
    }
