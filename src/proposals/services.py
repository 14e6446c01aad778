"""Proposal lifecycle: drafting, sending, token views, acceptance and expiry."""
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.http import Http404
from django.utils import timezone
from django.utils.formats import date_format

from core.services import create_audit_log
from core.verification import (
    build_public_url,
    generate_document_token,
    is_past_validity,
    validate_signer_email,
)
from proposals.models import Proposal, ProposalItem

logger = logging.getLogger("portal")

UPDATABLE_FIELDS = (
    "title",
    "valid_until",
    "notes",
    "meeting_notes_url",
    "meeting_notes_content",
    "total_amount_cents",
)
EDITABLE_STATUSES = (Proposal.Status.DRAFT, Proposal.Status.SENT, Proposal.Status.VIEWED)


# ---------------------------------------------------------------------------
# Drafting
# ---------------------------------------------------------------------------

def calculate_total_cents(items) -> int:
    return sum(int(item["unit_price_cents"]) * (int(item.get("quantity") or 1)) for item in items)


def _build_items(proposal: Proposal, items) -> list[ProposalItem]:
    rows = []
    for index, item in enumerate(items):
        sort_order = item.get("sort_order")
        rows.append(ProposalItem(
            proposal=proposal,
            service_id=item.get("service_id") or None,
            name=item["name"],
            description=item.get("description") or "",
            quantity=item.get("quantity") or 1,
            unit_price_cents=item["unit_price_cents"],
            sort_order=index if sort_order is None else sort_order,
        ))
    return ProposalItem.objects.bulk_create(rows)


@transaction.atomic
def create_proposal(
    actor,
    *,
    company,
    title: str,
    items,
    valid_until=None,
    notes: str = "",
    sections=None,
    meeting_notes_url: str = "",
    meeting_notes_content: str = "",
) -> Proposal:
    """Create a draft proposal with its line items.

    The total is the sum of ``unit_price_cents * quantity`` over the items.
    """
    title = (title or "").strip()
    if company is None or not title or not items:
        raise ValueError("company_id, title, and at least one item are required")

    sections = sections or []
    generated = bool(sections)
    proposal = Proposal.objects.create(
        company=company,
        title=title,
        token=generate_document_token(),
        valid_until=valid_until,
        notes=notes or "",
        total_amount_cents=calculate_total_cents(items),
        sections=sections,
        meeting_notes_url=meeting_notes_url or "",
        meeting_notes_content=meeting_notes_content or "",
        generation_status=(
            Proposal.GenerationStatus.COMPLETED if generated else Proposal.GenerationStatus.NONE
        ),
        generated_at=timezone.now() if generated else None,
        created_by=actor if getattr(actor, "is_authenticated", False) else None,
    )
    _build_items(proposal, items)

    create_audit_log(
        actor=actor,
        company=company,
        action="PROPOSAL_CREATED",
        entity_type="Proposal",
        entity_id=str(proposal.pk),
        after={"title": proposal.title, "total_amount_cents": proposal.total_amount_cents},
    )
    logger.info("Proposal %s created for %s by %s", proposal.pk, company.slug, actor)
    return proposal


@transaction.atomic
def update_proposal(proposal: Proposal, actor, *, items=None, **changes) -> Proposal:
    """Apply a partial update; when ``items`` is given every line item is replaced."""
    proposal = Proposal.objects.select_for_update().get(pk=proposal.pk)
    if proposal.status not in EDITABLE_STATUSES:
        raise ValueError(f"Proposal is {proposal.status} and can no longer be edited")
    update_fields = []
    for field in UPDATABLE_FIELDS:
        if field in changes:
            value = changes[field]
            if value is None and field not in ("valid_until",):
                value = 0 if field == "total_amount_cents" else ""
            setattr(proposal, field, value)
            update_fields.append(field)

    if "sections" in changes:
        sections = changes["sections"] or []
        proposal.sections = sections
        update_fields.append("sections")
        if any(section.get("content") for section in sections):
            proposal.generation_status = Proposal.GenerationStatus.COMPLETED
            proposal.generated_at = timezone.now()
            update_fields += ["generation_status", "generated_at"]

    if items is not None and "total_amount_cents" not in changes:
        proposal.total_amount_cents = calculate_total_cents(items)
        update_fields.append("total_amount_cents")

    if update_fields:
        proposal.save(update_fields=update_fields + ["updated_at"])

    if items is not None:
        proposal.items.all().delete()
        _build_items(proposal, items)

    create_audit_log(
        actor=actor,
        company=proposal.company,
        action="PROPOSAL_UPDATED",
        entity_type="Proposal",
        entity_id=str(proposal.pk),
        after={"fields": update_fields, "items_replaced": items is not None},
    )
    return proposal


# ---------------------------------------------------------------------------
# Sending
# ---------------------------------------------------------------------------

def proposal_recipient(proposal: Proposal) -> str:
    company = proposal.company
    if company.contact_email:
        return company.contact_email
    contact = company.primary_contact
    return contact.email if contact else ""


@transaction.atomic
def _mark_sent(proposal: Proposal, actor, ip=None) -> Proposal:
    proposal = Proposal.objects.select_for_update().select_related("company").get(pk=proposal.pk)
    if proposal.status != Proposal.Status.DRAFT:
        raise ValueError("Only draft proposals can be sent")
    proposal.status = Proposal.Status.SENT
    proposal.sent_at = timezone.now()
    proposal.save(update_fields=["status", "sent_at", "updated_at"])
    create_audit_log(
        actor=actor,
        company=proposal.company,
        action="PROPOSAL_SENT",
        entity_type="Proposal",
        entity_id=str(proposal.pk),
        before={"status": Proposal.Status.DRAFT},
        after={"status": proposal.status},
        ip=ip,
    )
    return proposal


def send_proposal(proposal: Proposal, actor, ip=None) -> Proposal:
    """Move a draft to sent and email the share link (best effort)."""
    from notifications.services import queue_email

    proposal = _mark_sent(proposal, actor, ip=ip)
    logger.info("Proposal %s sent by %s", proposal.pk, actor)

    recipient = proposal_recipient(proposal)
    if not recipient:
        logger.warning("Proposal %s has no recipient email; share link not mailed", proposal.pk)
        return proposal
    queue_email(
        to=recipient,
        subject=f"Your proposal from {settings.AGENCY_NAME}: {proposal.title}",
        template_name="emails/proposal_sent",
        context={
            "company_name": proposal.company.name,
            "proposal_title": proposal.title,
            "proposal_url": build_public_url("proposals", proposal.token),
            "valid_until": date_format(proposal.valid_until, "F j, Y") if proposal.valid_until else "",
        },
        template_key="proposal_sent",
        company=proposal.company,
    )
    return proposal


# ---------------------------------------------------------------------------
# Public token access
# ---------------------------------------------------------------------------

def _locked_by_token(token) -> Proposal:
    proposal = (
        Proposal.objects.select_for_update()
        .filter(token=str(token))
        .first()
    )
    if proposal is None:
        raise Http404("Proposal not found")
    return proposal


@transaction.atomic
def view_proposal_by_token(token) -> Proposal:
    """Return the proposal for ``token`` and record the view.

    Views only count while the proposal is sent or viewed; the first one
    moves it from sent to viewed.
    """
    proposal = _locked_by_token(token)
    if proposal.status in (Proposal.Status.SENT, Proposal.Status.VIEWED):
        proposal.view_count += 1
        update_fields = ["view_count", "updated_at"]
        if proposal.status == Proposal.Status.SENT:
            proposal.status = Proposal.Status.VIEWED
            proposal.first_viewed_at = timezone.now()
            update_fields += ["status", "first_viewed_at"]
        proposal.save(update_fields=update_fields)
    return (
        Proposal.objects.select_related("company")
        .prefetch_related("items")
        .get(pk=proposal.pk)
    )


def accept_proposal(token, email: str, ip: str = "unknown", user_agent: str = "unknown") -> Proposal:
    """Accept a sent or viewed proposal and record the audit trail.

    A proposal found past its validity date is persisted as expired before
    the error is raised.
    """
    email = (email or "").strip()
    if not email:
        raise ValueError("Email is required")
    validate_signer_email(email)

    expired = False
    with transaction.atomic():
        proposal = _locked_by_token(token)
        if proposal.status == Proposal.Status.ACCEPTED:
            raise ValueError("Proposal has already been accepted")
        if proposal.status in (Proposal.Status.EXPIRED, Proposal.Status.DECLINED):
            raise ValueError(f"Proposal is {proposal.status}")
        if proposal.status == Proposal.Status.DRAFT:
            raise ValueError("Proposal has not been sent yet")

        before = {"status": proposal.status}
        if is_past_validity(proposal.valid_until):
            proposal.status = Proposal.Status.EXPIRED
            proposal.save(update_fields=["status", "updated_at"])
            expired = True
            action = "PROPOSAL_EXPIRED"
        else:
            proposal.status = Proposal.Status.ACCEPTED
            proposal.accepted_at = timezone.now()
            proposal.accepted_by_email = email
            proposal.accepted_by_ip = ip or "unknown"
            proposal.accepted_by_user_agent = user_agent or "unknown"
            proposal.save(update_fields=[
                "status",
                "accepted_at",
                "accepted_by_email",
                "accepted_by_ip",
                "accepted_by_user_agent",
                "updated_at",
            ])
            action = "PROPOSAL_ACCEPTED"

        create_audit_log(
            actor=None,
            company=proposal.company,
            action=action,
            entity_type="Proposal",
            entity_id=str(proposal.pk),
            before=before,
            after={"status": proposal.status, "email": email, "user_agent": user_agent},
            ip=ip,
        )

    if expired:
        logger.info("Proposal %s expired on acceptance attempt", proposal.pk)
        raise ValueError("Proposal has expired")

    logger.info("Proposal %s accepted by %s", proposal.pk, email)
    queue_agreement_generation(proposal)
    return proposal


def queue_agreement_generation(proposal: Proposal) -> None:
    """Generate the follow-up agreements after commit; failures never reach the client."""
    def _dispatch() -> None:
        try:
            from agreements.tasks import generate_agreements_for_proposal

            generate_agreements_for_proposal.delay(str(proposal.pk))
        except Exception as exc:
            logger.warning("Agreement generation dispatch failed for %s: %s", proposal.pk, exc, exc_info=True)

    transaction.on_commit(_dispatch)


@transaction.atomic
def decline_proposal(token, ip: str = "unknown", user_agent: str = "unknown") -> Proposal:
    proposal = _locked_by_token(token)
    if proposal.status == Proposal.Status.DRAFT:
        raise ValueError("Proposal has not been sent yet")
    if proposal.status not in (Proposal.Status.SENT, Proposal.Status.VIEWED):
        raise ValueError(f"Proposal is {proposal.status}")

    before = {"status": proposal.status}
    proposal.status = Proposal.Status.DECLINED
    proposal.declined_at = timezone.now()
    proposal.save(update_fields=["status", "declined_at", "updated_at"])
    create_audit_log(
        actor=None,
        company=proposal.company,
        action="PROPOSAL_DECLINED",
        entity_type="Proposal",
        entity_id=str(proposal.pk),
        before=before,
        after={"status": proposal.status, "user_agent": user_agent},
        ip=ip,
    )
    logger.info("Proposal %s declined", proposal.pk)
    return proposal


def expire_overdue_proposals(today=None) -> int:
    """Expire sent or viewed proposals whose validity day has ended."""
    today = today or timezone.localdate()
    expired = 0
    overdue = Proposal.objects.filter(
        status__in=[Proposal.Status.SENT, Proposal.Status.VIEWED],
        valid_until__lt=today,
    ).select_related("company")
    for proposal in overdue:
        with transaction.atomic():
            before = {"status": proposal.status}
            proposal.status = Proposal.Status.EXPIRED
            proposal.save(update_fields=["status", "updated_at"])
            create_audit_log(
                actor=None,
                company=proposal.company,
                action="PROPOSAL_EXPIRED",
                entity_type="Proposal",
                entity_id=str(proposal.pk),
                before=before,
                after={"status": proposal.status},
            )
        expired += 1
    if expired:
        logger.info("Expired %d overdue proposals", expired)
    return expired


# ---------------------------------------------------------------------------
# AI drafting
# ---------------------------------------------------------------------------

MIN_GENERATE_NOTES_LENGTH = 100
MIN_AUTO_GENERATE_NOTES_LENGTH = 50


def generate_sections_for_company(company, service_ids, meeting_notes: str) -> list[dict]:
    """Draft the narrative sections plus the fee summary placeholder."""
    from catalog.models import Service
    from proposals.generation import FEE_SUMMARY_SECTION, GenerationInput, generate_proposal_sections

    if not service_ids:
        raise ValueError("company_id and at least one service_id are required")
    if len((meeting_notes or "").strip()) < MIN_GENERATE_NOTES_LENGTH:
        raise ValueError("Meeting notes are too short or empty.")
    services = list(Service.objects.filter(pk__in=service_ids).select_related("category"))
    if not services:
        raise ValueError("No services found for the provided IDs")

    sections = generate_proposal_sections(GenerationInput.for_company(company, meeting_notes, services))
    return sections + [dict(FEE_SUMMARY_SECTION)]


def regenerate_section_for_company(company, service_ids, meeting_notes, section_type, current_content="") -> dict:
    from catalog.models import Service
    from proposals.generation import SECTION_TYPES, GenerationInput, regenerate_section

    if not service_ids or section_type not in SECTION_TYPES:
        raise ValueError("company_id, service_ids, and a valid section_type are required")
    services = list(Service.objects.filter(pk__in=service_ids).select_related("category"))
    if not services:
        raise ValueError("No services found")
    return regenerate_section(
        GenerationInput.for_company(company, meeting_notes, services),
        section_type,
        current_content or "",
    )


def auto_generate_proposal(actor, company, meeting_notes: str, meeting_notes_url: str = ""):
    """Recommend services, draft the sections and create the proposal.

    Returns ``(proposal, recommendations)``.
    """
    from catalog.models import Service
    from proposals.generation import FEE_SUMMARY_SECTION, GenerationInput, generate_proposal_sections
    from proposals.recommendation import recommend_services

    notes = (meeting_notes or "").strip()
    if len(notes) < MIN_AUTO_GENERATE_NOTES_LENGTH:
        raise ValueError(
            f'No meeting notes found for "{company.name}". '
            "Paste the discovery call notes or use the manual proposal builder."
        )

    catalog = list(Service.objects.filter(is_active=True).select_related("category").order_by("name"))
    if not catalog:
        raise ValueError("Service catalog is empty")

    recommendations = recommend_services(notes, catalog)
    if not recommendations:
        raise ValueError(
            "AI could not identify relevant services from the meeting notes. Use the manual proposal builder."
        )

    recommended_ids = [r["service_id"] for r in recommendations]
    recommended = [s for s in catalog if str(s.pk) in recommended_ids]
    sections = generate_proposal_sections(GenerationInput.for_company(company, notes, recommended))
    sections.append(dict(FEE_SUMMARY_SECTION))

    proposal = create_proposal(
        actor,
        company=company,
        title=f"Proposal for {company.name}",
        valid_until=timezone.localdate() + timedelta(days=settings.PROPOSAL_VALIDITY_DAYS),
        items=[
            {
                "service_id": s.pk,
                "name": s.name,
                "description": s.description,
                "quantity": 1,
                "unit_price_cents": s.base_price_cents or 0,
            }
            for s in recommended
        ],
        sections=sections,
        meeting_notes_url=meeting_notes_url,
        meeting_notes_content=notes,
    )

    names = {str(s.pk): s.name for s in catalog}
    return proposal, [
        {"service_id": r["service_id"], "service_name": names.get(r["service_id"]), "reason": r["reason"]}
        for r in recommendations
    ]
