"""Agreement generation, sending, token views and e-signature."""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.http import Http404
from django.utils import timezone
from django.utils.formats import date_format

from agreements.merge import MergeData, merge_template
from agreements.models import Agreement, AgreementTemplate, AgreementType
from core.services import create_audit_log
from core.verification import (
    build_public_url,
    generate_document_token,
    is_past_validity,
    validate_signer_email,
)

logger = logging.getLogger("portal")

SIGNER_NAME_MAX_LENGTH = 255


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def active_template(agreement_type: str) -> AgreementTemplate:
    template = (
        AgreementTemplate.objects
        .filter(type=agreement_type, is_active=True)
        .order_by("-version")
        .first()
    )
    if template is None:
        raise ValueError(f"No active template found for type: {agreement_type}")
    return template


@transaction.atomic
def generate_agreement(proposal, agreement_type: str, actor=None) -> Agreement:
    """Create a draft agreement from the newest active template of ``agreement_type``."""
    template = active_template(agreement_type)
    company = proposal.company
    content = merge_template(template.content, MergeData.for_proposal(company, proposal))

    agreement = Agreement.objects.create(
        company=company,
        proposal=proposal,
        template=template,
        type=agreement_type,
        title=template.title,
        status=Agreement.Status.DRAFT,
        token=generate_document_token(),
        content_snapshot=content,
    )
    create_audit_log(
        actor=actor,
        company=company,
        action="AGREEMENT_GENERATED",
        entity_type="Agreement",
        entity_id=str(agreement.pk),
        after={"type": agreement.type, "template_version": template.version, "proposal": str(proposal.pk)},
    )
    logger.info("Agreement %s (%s) generated for proposal %s", agreement.pk, agreement_type, proposal.pk)
    return agreement


def generate_agreements_for_proposal(proposal, actor=None) -> list[Agreement]:
    """Marketing agreement always; a BAA as well for healthcare companies."""
    agreements = [generate_agreement(proposal, AgreementType.MARKETING_AGREEMENT, actor=actor)]
    if proposal.company.is_healthcare:
        agreements.append(generate_agreement(proposal, AgreementType.BAA, actor=actor))
    return agreements


# ---------------------------------------------------------------------------
# Sending
# ---------------------------------------------------------------------------

@transaction.atomic
def _mark_sent(agreement: Agreement, actor, valid_until=None, ip=None) -> Agreement:
    agreement = Agreement.objects.select_for_update().select_related("company").get(pk=agreement.pk)
    if agreement.status != Agreement.Status.DRAFT:
        raise ValueError("Only draft agreements can be sent")
    agreement.status = Agreement.Status.SENT
    agreement.sent_at = timezone.now()
    update_fields = ["status", "sent_at", "updated_at"]
    if valid_until is not None:
        agreement.valid_until = valid_until
        update_fields.append("valid_until")
    agreement.save(update_fields=update_fields)
    create_audit_log(
        actor=actor,
        company=agreement.company,
        action="AGREEMENT_SENT",
        entity_type="Agreement",
        entity_id=str(agreement.pk),
        before={"status": Agreement.Status.DRAFT},
        after={"status": agreement.status},
        ip=ip,
    )
    return agreement


def send_agreement(agreement: Agreement, actor, valid_until=None, ip=None) -> Agreement:
    """Move a draft to sent and email the signing link (best effort)."""
    from notifications.services import queue_email

    agreement = _mark_sent(agreement, actor, valid_until=valid_until, ip=ip)
    logger.info("Agreement %s sent by %s", agreement.pk, actor)

    company = agreement.company
    contact = company.primary_contact
    recipient = company.contact_email or (contact.email if contact else "")
    if not recipient:
        logger.warning("Agreement %s has no recipient email; signing link not mailed", agreement.pk)
        return agreement
    queue_email(
        to=recipient,
        subject=f"Please review and sign: {agreement.title}",
        template_name="emails/agreement_sent",
        context={
            "company_name": company.name,
            "agreement_title": agreement.title,
            "agreement_url": build_public_url("agreements", agreement.token),
            "valid_until": date_format(agreement.valid_until, "F j, Y") if agreement.valid_until else "",
        },
        template_key="agreement_sent",
        company=company,
    )
    return agreement


# ---------------------------------------------------------------------------
# Public token access
# ---------------------------------------------------------------------------

def _locked_by_token(token) -> Agreement:
    agreement = Agreement.objects.select_for_update().filter(token=str(token)).first()
    if agreement is None:
        raise Http404("Agreement not found")
    return agreement


@transaction.atomic
def view_agreement_by_token(token) -> Agreement:
    agreement = _locked_by_token(token)
    if agreement.status in (Agreement.Status.SENT, Agreement.Status.VIEWED):
        agreement.view_count += 1
        update_fields = ["view_count", "updated_at"]
        if agreement.status == Agreement.Status.SENT:
            agreement.status = Agreement.Status.VIEWED
            agreement.first_viewed_at = timezone.now()
            update_fields += ["status", "first_viewed_at"]
        agreement.save(update_fields=update_fields)
    return Agreement.objects.select_related("company", "proposal").get(pk=agreement.pk)


def sign_agreement(token, name: str, email: str, ip: str = "unknown", user_agent: str = "unknown") -> Agreement:
    """Record an e-signature with its audit trail.

    An agreement found past its validity date is persisted as expired
    before the error is raised.
    """
    name = (name or "").strip()
    email = (email or "").strip()
    if not name:
        raise ValueError("Full legal name is required")
    if not email:
        raise ValueError("Email address is required")
    if len(name) > SIGNER_NAME_MAX_LENGTH:
        raise ValueError("Full legal name is too long")
    validate_signer_email(email)

    expired = False
    with transaction.atomic():
        agreement = _locked_by_token(token)
        if agreement.status == Agreement.Status.SIGNED:
            raise ValueError("Agreement has already been signed")
        if agreement.status == Agreement.Status.EXPIRED:
            raise ValueError("Agreement has expired")
        if agreement.status == Agreement.Status.DRAFT:
            raise ValueError("Agreement has not been sent yet")

        before = {"status": agreement.status}
        if is_past_validity(agreement.valid_until):
            agreement.status = Agreement.Status.EXPIRED
            agreement.save(update_fields=["status", "updated_at"])
            expired = True
            action = "AGREEMENT_EXPIRED"
        else:
            agreement.status = Agreement.Status.SIGNED
            agreement.signed_at = timezone.now()
            agreement.signed_by_name = name
            agreement.signed_by_email = email
            agreement.signed_by_ip = ip or "unknown"
            agreement.signed_by_user_agent = user_agent or "unknown"
            agreement.save(update_fields=[
                "status",
                "signed_at",
                "signed_by_name",
                "signed_by_email",
                "signed_by_ip",
                "signed_by_user_agent",
                "updated_at",
            ])
            action = "AGREEMENT_SIGNED"

        create_audit_log(
            actor=None,
            company=agreement.company,
            action=action,
            entity_type="Agreement",
            entity_id=str(agreement.pk),
            before=before,
            after={"status": agreement.status, "name": name, "email": email, "user_agent": user_agent},
            ip=ip,
        )

    if expired:
        logger.info("Agreement %s expired on signing attempt", agreement.pk)
        raise ValueError("Agreement has expired")

    logger.info("Agreement %s signed by %s <%s>", agreement.pk, name, email)
    return agreement


def expire_overdue_agreements(today=None) -> int:
    today = today or timezone.localdate()
    expired = 0
    overdue = Agreement.objects.filter(
        status__in=[Agreement.Status.SENT, Agreement.Status.VIEWED],
        valid_until__lt=today,
    ).select_related("company")
    for agreement in overdue:
        with transaction.atomic():
            before = {"status": agreement.status}
            agreement.status = Agreement.Status.EXPIRED
            agreement.save(update_fields=["status", "updated_at"])
            create_audit_log(
                actor=None,
                company=agreement.company,
                action="AGREEMENT_EXPIRED",
                entity_type="Agreement",
                entity_id=str(agreement.pk),
                before=before,
                after={"status": agreement.status},
            )
        expired += 1
    if expired:
        logger.info("Expired %d overdue agreements", expired)
    return expired


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------

def agreement_pdf_context(agreement: Agreement) -> dict:
    return {
        "agreement": agreement,
        "company": agreement.company,
        "agency_name": settings.AGENCY_NAME,
        "agency_legal_name": settings.AGENCY_LEGAL_NAME,
        "generated_at": timezone.now(),
    }
