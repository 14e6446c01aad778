"""Company services: creation, lead qualification and current-company resolution."""
from __future__ import annotations

import logging
import uuid

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.db import transaction

from companies.models import Company, CompanyUser, Contact
from core.services import create_audit_log
from core.text import unique_slug

logger = logging.getLogger("portal")


# ---------------------------------------------------------------------------
# Company lifecycle
# ---------------------------------------------------------------------------

def default_status_for_type(company_type: str) -> str:
    if company_type == Company.Type.LEAD:
        return Company.Status.NEEDS_QUALIFIED
    return Company.Status.ACTIVE


@transaction.atomic
def create_company(actor, **fields) -> Company:
    name = (fields.pop("name", "") or "").strip()
    if not name:
        raise ValueError("name is required")
    company_type = fields.pop("type", None) or Company.Type.CLIENT
    status = fields.pop("status", None) or default_status_for_type(company_type)
    company = Company.objects.create(
        name=name,
        slug=unique_slug(Company, name),
        type=company_type,
        status=status,
        **fields,
    )
    create_audit_log(
        actor=actor,
        company=company,
        action="COMPANY_CREATED",
        entity_type="Company",
        entity_id=str(company.pk),
        after={"name": company.name, "type": company.type, "status": company.status},
    )
    logger.info("Company %s created (%s) by %s", company.slug, company.type, actor)
    return company


@transaction.atomic
def qualify_lead(company: Company, actor) -> Company:
    """Promote a lead to a prospect awaiting a proposal."""
    company = Company.objects.select_for_update().get(pk=company.pk)
    if company.type != Company.Type.LEAD:
        raise ValueError("Only leads can be qualified")

    before = {"type": company.type, "status": company.status}
    company.type = Company.Type.PROSPECT
    company.status = Company.Status.NEEDS_PROPOSAL
    company.save(update_fields=["type", "status", "updated_at"])

    create_audit_log(
        actor=actor,
        company=company,
        action="COMPANY_QUALIFIED",
        entity_type="Company",
        entity_id=str(company.pk),
        before=before,
        after={"type": company.type, "status": company.status},
    )
    logger.info("Lead %s qualified by %s", company.slug, actor)
    return company


@transaction.atomic
def save_contact(contact: Contact) -> Contact:
    """Save ``contact``, demoting any other primary contact of the company."""
    if contact.is_primary:
        Contact.objects.filter(company_id=contact.company_id, is_primary=True).exclude(
            pk=contact.pk,
        ).update(is_primary=False)
    contact.save()
    return contact


# ---------------------------------------------------------------------------
# Current company
# ---------------------------------------------------------------------------

def user_companies(user):
    """Companies ``user`` is a member of, in membership order."""
    if user is None or not user.is_authenticated:
        return Company.objects.none()
    return Company.objects.filter(company_users__user=user).order_by("company_users__created_at")


def resolve_current_company(request, user) -> Company | None:
    """Return the company ``user`` is currently viewing.

    Resolution order:
    1. ``current_client_id`` cookie, if the user is still a member.
    2. The agency's own company for admins who are members of it.
    3. The first company the user was added to.
    """
    if user is None or not user.is_authenticated:
        return None

    cookie_value = request.COOKIES.get(settings.CURRENT_COMPANY_COOKIE)
    if cookie_value:
        link = (
            CompanyUser.objects
            .filter(user=user, company_id=cookie_value)
            .select_related("company")
            .first()
            if _looks_like_uuid(cookie_value)
            else None
        )
        if link:
            return link.company

    companies = list(user_companies(user))
    if not companies:
        return None

    agency_id = str(getattr(settings, "AGENCY_COMPANY_ID", "") or "")
    if user.is_admin and agency_id:
        for company in companies:
            if str(company.pk) == agency_id:
                return company

    return companies[0]


def _looks_like_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def set_current_company_cookie(response, company_id) -> None:
    response.set_cookie(
        settings.CURRENT_COMPANY_COOKIE,
        str(company_id),
        max_age=settings.CURRENT_COMPANY_COOKIE_MAX_AGE,
        httponly=False,
        samesite="Lax",
        path="/",
    )


def clear_current_company_cookie(response) -> None:
    response.delete_cookie(settings.CURRENT_COMPANY_COOKIE, path="/")


def switch_current_company(user, company_id) -> Company:
    """Validate that ``user`` may view ``company_id`` and return it."""
    if not company_id or not _looks_like_uuid(company_id):
        raise ValueError("company_id is required")
    link = (
        CompanyUser.objects
        .filter(user=user, company_id=company_id)
        .select_related("company")
        .first()
    )
    if link is None:
        raise PermissionDenied("You do not have access to this company")
    return link.company
