"""
Service functions for the catalog app.

Stripe catalog sync and company service assignment.
"""
import logging

from django.db import DatabaseError, transaction

from catalog.models import CompanyService, Service
from core.services import create_audit_log
from integrations import stripe_catalog
from integrations.exceptions import IntegrationError

logger = logging.getLogger("portal")


def _normalize(name: str) -> str:
    return (name or "").strip().lower()


def sync_stripe_catalog(*, dry_run: bool, actor=None) -> dict:
    """Match active Stripe products to portal services by name.

    Unless ``dry_run`` is set, matched services get their Stripe product and
    default price ids written. Per-service write failures are collected in
    ``errors`` rather than aborting the sync.

    Raises :class:`IntegrationError` when Stripe cannot be listed.
    """
    try:
        products = stripe_catalog.list_active_products()
    except IntegrationError as exc:
        raise IntegrationError(f"Stripe API error: {exc}") from exc

    services = list(Service.objects.all())
    by_name = {_normalize(svc.name): svc for svc in services}

    matched, unmatched_stripe, errors = [], [], []
    matched_ids = set()

    for product in products:
        svc = by_name.get(_normalize(product["name"]))
        if svc is None:
            unmatched_stripe.append({"name": product["name"], "stripe_product_id": product["id"]})
            continue

        matched_ids.add(svc.pk)
        matched.append({
            "service_name": svc.name,
            "stripe_product_id": product["id"],
            "stripe_price_id": product["default_price"],
        })
        if dry_run:
            continue
        try:
            with transaction.atomic():
                Service.objects.filter(pk=svc.pk).update(
                    stripe_product_id=product["id"],
                    stripe_price_id=product["default_price"] or "",
                )
        except DatabaseError as exc:
            logger.exception("Stripe sync failed to update service %s", svc.pk)
            errors.append(f'Failed to update "{svc.name}": {exc}')

    unmatched_portal = [
        {"name": svc.name, "service_id": str(svc.pk)}
        for svc in services
        if svc.pk not in matched_ids and not svc.stripe_product_id
    ]

    if not dry_run and matched:
        create_audit_log(
            actor=actor,
            company=None,
            action="STRIPE_CATALOG_SYNCED",
            entity_type="Service",
            entity_id="*",
            after={"matched": len(matched), "errors": len(errors)},
        )
    logger.info(
        "Stripe sync (dry_run=%s): %s matched, %s unmatched in Stripe, %s unmatched in portal",
        dry_run, len(matched), len(unmatched_stripe), len(unmatched_portal),
    )

    return {
        "dry_run": dry_run,
        "summary": {
            "matched": len(matched),
            "unmatched_stripe": len(unmatched_stripe),
            "unmatched_portal": len(unmatched_portal),
            "errors": len(errors),
        },
        "matched": matched,
        "unmatched_stripe": unmatched_stripe,
        "unmatched_portal": unmatched_portal,
        "errors": errors,
    }


@transaction.atomic
def assign_service(company, service: Service, actor, **fields) -> CompanyService:
    if not service.is_active:
        raise ValueError("Service is not active")
    if CompanyService.objects.filter(company=company, service=service).exists():
        raise ValueError("This service is already assigned to the company")
    company_service = CompanyService.objects.create(company=company, service=service, **fields)
    create_audit_log(
        actor=actor,
        company=company,
        action="SERVICE_ASSIGNED",
        entity_type="CompanyService",
        entity_id=str(company_service.pk),
        after={"service": service.name, "status": company_service.status},
    )
    logger.info("Service %s assigned to %s by %s", service.slug, company.slug, actor)
    return company_service
