"""Invoice state changes."""
import logging

from django.db import transaction
from django.utils import timezone

from billing.models import Invoice
from core.services import create_audit_log

logger = logging.getLogger("portal")


@transaction.atomic
def mark_invoice_paid(invoice: Invoice, actor, paid_at=None, ip=None) -> Invoice:
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    if invoice.status != Invoice.Status.OPEN:
        raise ValueError("Only open invoices can be marked as paid")

    before = {"status": invoice.status}
    invoice.status = Invoice.Status.PAID
    invoice.paid_at = paid_at or timezone.now()
    invoice.save(update_fields=["status", "paid_at", "updated_at"])

    create_audit_log(
        actor=actor,
        company=invoice.company,
        action="INVOICE_PAID",
        entity_type="Invoice",
        entity_id=str(invoice.pk),
        before=before,
        after={"status": invoice.status, "paid_at": invoice.paid_at.isoformat()},
        ip=ip,
    )
    logger.info("Invoice %s marked paid by %s", invoice.pk, actor)
    return invoice


@transaction.atomic
def void_invoice(invoice: Invoice, actor, ip=None) -> Invoice:
    invoice = Invoice.objects.select_for_update().get(pk=invoice.pk)
    if invoice.status not in (Invoice.Status.DRAFT, Invoice.Status.OPEN):
        raise ValueError("Only draft or open invoices can be voided")

    before = {"status": invoice.status}
    invoice.status = Invoice.Status.VOID
    invoice.save(update_fields=["status", "updated_at"])

    create_audit_log(
        actor=actor,
        company=invoice.company,
        action="INVOICE_VOIDED",
        entity_type="Invoice",
        entity_id=str(invoice.pk),
        before=before,
        after={"status": invoice.status},
        ip=ip,
    )
    logger.info("Invoice %s voided by %s", invoice.pk, actor)
    return invoice


def invoice_totals(invoices) -> dict:
    """Open and paid totals (cents) over an invoice iterable."""
    open_total = 0
    paid_total = 0
    for invoice in invoices:
        if invoice.status == Invoice.Status.OPEN:
            open_total += invoice.amount_cents
        elif invoice.status == Invoice.Status.PAID:
            paid_total += invoice.amount_cents
    return {"open_total_cents": open_total, "paid_total_cents": paid_total}
