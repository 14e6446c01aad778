import pytest

from billing.models import Invoice
from billing.services import invoice_totals, mark_invoice_paid, void_invoice
from core.models import AuditLog


@pytest.fixture
def open_invoice(company):
    return Invoice.objects.create(
        company=company, description="January retainer", amount_cents=120000, status=Invoice.Status.OPEN,
    )


@pytest.mark.django_db
class TestInvoiceServices:
    def test_mark_paid_sets_timestamp(self, admin_user, open_invoice):
        invoice = mark_invoice_paid(open_invoice, admin_user, ip="192.0.2.1")

        assert invoice.status == Invoice.Status.PAID
        assert invoice.paid_at is not None
        log = AuditLog.objects.get(action="INVOICE_PAID")
        assert log.before_json == {"status": "open"}
        assert log.ip_address == "192.0.2.1"

    def test_only_open_invoices_can_be_paid(self, admin_user, open_invoice):
        void_invoice(open_invoice, admin_user)

        with pytest.raises(ValueError, match="Only open invoices"):
            mark_invoice_paid(open_invoice, admin_user)

    def test_paid_invoices_cannot_be_voided(self, admin_user, open_invoice):
        mark_invoice_paid(open_invoice, admin_user)

        with pytest.raises(ValueError, match="draft or open"):
            void_invoice(open_invoice, admin_user)

    def test_invoice_totals(self, company):
        invoices = [
            Invoice(company=company, amount_cents=1000, status=Invoice.Status.OPEN),
            Invoice(company=company, amount_cents=2500, status=Invoice.Status.OPEN),
            Invoice(company=company, amount_cents=4000, status=Invoice.Status.PAID),
            Invoice(company=company, amount_cents=9999, status=Invoice.Status.VOID),
        ]

        assert invoice_totals(invoices) == {"open_total_cents": 3500, "paid_total_cents": 4000}
