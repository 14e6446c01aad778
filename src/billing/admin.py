from django.contrib import admin

from .models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("company", "description", "amount_cents", "status", "invoice_date", "due_date", "paid_at")
    list_filter = ("status", "currency")
    search_fields = ("description", "company__name", "stripe_invoice_id")
    date_hierarchy = "invoice_date"
    list_select_related = ("company",)
    readonly_fields = ("id", "created_at", "updated_at")
