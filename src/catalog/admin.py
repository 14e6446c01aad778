from django.contrib import admin

from .models import CompanyService, Service, ServiceCategory


@admin.register(ServiceCategory)
class ServiceCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "sort_order")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "service_type", "billing_frequency", "base_price_cents", "is_active")
    list_filter = ("category", "service_type", "billing_frequency", "is_active")
    search_fields = ("name", "slug", "stripe_product_id")
    list_select_related = ("category",)
    prepopulated_fields = {"slug": ("name",)}
    fieldsets = (
        (None, {"fields": ("category", "name", "slug", "description", "is_active")}),
        ("Pricing", {"fields": ("service_type", "billing_frequency", "base_price_cents")}),
        (
            "Copy",
            {"fields": ("proposal_copy", "contract_copy", "included_scope", "not_included", "projected_timeline")},
        ),
        ("Stripe", {"fields": ("stripe_product_id", "stripe_price_id")}),
    )


@admin.register(CompanyService)
class CompanyServiceAdmin(admin.ModelAdmin):
    list_display = ("company", "service", "status", "started_at")
    list_filter = ("status",)
    search_fields = ("company__name", "service__name")
    list_select_related = ("company", "service")
