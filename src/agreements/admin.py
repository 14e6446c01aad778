from django.contrib import admin

from .models import Agreement, AgreementTemplate


@admin.register(AgreementTemplate)
class AgreementTemplateAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "version", "is_active", "updated_at")
    list_filter = ("type", "is_active")
    search_fields = ("title",)


@admin.register(Agreement)
class AgreementAdmin(admin.ModelAdmin):
    list_display = ("title", "company", "type", "status", "valid_until", "signed_at", "signed_by_name")
    list_filter = ("status", "type")
    search_fields = ("title", "token", "company__name", "signed_by_email")
    list_select_related = ("company",)
    readonly_fields = (
        "id", "token", "content_snapshot", "sent_at", "first_viewed_at", "view_count",
        "signed_at", "signed_by_name", "signed_by_email", "signed_by_ip", "signed_by_user_agent",
        "created_at", "updated_at",
    )
