from django.contrib import admin

from core.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor", "company", "action", "entity_type", "entity_id")
    list_filter = ("action", "entity_type")
    search_fields = (
        "entity_id",
        "actor__email",
        "actor__first_name",
        "actor__last_name",
        "action",
        "entity_type",
        "company__name",
    )
    readonly_fields = (
        "actor",
        "company",
        "action",
        "entity_type",
        "entity_id",
        "before_json",
        "after_json",
        "ip_address",
        "created_at",
    )
    list_select_related = ("actor", "company")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
