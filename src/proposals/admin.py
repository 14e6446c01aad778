from django.contrib import admin

from .models import Proposal, ProposalItem


class ProposalItemInline(admin.TabularInline):
    model = ProposalItem
    extra = 0
    autocomplete_fields = ("service",)


@admin.register(Proposal)
class ProposalAdmin(admin.ModelAdmin):
    list_display = ("title", "company", "status", "total_amount_cents", "valid_until", "view_count", "accepted_at")
    list_filter = ("status", "generation_status")
    search_fields = ("title", "token", "company__name", "accepted_by_email")
    list_select_related = ("company",)
    inlines = [ProposalItemInline]
    readonly_fields = (
        "id", "token", "sent_at", "first_viewed_at", "view_count",
        "accepted_at", "accepted_by_email", "accepted_by_ip", "accepted_by_user_agent",
        "declined_at", "generated_at", "created_at", "updated_at",
    )
