from django.contrib import admin

from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "status", "start_date", "end_date", "clickup_task_id")
    list_filter = ("status",)
    search_fields = ("name", "slug", "company__name", "clickup_task_id")
    list_select_related = ("company",)
    readonly_fields = ("id", "created_at", "updated_at")
