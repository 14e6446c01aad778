from django.contrib import admin

from .models import Report, ReportItem, ReportSet


class ReportInline(admin.TabularInline):
    model = Report
    extra = 0
    fields = ("report_type", "status", "score", "max_score", "tier")
    readonly_fields = fields
    show_change_link = True


class ReportItemInline(admin.TabularInline):
    model = ReportItem
    extra = 0
    fields = ("category", "status", "score", "rating", "total_reviews", "sort_order")


@admin.register(ReportSet)
class ReportSetAdmin(admin.ModelAdmin):
    list_display = ("company", "status", "overall_score", "overall_max_score", "overall_tier", "updated_at")
    list_filter = ("status", "overall_tier")
    search_fields = ("company__name",)
    inlines = [ReportInline]


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ("report_set", "report_type", "status", "score", "max_score", "tier")
    list_filter = ("report_type", "status", "tier")
    search_fields = ("report_set__company__name",)
    inlines = [ReportItemInline]
