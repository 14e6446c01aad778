from django.contrib import admin

from .models import Company, CompanyUser, Contact


class ContactInline(admin.TabularInline):
    model = Contact
    extra = 0
    fields = ("full_name", "email", "phone", "title", "role", "is_primary")


class CompanyUserInline(admin.TabularInline):
    model = CompanyUser
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "status", "industry", "city", "created_at")
    list_filter = ("type", "status", "industry")
    search_fields = ("name", "slug", "contact_name", "contact_email", "phone")
    readonly_fields = ("id", "created_at", "updated_at")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [ContactInline, CompanyUserInline]
    list_per_page = 50


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("full_name", "company", "email", "role", "is_primary")
    list_filter = ("role", "is_primary")
    search_fields = ("full_name", "email", "company__name")
    list_select_related = ("company",)
