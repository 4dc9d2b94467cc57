from django.contrib import admin

from cxo_survey.org import models


@admin.register(models.Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "ceo_email", "status", "created_at"]
    search_fields = ["name", "ceo_email"]
    list_filter = ["status"]


@admin.register(models.Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "organization", "head"]
    search_fields = ["name"]
    list_filter = ["organization"]
