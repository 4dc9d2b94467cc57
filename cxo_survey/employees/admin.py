from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Employee


@admin.register(Employee)
class EmployeeAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Profile"), {"fields": ("name", "google_id")}),
        (
            _("Membership"),
            {"fields": ("role", "organization", "department")},
        ),
        (
            _("Invitation"),
            {"fields": ("invite_status", "invite_token", "accepted_at")},
        ),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "role"),
            },
        ),
    )
    list_display = ["email", "name", "role", "organization", "invite_status"]
    list_filter = ["role", "invite_status", "is_active"]
    search_fields = ["email", "name"]
    ordering = ["email"]
    readonly_fields = ["accepted_at", "last_login", "date_joined"]
