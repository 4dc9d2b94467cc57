from django.contrib import admin

from cxo_survey.invites import models


@admin.register(models.InviteLog)
class InviteLogAdmin(admin.ModelAdmin):
    list_display = ["id", "email", "role", "organization", "status", "sent_at"]
    search_fields = ["email", "token"]
    list_filter = ["status", "role"]


@admin.register(models.OneTimePassword)
class OneTimePasswordAdmin(admin.ModelAdmin):
    list_display = ["id", "email", "purpose", "expires_at"]
    search_fields = ["email"]
    list_filter = ["purpose"]
