from django.contrib import admin

from cxo_survey.support import models


class TicketMessageInline(admin.TabularInline):
    model = models.TicketMessage
    extra = 0


@admin.register(models.SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ["ticket_number", "subject", "category", "priority", "status"]
    search_fields = ["ticket_number", "subject"]
    list_filter = ["status", "priority", "category"]
    inlines = [TicketMessageInline]
