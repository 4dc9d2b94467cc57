import django_filters

from cxo_survey.support.models import SupportTicket


class SupportTicketFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=SupportTicket.Status.choices)
    priority = django_filters.ChoiceFilter(choices=SupportTicket.Priority.choices)
    category = django_filters.ChoiceFilter(choices=SupportTicket.Category.choices)

    class Meta:
        model = SupportTicket
        fields = ["status", "priority", "category"]
