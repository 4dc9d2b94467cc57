from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class InvitesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cxo_survey.invites"
    verbose_name = _("Invites")
