from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from .models import AuditLog
from .utils import client_ip
from .utils import log_action


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    ua = request.META.get("HTTP_USER_AGENT", "-") if request else "-"
    method = kwargs.get("method", "otp")
    log_action(
        AuditLog.Action.LOGIN,
        actor=user,
        message=f"method={method} ua={ua}",
        model_name="employees.Employee",
        record_id=user.pk,
        ip_address=client_ip(request),
    )
