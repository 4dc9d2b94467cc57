from celery import shared_task
from django.utils import timezone

from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword


@shared_task(name="invites.purge_expired_otps")
def purge_expired_otps() -> int:
    """Delete one-time passwords past their expiry.

    Returns:
        Number of rows removed.
    """
    deleted, _ = OneTimePassword.objects.filter(
        expires_at__lte=timezone.now()
    ).delete()
    return deleted


@shared_task(name="invites.expire_stale_invites")
def expire_stale_invites() -> int:
    """Flip sent/clicked invites whose expiry has passed to ``expired``."""
    return InviteLog.objects.filter(
        status__in=[InviteLog.Status.SENT, InviteLog.Status.CLICKED],
        expires_at__lte=timezone.now(),
    ).update(status=InviteLog.Status.EXPIRED)
