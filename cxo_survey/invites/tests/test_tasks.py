from datetime import timedelta

import pytest
from django.utils import timezone

from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword
from cxo_survey.invites.tasks import expire_stale_invites
from cxo_survey.invites.tasks import purge_expired_otps
from tests import factories

pytestmark = pytest.mark.django_db


def test_purge_expired_otps():
    OneTimePassword.objects.create(
        email="old@acme.test", expires_at=timezone.now() - timedelta(minutes=1)
    )
    fresh = OneTimePassword.objects.create(email="new@acme.test")

    assert purge_expired_otps() == 1
    assert list(OneTimePassword.objects.values_list("pk", flat=True)) == [fresh.pk]


def test_expire_stale_invites(org):
    stale = factories.create_invite(
        "old@acme.test", organization=org, expires_in=timedelta(seconds=-1)
    )
    accepted = factories.create_invite(
        "done@acme.test",
        organization=org,
        status=InviteLog.Status.ACCEPTED,
        expires_in=timedelta(seconds=-1),
    )
    live = factories.create_invite("live@acme.test", organization=org)

    assert expire_stale_invites() == 1
    stale.refresh_from_db()
    accepted.refresh_from_db()
    live.refresh_from_db()
    assert stale.status == InviteLog.Status.EXPIRED
    assert accepted.status == InviteLog.Status.ACCEPTED
    assert live.status == InviteLog.Status.SENT
