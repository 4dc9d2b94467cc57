from __future__ import annotations

import logging
import typing

from allauth.account.adapter import DefaultAccountAdapter
from allauth.core.exceptions import ImmediateHttpResponse
from allauth.socialaccount.adapter import DefaultSocialAccountAdapter
from django.conf import settings
from django.http import HttpResponseRedirect

from cxo_survey.employees.models import Employee
from cxo_survey.notifications.mailer import frontend_url

if typing.TYPE_CHECKING:
    from allauth.socialaccount.models import SocialLogin
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


class AccountAdapter(DefaultAccountAdapter):
    def is_open_for_signup(self, request: HttpRequest) -> bool:
        return getattr(settings, "ACCOUNT_ALLOW_REGISTRATION", False)


class SocialAccountAdapter(DefaultSocialAccountAdapter):
    """Google sign-in for accounts that already exist on the platform."""

    def is_open_for_signup(
        self,
        request: HttpRequest,
        sociallogin: SocialLogin,
    ) -> bool:
        return False

    def pre_social_login(self, request: HttpRequest, sociallogin: SocialLogin) -> None:
        if sociallogin.is_existing:
            return
        email = (sociallogin.user.email or "").strip().lower()
        if not email:
            for address in sociallogin.email_addresses:
                email = (address.email or "").strip().lower()
                if email:
                    break
        employee = Employee.objects.filter(email__iexact=email).first() if email else None
        if employee is None or not employee.is_active:
            logger.info("Rejected Google sign-in for unknown email %s", email or "-")
            raise ImmediateHttpResponse(
                HttpResponseRedirect(frontend_url("/login?error=no_account")),
            )
        sociallogin.connect(request, employee)
        if employee.google_id != sociallogin.account.uid:
            employee.google_id = sociallogin.account.uid
            employee.save(update_fields=["google_id"])
