"""Outbound email for invites, one-time passwords and survey notices."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.core.mail import get_connection
from django.template.loader import render_to_string
from django.utils.html import strip_tags

if TYPE_CHECKING:
    from datetime import datetime

logger = logging.getLogger(__name__)

OTP_SUBJECTS = {
    "login": "Your Login OTP - CXO Survey Platform",
    "signup": "Verify Your Email - CXO Survey Platform",
    "reset": "Password Reset OTP - CXO Survey Platform",
}

OTP_HEADLINES = {
    "login": "Login Verification",
    "signup": "Email Verification",
    "reset": "Password Reset",
}


def frontend_url(path: str = "") -> str:
    base = str(getattr(settings, "FRONTEND_URL", "")).rstrip("/")
    return f"{base}{path}"


def signup_link(token: str) -> str:
    return frontend_url(f"/signup?token={token}")


@dataclass
class Mailer:
    """Renders templated HTML mail and sends it through a Django connection."""

    from_email: str = field(default_factory=lambda: settings.DEFAULT_FROM_EMAIL)
    connection: Any = None

    def _send(self, to: str, subject: str, template: str, context: dict) -> None:
        html = render_to_string(f"emails/{template}.html", context)
        msg = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html),
            from_email=self.from_email,
            to=[to],
            connection=self.connection or get_connection(),
        )
        msg.attach_alternative(html, "text/html")
        msg.send(fail_silently=False)
        logger.info("Sent '%s' mail to %s", template, to)

    def send_otp(self, email: str, otp: str, purpose: str = "login") -> None:
        self._send(
            email,
            OTP_SUBJECTS.get(purpose, OTP_SUBJECTS["login"]),
            "otp",
            {
                "otp": otp,
                "headline": OTP_HEADLINES.get(purpose, OTP_HEADLINES["login"]),
                "purpose": purpose,
                "ttl_minutes": settings.OTP_TTL_MINUTES,
            },
        )

    def send_ceo_invite(self, email: str, org_name: str, token: str) -> None:
        self._send(
            email,
            "You're Invited to Lead Your Organization - CXO Survey Platform",
            "ceo_invite",
            {
                "org_name": org_name,
                "signup_link": signup_link(token),
                "ttl_days": settings.INVITE_TTL_DAYS,
            },
        )

    def send_employee_invite(
        self,
        email: str,
        org_name: str,
        token: str,
        department_name: str | None = None,
    ) -> None:
        self._send(
            email,
            f"You're Invited to Join {org_name} - CXO Survey Platform",
            "employee_invite",
            {
                "org_name": org_name,
                "department_name": department_name,
                "signup_link": signup_link(token),
                "ttl_days": settings.INVITE_TTL_DAYS,
            },
        )

    def send_survey_assigned(
        self,
        email: str,
        name: str,
        survey_title: str,
        due_date: datetime | None,
    ) -> None:
        self._send(
            email,
            f"New Survey Assigned: {survey_title}",
            "survey_assigned",
            {
                "name": name or email,
                "survey_title": survey_title,
                "due_date": due_date,
                "dashboard_link": frontend_url("/dashboard"),
            },
        )


def get_mailer() -> Mailer:
    """Factory used by views; tests may swap the connection or the mailer."""
    return Mailer()


class MailerMixin:
    """View mixin resolving the mailer through an overridable factory."""

    mailer_factory = staticmethod(get_mailer)

    def get_mailer(self) -> Mailer:
        return self.mailer_factory()
