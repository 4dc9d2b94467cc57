import secrets
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


def default_invite_expiry():
    return timezone.now() + timedelta(days=settings.INVITE_TTL_DAYS)


def default_otp_expiry():
    return timezone.now() + timedelta(minutes=settings.OTP_TTL_MINUTES)


def generate_otp_code() -> str:
    return str(secrets.randbelow(900000) + 100000)


def generate_invite_token() -> str:
    return str(uuid.uuid4())


class InviteLogQuerySet(models.QuerySet):
    def live(self):
        """Invites that can still be clicked or accepted."""
        return self.filter(
            status__in=[InviteLog.Status.SENT, InviteLog.Status.CLICKED],
            expires_at__gt=timezone.now(),
        )

    def for_email(self, email: str):
        return self.filter(email__iexact=(email or "").strip())


class InviteLog(models.Model):
    class Role(models.TextChoices):
        CEO = "ceo", _("CEO")
        USER = "user", _("User")

    class Status(models.TextChoices):
        SENT = "sent", _("Sent")
        CLICKED = "clicked", _("Clicked")
        ACCEPTED = "accepted", _("Accepted")
        EXPIRED = "expired", _("Expired")

    email = models.EmailField(db_index=True)
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="invites",
    )
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invites",
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_invites",
    )
    role = models.CharField(max_length=10, choices=Role.choices)
    token = models.CharField(
        max_length=64, unique=True, default=generate_invite_token
    )
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.SENT
    )
    sent_at = models.DateTimeField(default=timezone.now)
    clicked_at = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(default=default_invite_expiry)

    objects = InviteLogQuerySet.as_manager()

    class Meta:
        ordering = ["-sent_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Invite({self.email}, {self.status})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    @property
    def is_usable(self) -> bool:
        return (
            self.status in {self.Status.SENT, self.Status.CLICKED}
            and not self.is_expired
        )


class OneTimePassword(models.Model):
    class Purpose(models.TextChoices):
        LOGIN = "login", _("Login")
        SIGNUP = "signup", _("Signup")
        RESET = "reset", _("Reset")

    email = models.EmailField(db_index=True)
    otp = models.CharField(max_length=6, default=generate_otp_code)
    purpose = models.CharField(
        max_length=10, choices=Purpose.choices, default=Purpose.LOGIN
    )
    expires_at = models.DateTimeField(default=default_otp_expiry)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"OTP({self.email}, {self.purpose})"
