from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from .managers import EmployeeManager


class Employee(AbstractUser):
    """
    Platform account. Email is the login identifier; role, organization and
    department are fixed when the invite is issued.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        CEO = "ceo", _("CEO")
        USER = "user", _("User")

    class InviteStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")

    # First and last name do not cover name patterns around the globe
    name = models.CharField(_("Full Name"), blank=True, max_length=255)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]
    username = None  # type: ignore[assignment]
    email = models.EmailField(_("email address"), unique=True)
    google_id = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="employees",
    )
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )
    invite_token = models.CharField(max_length=64, blank=True, default="")
    invite_status = models.CharField(
        max_length=10,
        choices=InviteStatus.choices,
        default=InviteStatus.PENDING,
    )
    accepted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = EmployeeManager()

    class Meta:
        ordering = ["email"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def get_full_name(self) -> str:
        return self.name or self.email

    def get_short_name(self) -> str:
        return self.name or self.email.split("@", 1)[0]

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    @property
    def is_ceo(self) -> bool:
        return self.role == self.Role.CEO

    @property
    def is_accepted(self) -> bool:
        return self.invite_status == self.InviteStatus.ACCEPTED
