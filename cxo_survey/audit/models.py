from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    """Who changed what, scoped to the tenant it happened in."""

    class Action(models.TextChoices):
        LOGIN = "login", _("Login")
        ORGANIZATION_CREATE = "organization.create", _("Organization created")
        INVITE_SUPERSEDED = "invite.superseded", _("Pending invite superseded")
        EMPLOYEE_DELETE = "employee.delete", _("Employee removed")
        SURVEY_DELETE = "survey.delete", _("Survey deleted")
        TICKET_UPDATE = "support.ticket.update", _("Support ticket updated")

    action = models.CharField(max_length=100, choices=Action.choices)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    # Tenant the change belongs to; empty for platform-level rows.
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    message = models.TextField(blank=True)
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["organization", "-created_at"], name="audit_org_created_idx"
            )
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        who = self.actor_id or "system"
        return f"[{self.created_at}] {who}: {self.action}"
