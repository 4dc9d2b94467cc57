from django.conf import settings
from django.db import models
from django.db import transaction
from django.utils.translation import gettext_lazy as _


class TicketSequence(models.Model):
    """Named monotonic counter; rows are locked while a value is drawn."""

    key = models.CharField(max_length=50, unique=True)
    next_value = models.PositiveBigIntegerField(default=1)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.key}={self.next_value}"

    @classmethod
    def draw(cls, key: str) -> int:
        with transaction.atomic():
            seq, _ = cls.objects.select_for_update().get_or_create(key=key)
            value = seq.next_value
            seq.next_value = value + 1
            seq.save(update_fields=["next_value"])
        return value


class SupportTicket(models.Model):
    class Category(models.TextChoices):
        TECHNICAL = "technical", _("Technical")
        SURVEY = "survey", _("Survey")
        ACCOUNT = "account", _("Account")
        BILLING = "billing", _("Billing")
        OTHER = "other", _("Other")

    class Priority(models.TextChoices):
        LOW = "low", _("Low")
        MEDIUM = "medium", _("Medium")
        HIGH = "high", _("High")
        URGENT = "urgent", _("Urgent")

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        IN_PROGRESS = "in-progress", _("In progress")
        RESOLVED = "resolved", _("Resolved")
        CLOSED = "closed", _("Closed")

    ticket_number = models.CharField(max_length=20, unique=True)
    subject = models.CharField(max_length=255)
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.OTHER
    )
    priority = models.CharField(
        max_length=10, choices=Priority.choices, default=Priority.MEDIUM
    )
    status = models.CharField(
        max_length=15, choices=Status.choices, default=Status.OPEN
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="support_tickets",
    )
    created_by_role = models.CharField(max_length=10)
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="support_tickets",
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_tickets",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.ticket_number} {self.subject}"


class TicketMessage(models.Model):
    ticket = models.ForeignKey(
        SupportTicket, on_delete=models.CASCADE, related_name="messages"
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ticket_messages",
    )
    sender_role = models.CharField(max_length=10)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Message({self.ticket_id})"
