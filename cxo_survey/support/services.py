from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from django.utils import timezone

from cxo_survey.audit.models import AuditLog
from cxo_survey.audit.utils import log_action
from cxo_survey.support.models import SupportTicket
from cxo_survey.support.models import TicketMessage
from cxo_survey.support.models import TicketSequence

if TYPE_CHECKING:
    from cxo_survey.employees.models import Employee

logger = logging.getLogger(__name__)

TICKET_SEQUENCE_KEY = "support_ticket"
TICKET_NUMBER_FORMAT = "TKT-{:06d}"

_CLOSING_STATUSES = {SupportTicket.Status.RESOLVED, SupportTicket.Status.CLOSED}


def next_ticket_number() -> str:
    return TICKET_NUMBER_FORMAT.format(TicketSequence.draw(TICKET_SEQUENCE_KEY))


@transaction.atomic
def open_ticket(
    author: Employee,
    *,
    subject: str,
    message: str,
    category: str = SupportTicket.Category.OTHER,
    priority: str = SupportTicket.Priority.MEDIUM,
) -> SupportTicket:
    ticket = SupportTicket.objects.create(
        ticket_number=next_ticket_number(),
        subject=subject,
        category=category,
        priority=priority,
        created_by=author,
        created_by_role=author.role,
        organization=None if author.is_admin else author.organization,
    )
    TicketMessage.objects.create(
        ticket=ticket, sender=author, sender_role=author.role, message=message
    )
    logger.info("Ticket %s opened by %s", ticket.ticket_number, author.email)
    return ticket


@transaction.atomic
def add_message(ticket: SupportTicket, author: Employee, message: str) -> TicketMessage:
    reply = TicketMessage.objects.create(
        ticket=ticket, sender=author, sender_role=author.role, message=message
    )
    update_fields = ["updated_at"]
    if author.is_admin and ticket.status == SupportTicket.Status.OPEN:
        ticket.status = SupportTicket.Status.IN_PROGRESS
        update_fields.append("status")
    ticket.save(update_fields=update_fields)
    return reply


def update_ticket(
    ticket: SupportTicket,
    changes: dict[str, Any],
    *,
    actor: Employee,
    ip_address: str = "",
) -> SupportTicket:
    """Apply admin triage changes; closing stamps ``resolved_at``, reopening clears it."""
    before = {
        "status": ticket.status,
        "priority": ticket.priority,
        "assigned_to": ticket.assigned_to_id,
    }
    for name in ("status", "priority", "assigned_to"):
        if name in changes:
            setattr(ticket, name, changes[name])
    if "status" in changes:
        ticket.resolved_at = (
            timezone.now() if changes["status"] in _CLOSING_STATUSES else None
        )
    ticket.save()
    log_action(
        AuditLog.Action.TICKET_UPDATE,
        actor=actor,
        organization=ticket.organization,
        message=f"Updated ticket {ticket.ticket_number}",
        model_name="support.SupportTicket",
        record_id=ticket.pk,
        before=before,
        after={
            "status": ticket.status,
            "priority": ticket.priority,
            "assigned_to": ticket.assigned_to_id,
        },
        ip_address=ip_address,
    )
    return ticket


def ticket_stats() -> dict[str, Any]:
    active = [SupportTicket.Status.OPEN, SupportTicket.Status.IN_PROGRESS]
    agg = SupportTicket.objects.aggregate(
        total=Count("id"),
        open=Count("id", filter=Q(status=SupportTicket.Status.OPEN)),
        in_progress=Count("id", filter=Q(status=SupportTicket.Status.IN_PROGRESS)),
        resolved=Count("id", filter=Q(status=SupportTicket.Status.RESOLVED)),
        closed=Count("id", filter=Q(status=SupportTicket.Status.CLOSED)),
        urgent=Count(
            "id",
            filter=Q(priority=SupportTicket.Priority.URGENT, status__in=active),
        ),
    )

    def grouped(field: str) -> dict[str, int]:
        rows = SupportTicket.objects.values(field).annotate(count=Count("id"))
        return {row[field]: row["count"] for row in rows.order_by(field)}

    return {
        **agg,
        "by_category": grouped("category"),
        "by_priority": grouped("priority"),
    }
