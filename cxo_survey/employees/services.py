from __future__ import annotations

import logging

from django.db import transaction

from cxo_survey.audit.models import AuditLog
from cxo_survey.audit.utils import log_action
from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword

logger = logging.getLogger(__name__)


@transaction.atomic
def remove_employee(employee: Employee, *, actor: Employee, ip_address: str = "") -> None:
    """Delete an employee with their assignments, responses and invites."""
    snapshot = {
        "email": employee.email,
        "name": employee.name,
        "department_id": employee.department_id,
        "invite_status": employee.invite_status,
        "assignments": employee.assignments.count(),
        "responses": employee.survey_responses.count(),
    }
    pk = employee.pk
    InviteLog.objects.for_email(employee.email).filter(
        organization_id=employee.organization_id
    ).delete()
    OneTimePassword.objects.filter(email__iexact=employee.email).delete()
    # Assignments and responses cascade with the employee row.
    employee.delete()
    log_action(
        AuditLog.Action.EMPLOYEE_DELETE,
        actor=actor,
        message=f"Removed employee {snapshot['email']}",
        model_name="employees.Employee",
        record_id=pk,
        before=snapshot,
        ip_address=ip_address,
    )
    logger.info("Employee %s removed by %s", snapshot["email"], actor.email)
