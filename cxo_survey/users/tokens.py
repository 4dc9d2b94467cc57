from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth.signals import user_logged_in
from rest_framework_simplejwt.tokens import AccessToken

if TYPE_CHECKING:
    from cxo_survey.employees.models import Employee


def issue_access_token(employee: Employee) -> str:
    """Bearer token carrying the employee's role and organization."""
    token = AccessToken.for_user(employee)
    token["email"] = employee.email
    token["role"] = employee.role
    token["org_id"] = employee.organization_id
    return str(token)


def employee_summary(employee: Employee) -> dict:
    return {
        "id": employee.pk,
        "name": employee.name,
        "email": employee.email,
        "role": employee.role,
        "org_id": employee.organization_id,
        "department_id": employee.department_id,
    }


def complete_login(request, employee: Employee, *, method: str = "otp") -> dict:
    """Stamp last_login through the login signal and return the auth payload."""
    user_logged_in.send(
        sender=employee.__class__, request=request, user=employee, method=method
    )
    return {"token": issue_access_token(employee), "user": employee_summary(employee)}
