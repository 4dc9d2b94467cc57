from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from django.utils import timezone

from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import InviteLog
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.services import write_questions

if TYPE_CHECKING:
    from collections.abc import Sequence

TEST_PASSWORD = "TestPass123!"  # noqa: S105


def create_organization(
    name: str = "Acme", *, ceo_email: str = "ceo@acme.test", active: bool = True
) -> Organization:
    return Organization.objects.create(
        name=name,
        ceo_email=ceo_email,
        status=Organization.Status.ACTIVE if active else Organization.Status.PENDING,
    )


def create_department(org: Organization, name: str = "Engineering") -> Department:
    return Department.objects.create(organization=org, name=name)


def create_employee(  # noqa: PLR0913
    email: str,
    *,
    role: str = Employee.Role.USER,
    organization: Organization | None = None,
    department: Department | None = None,
    accepted: bool = True,
    name: str = "",
    password: str | None = TEST_PASSWORD,
) -> Employee:
    employee = Employee.objects.create_user(
        email=email,
        password=password,
        name=name or email.split("@", 1)[0].title(),
        role=role,
        organization=organization,
        department=department,
        invite_status=Employee.InviteStatus.ACCEPTED
        if accepted
        else Employee.InviteStatus.PENDING,
        accepted_at=timezone.now() if accepted else None,
    )
    if role == Employee.Role.CEO and organization and accepted:
        organization.ceo = employee
        organization.save(update_fields=["ceo"])
    return employee


def create_admin(email: str = "admin@platform.test") -> Employee:
    return Employee.objects.create_superuser(email=email, password=TEST_PASSWORD)


def create_invite(  # noqa: PLR0913
    email: str,
    *,
    organization: Organization | None,
    department: Department | None = None,
    role: str = InviteLog.Role.USER,
    status: str = InviteLog.Status.SENT,
    expires_in: timedelta = timedelta(days=7),
) -> InviteLog:
    return InviteLog.objects.create(
        email=email,
        organization=organization,
        department=department,
        role=role,
        status=status,
        expires_at=timezone.now() + expires_in,
    )


def option(text: str, creativity: int, morality: int) -> dict:
    return {"text": text, "creativity_marks": creativity, "morality_marks": morality}


def question_payload(text: str, number: str = "") -> dict:
    """A question whose option index equals the marks it carries (0..5)."""
    return {
        "text": text,
        "question_number": number,
        "present_options": [option(f"P{i}", i, 5 - i) for i in range(6)],
        "future_options": [option(f"F{i}", i, i) for i in range(6)],
    }


def create_survey(
    organization: Organization | None,
    *,
    title: str = "Leadership pulse",
    questions: Sequence[dict] | None = None,
    question_count: int = 2,
    status: str = Survey.Status.DRAFT,
    created_by: Employee | None = None,
) -> Survey:
    survey = Survey.objects.create(
        title=title,
        description=f"{title} description",
        organization=organization,
        is_template=organization is None,
        status=status,
        created_by=created_by,
    )
    if questions is None:
        questions = [
            question_payload(f"Question {i + 1}", f"Q{i + 1}")
            for i in range(question_count)
        ]
    write_questions(survey, questions)
    return survey
