"""Read-side aggregations shared by dashboards, analytics and admin views."""

from __future__ import annotations

from collections import Counter
from datetime import timedelta
from typing import TYPE_CHECKING
from typing import Any

from django.db.models import Count
from django.db.models import Q
from django.utils import timezone

from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import InviteLog
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization
from cxo_survey.surveys.models import Aspect
from cxo_survey.surveys.models import ResponseAnswer
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.surveys.scoring import completion_rate

if TYPE_CHECKING:
    from django.db.models import QuerySet

_COMPLETED = Q(status=SurveyAssignment.Status.COMPLETED)


def assignment_counts(qs: QuerySet[SurveyAssignment]) -> dict[str, int]:
    agg = qs.aggregate(
        total=Count("id"),
        completed=Count("id", filter=_COMPLETED),
        in_progress=Count(
            "id", filter=Q(status=SurveyAssignment.Status.IN_PROGRESS)
        ),
    )
    total = agg["total"] or 0
    completed = agg["completed"] or 0
    return {
        "total": total,
        "completed": completed,
        "in_progress": agg["in_progress"] or 0,
        "pending": total - completed - (agg["in_progress"] or 0),
        "completion_rate": completion_rate(completed, total),
    }


def members(org: Organization) -> QuerySet[Employee]:
    return Employee.objects.filter(organization=org, role=Employee.Role.USER)


def org_summary_stats(org: Organization) -> dict[str, int]:
    assignments = assignment_counts(SurveyAssignment.objects.filter(organization=org))
    return {
        "employees": members(org).count(),
        "departments": org.departments.count(),
        "surveys": org.surveys.filter(is_template=False).count(),
        "completion_rate": assignments["completion_rate"],
    }


def org_detail_stats(org: Organization) -> dict[str, int]:
    people = members(org)
    assignments = assignment_counts(SurveyAssignment.objects.filter(organization=org))
    return {
        "total_employees": people.count(),
        "active_employees": people.filter(
            invite_status=Employee.InviteStatus.ACCEPTED
        ).count(),
        "pending_employees": people.filter(
            invite_status=Employee.InviteStatus.PENDING
        ).count(),
        "total_departments": org.departments.count(),
        "total_surveys": org.surveys.filter(is_template=False).count(),
        "total_assignments": assignments["total"],
        "completed_assignments": assignments["completed"],
        "pending_assignments": assignments["total"] - assignments["completed"],
        "completion_rate": assignments["completion_rate"],
    }


def department_rows(org: Organization) -> list[dict[str, Any]]:
    """Per-department headcount and assignment completion."""
    departments = Department.objects.filter(organization=org).annotate(
        employee_count=Count(
            "employees", filter=Q(employees__role=Employee.Role.USER), distinct=True
        ),
        active_count=Count(
            "employees",
            filter=Q(
                employees__role=Employee.Role.USER,
                employees__invite_status=Employee.InviteStatus.ACCEPTED,
            ),
            distinct=True,
        ),
    )
    rows = []
    for dept in departments:
        counts = assignment_counts(SurveyAssignment.objects.filter(department=dept))
        rows.append(
            {
                "id": dept.pk,
                "name": dept.name,
                "employee_count": dept.employee_count,
                "active_count": dept.active_count,
                "pending_count": dept.employee_count - dept.active_count,
                "assigned": counts["total"],
                "completed": counts["completed"],
                "completion_rate": counts["completion_rate"],
            }
        )
    return rows


def survey_rows(org: Organization) -> list[dict[str, Any]]:
    surveys = Survey.objects.filter(organization=org, is_template=False)
    rows = []
    for survey in surveys:
        counts = assignment_counts(survey.assignments.all())
        rows.append(
            {
                "id": survey.pk,
                "title": survey.title,
                "status": survey.status,
                "due_date": survey.due_date,
                "assigned": counts["total"],
                "completed": counts["completed"],
                "completion_rate": counts["completion_rate"],
            }
        )
    return rows


def completion_trend(org: Organization | None = None, days: int = 7) -> list[dict]:
    """Submitted responses per local calendar day, oldest day first."""
    today = timezone.localdate()
    first_day = today - timedelta(days=days - 1)
    qs = SurveyResponse.objects.filter(is_draft=False, submitted_at__isnull=False)
    if org is not None:
        qs = qs.filter(organization=org)
    buckets = {first_day + timedelta(days=i): 0 for i in range(days)}
    for submitted_at in qs.filter(
        submitted_at__date__gte=first_day - timedelta(days=1)
    ).values_list("submitted_at", flat=True):
        day = timezone.localtime(submitted_at).date()
        if day in buckets:
            buckets[day] += 1
    return [{"date": day.isoformat(), "count": count} for day, count in buckets.items()]


def global_overview() -> dict[str, Any]:
    orgs = Organization.objects.all()
    assignments = assignment_counts(SurveyAssignment.objects.all())
    return {
        "total_organizations": orgs.count(),
        "active_organizations": orgs.filter(
            status=Organization.Status.ACTIVE
        ).count(),
        "total_employees": Employee.objects.exclude(
            role=Employee.Role.ADMIN
        ).count(),
        "total_templates": Survey.objects.filter(is_template=True).count(),
        "total_surveys": Survey.objects.filter(is_template=False).count(),
        "pending_invites": InviteLog.objects.filter(
            status__in=[InviteLog.Status.SENT, InviteLog.Status.CLICKED]
        ).count(),
        "total_responses": SurveyResponse.objects.filter(is_draft=False).count(),
        "total_assignments": assignments["total"],
        "completed_assignments": assignments["completed"],
        "completion_rate": assignments["completion_rate"],
    }


def _option_distribution(question, counts: Counter, aspect: str) -> list[dict]:
    return [
        {
            "index": opt.position,
            "text": opt.text,
            "count": counts.get((question.pk, opt.position), 0),
        }
        for opt in question.options.all()
        if opt.aspect == aspect
    ]


def survey_analytics(survey: Survey) -> dict[str, Any]:
    """Completion and answer distribution for one survey; never exposes marks."""
    assignments = survey.assignments.select_related("employee", "department")
    counts = assignment_counts(survey.assignments.all())

    by_department: dict[str, dict[str, int]] = {}
    for assignment in assignments:
        name = assignment.department.name if assignment.department else "Unassigned"
        bucket = by_department.setdefault(name, {"total": 0, "completed": 0})
        bucket["total"] += 1
        if assignment.status == SurveyAssignment.Status.COMPLETED:
            bucket["completed"] += 1
    for bucket in by_department.values():
        bucket["completion_rate"] = completion_rate(bucket["completed"], bucket["total"])

    answers = ResponseAnswer.objects.filter(
        response__survey=survey, response__is_draft=False
    )
    present = Counter(
        answers.exclude(present_option_index=None).values_list(
            "question_id", "present_option_index"
        )
    )
    future = Counter(
        answers.exclude(future_option_index=None).values_list(
            "question_id", "future_option_index"
        )
    )
    questions = [
        {
            "id": q.pk,
            "question_number": q.question_number,
            "text": q.text,
            "present": _option_distribution(q, present, Aspect.PRESENT.value),
            "future": _option_distribution(q, future, Aspect.FUTURE.value),
        }
        for q in survey.questions.prefetch_related("options")
    ]

    return {
        "survey": {
            "id": survey.pk,
            "title": survey.title,
            "description": survey.description,
            "status": survey.status,
        },
        "total_assigned": counts["total"],
        "completed": counts["completed"],
        "pending": counts["total"] - counts["completed"],
        "completion_rate": counts["completion_rate"],
        "by_department": by_department,
        "question_analytics": questions,
        "employees": [
            {
                "id": a.employee_id,
                "name": a.employee.name,
                "email": a.employee.email,
                "department": a.department.name if a.department else None,
                "status": a.status,
                "completed_at": a.completed_at,
            }
            for a in assignments
        ],
    }
