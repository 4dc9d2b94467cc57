from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction
from django.utils import timezone

from cxo_survey.employees.models import Employee
from cxo_survey.surveys import scoring
from cxo_survey.surveys.models import Aspect
from cxo_survey.surveys.models import Question
from cxo_survey.surveys.models import QuestionOption
from cxo_survey.surveys.models import ResponseAnswer
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.utils.exceptions import DomainError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Mapping
    from datetime import datetime

    from cxo_survey.notifications.mailer import Mailer
    from cxo_survey.org.models import Department
    from cxo_survey.org.models import Organization

logger = logging.getLogger(__name__)


# Survey content -------------------------------------------------------------
def write_questions(survey: Survey, questions: Iterable[Mapping[str, Any]]) -> None:
    """Replace the survey's questions and options with ``questions``.

    Option indexes are the positions within each aspect's list.
    """
    survey.questions.all().delete()
    for position, item in enumerate(questions):
        question = Question.objects.create(
            survey=survey,
            position=item.get("position", position),
            question_number=item.get("question_number", "") or "",
            text=item["text"],
            required=item.get("required", True),
        )
        options = []
        for aspect in (Aspect.PRESENT.value, Aspect.FUTURE.value):
            for index, opt in enumerate(item.get(f"{aspect}_options") or []):
                options.append(
                    QuestionOption(
                        question=question,
                        aspect=aspect,
                        position=index,
                        text=opt["text"],
                        creativity_marks=opt.get("creativity_marks", 0),
                        morality_marks=opt.get("morality_marks", 0),
                    )
                )
        QuestionOption.objects.bulk_create(options)


@transaction.atomic
def clone_survey(
    source: Survey,
    *,
    organization: Organization,
    created_by: Employee,
    due_date: datetime | None = None,
) -> Survey:
    """Deep-copy a template into an org-owned draft survey."""
    clone = Survey.objects.create(
        title=source.title,
        description=source.description,
        organization=organization,
        created_by=created_by,
        is_template=False,
        due_date=due_date,
        status=Survey.Status.DRAFT,
    )
    for question in source.questions.prefetch_related("options"):
        copy = Question.objects.create(
            survey=clone,
            position=question.position,
            question_number=question.question_number,
            text=question.text,
            required=question.required,
        )
        QuestionOption.objects.bulk_create(
            [
                QuestionOption(
                    question=copy,
                    aspect=opt.aspect,
                    position=opt.position,
                    text=opt.text,
                    creativity_marks=opt.creativity_marks,
                    morality_marks=opt.morality_marks,
                )
                for opt in question.options.all()
            ]
        )
    return clone


def build_option_table(survey: Survey) -> dict[int, dict[str, Any]]:
    table: dict[int, dict[str, Any]] = {}
    for question in survey.questions.prefetch_related("options"):
        entry: dict[str, Any] = {
            "number": question.question_number,
            Aspect.PRESENT.value: {},
            Aspect.FUTURE.value: {},
        }
        for opt in question.options.all():
            entry[opt.aspect][opt.position] = scoring.OptionMarks(
                creativity=opt.creativity_marks, morality=opt.morality_marks
            )
        table[question.pk] = entry
    return table


# Assignment fan-out ---------------------------------------------------------
@dataclass
class AssignmentResult:
    created: list[SurveyAssignment] = field(default_factory=list)
    skipped: list[Employee] = field(default_factory=list)
    notified: int = 0


def _department_members(department_ids: Iterable[int]):
    return Employee.objects.filter(
        department_id__in=list(department_ids),
        role=Employee.Role.USER,
    ).select_related("department")


def _create_missing_assignments(
    survey: Survey, members: Iterable[Employee]
) -> AssignmentResult:
    result = AssignmentResult()
    members = list(members)
    assigned = set(
        SurveyAssignment.objects.filter(
            survey=survey, employee__in=members
        ).values_list("employee_id", flat=True)
    )
    for member in members:
        if member.pk in assigned:
            result.skipped.append(member)
            continue
        result.created.append(
            SurveyAssignment.objects.create(
                survey=survey,
                organization_id=survey.organization_id,
                department_id=member.department_id,
                employee=member,
                due_date=survey.due_date,
            )
        )
        assigned.add(member.pk)
    return result


def _notify_assignees(
    survey: Survey, assignments: Iterable[SurveyAssignment], mailer: Mailer
) -> int:
    sent = 0
    for assignment in assignments:
        employee = assignment.employee
        if not employee.is_accepted:
            continue
        try:
            mailer.send_survey_assigned(
                employee.email, employee.name, survey.title, survey.due_date
            )
        except Exception:  # noqa: BLE001 - notification is best effort
            logger.warning(
                "Failed to notify %s about survey %s",
                employee.email,
                survey.pk,
                exc_info=True,
            )
        else:
            sent += 1
    return sent


def assign_survey_to_departments(
    survey: Survey, departments: Iterable[Department], *, mailer: Mailer
) -> AssignmentResult:
    with transaction.atomic():
        members = _department_members(d.pk for d in departments)
        result = _create_missing_assignments(survey, members)
        if survey.status != Survey.Status.ACTIVE:
            survey.status = Survey.Status.ACTIVE
            survey.save(update_fields=["status"])
    result.notified = _notify_assignees(survey, result.created, mailer)
    return result


@transaction.atomic
def sync_assignments(organization: Organization) -> int:
    """Give every user in an already-targeted department the active surveys."""
    created = 0
    surveys = Survey.objects.filter(
        organization=organization, is_template=False, status=Survey.Status.ACTIVE
    )
    for survey in surveys:
        department_ids = (
            SurveyAssignment.objects.filter(survey=survey)
            .exclude(department_id=None)
            .values_list("department_id", flat=True)
            .distinct()
        )
        members = _department_members(department_ids)
        created += len(_create_missing_assignments(survey, members).created)
    return created


def backfill_assignments(employee: Employee) -> int:
    """Assign a newly verified employee the surveys their department already has."""
    if employee.role != Employee.Role.USER:
        return 0
    if not (employee.department_id and employee.organization_id):
        return 0
    survey_ids = (
        SurveyAssignment.objects.filter(
            organization_id=employee.organization_id,
            department_id=employee.department_id,
        )
        .values_list("survey_id", flat=True)
        .distinct()
    )
    surveys = Survey.objects.filter(pk__in=survey_ids, status=Survey.Status.ACTIVE)
    created = 0
    for survey in surveys:
        _, was_created = SurveyAssignment.objects.get_or_create(
            survey=survey,
            employee=employee,
            defaults={
                "organization_id": employee.organization_id,
                "department_id": employee.department_id,
                "due_date": survey.due_date,
            },
        )
        created += int(was_created)
    if created:
        logger.info("Backfilled %s assignments for %s", created, employee.email)
    return created


# Responses ------------------------------------------------------------------
def _normalize_answers(
    table: Mapping[int, Any], answers: Iterable[Mapping[str, Any]]
) -> list[dict[str, Any]]:
    by_question: dict[int, dict[str, Any]] = {}
    for answer in answers:
        question_id = int(answer["question_id"])
        if question_id not in table:
            msg = f"Question {question_id} does not belong to this survey"
            raise DomainError(msg)
        by_question[question_id] = {
            "question_id": question_id,
            "present_option_index": answer.get("present_option_index"),
            "future_option_index": answer.get("future_option_index"),
        }
    return list(by_question.values())


def _lock_assignment(assignment: SurveyAssignment) -> SurveyAssignment:
    return SurveyAssignment.objects.select_for_update().get(pk=assignment.pk)


def _upsert_response(
    assignment: SurveyAssignment, values: dict[str, Any]
) -> SurveyResponse:
    response, _ = SurveyResponse.objects.update_or_create(
        survey_id=assignment.survey_id,
        employee_id=assignment.employee_id,
        defaults={
            "organization_id": assignment.organization_id,
            "department_id": assignment.department_id,
            **values,
        },
    )
    return response


@transaction.atomic
def save_draft(
    assignment: SurveyAssignment, answers: Iterable[Mapping[str, Any]]
) -> SurveyResponse:
    assignment = _lock_assignment(assignment)
    if SurveyResponse.objects.filter(
        survey_id=assignment.survey_id,
        employee_id=assignment.employee_id,
        is_draft=False,
    ).exists():
        msg = "Survey already submitted"
        raise DomainError(msg)

    table = build_option_table(assignment.survey)
    rows = _normalize_answers(table, answers)
    response = _upsert_response(assignment, {"is_draft": True})
    response.answers.all().delete()
    ResponseAnswer.objects.bulk_create(
        [
            ResponseAnswer(
                response=response,
                question_id=row["question_id"],
                question_number=table[row["question_id"]]["number"],
                present_option_index=row["present_option_index"],
                future_option_index=row["future_option_index"],
            )
            for row in rows
        ]
    )
    if assignment.status == SurveyAssignment.Status.PENDING:
        assignment.status = SurveyAssignment.Status.IN_PROGRESS
        assignment.save(update_fields=["status"])
    return response


@transaction.atomic
def submit_response(
    assignment: SurveyAssignment, answers: Iterable[Mapping[str, Any]]
) -> SurveyResponse:
    """Score and store the single response for this assignment."""
    assignment = _lock_assignment(assignment)
    table = build_option_table(assignment.survey)
    card = scoring.score_answers(table, _normalize_answers(table, answers))

    values: dict[str, Any] = {"is_draft": False, "submitted_at": timezone.now()}
    for aspect_name in ("present", "future"):
        aspect = getattr(card, aspect_name)
        values.update(
            {
                f"{aspect_name}_creativity_total": aspect.creativity_total,
                f"{aspect_name}_morality_total": aspect.morality_total,
                f"{aspect_name}_creativity_percentage": aspect.creativity_percentage,
                f"{aspect_name}_morality_percentage": aspect.morality_percentage,
                f"{aspect_name}_creativity_band": aspect.creativity_band,
                f"{aspect_name}_morality_band": aspect.morality_band,
            }
        )
    response = _upsert_response(assignment, values)
    response.answers.all().delete()
    ResponseAnswer.objects.bulk_create(
        [
            ResponseAnswer(
                response=response,
                question_id=ans.question_id,
                question_number=ans.question_number,
                present_option_index=ans.present_option_index,
                present_creativity_marks=ans.present.creativity,
                present_morality_marks=ans.present.morality,
                future_option_index=ans.future_option_index,
                future_creativity_marks=ans.future.creativity,
                future_morality_marks=ans.future.morality,
            )
            for ans in card.answers
        ]
    )

    assignment.status = SurveyAssignment.Status.COMPLETED
    assignment.completed_at = timezone.now()
    assignment.save(update_fields=["status", "completed_at"])
    return response


def response_scorecard(response: SurveyResponse) -> scoring.ScoreCard:
    """Recompute report scores from a response's stored marks."""
    question_ids = list(
        Question.objects.filter(survey_id=response.survey_id).values_list(
            "id", flat=True
        )
    )
    stored = response.answers.values(
        "question_id",
        "present_creativity_marks",
        "present_morality_marks",
        "future_creativity_marks",
        "future_morality_marks",
    )
    return scoring.score_stored_marks(question_ids, stored)
