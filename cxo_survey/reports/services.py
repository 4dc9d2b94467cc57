"""Score reports over submitted responses.

Everything here is recomputed per request from stored per-answer marks; the
totals stored on the response at submission time are only used for the
per-employee mark listings.
"""

from __future__ import annotations

from collections import Counter
from decimal import Decimal
from typing import TYPE_CHECKING
from typing import Any

from cxo_survey.employees.models import Employee
from cxo_survey.surveys import scoring
from cxo_survey.surveys.models import Aspect
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.surveys.services import response_scorecard

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cxo_survey.org.models import Organization

ASPECTS = (Aspect.PRESENT.value, Aspect.FUTURE.value)
_METRICS = (
    "creativity_percentage",
    "morality_percentage",
    "creativity_total",
    "morality_total",
)


def submitted(qs=None):
    qs = SurveyResponse.objects.all() if qs is None else qs
    return qs.filter(is_draft=False).select_related(
        "employee", "department", "survey"
    )


def stored_scores(response: SurveyResponse) -> dict[str, Any]:
    """Scores as they were computed when the response was submitted."""
    data: dict[str, Any] = {}
    for aspect in ASPECTS:
        c_pct = getattr(response, f"{aspect}_creativity_percentage")
        m_pct = getattr(response, f"{aspect}_morality_percentage")
        data[aspect] = {
            "creativity_total": getattr(response, f"{aspect}_creativity_total"),
            "morality_total": getattr(response, f"{aspect}_morality_total"),
            "creativity_percentage": float(c_pct),
            "morality_percentage": float(m_pct),
            "creativity_band": getattr(response, f"{aspect}_creativity_band"),
            "morality_band": getattr(response, f"{aspect}_morality_band"),
            "quadrant": scoring.quadrant(c_pct, m_pct),
        }
    return data


def response_row(response: SurveyResponse) -> dict[str, Any]:
    card = response_scorecard(response)
    employee = response.employee
    return {
        "response_id": response.pk,
        "survey_id": response.survey_id,
        "survey_title": response.survey.title,
        "employee": {"id": employee.pk, "name": employee.name, "email": employee.email},
        "department": response.department.name if response.department else None,
        "submitted_at": response.submitted_at,
        **card.as_dict(),
    }


def _mean(values: list[float]) -> float:
    if not values:
        return 0.0
    return float(scoring.round_one_decimal(Decimal(str(sum(values))) / len(values)))


def aggregate(rows: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Average percentages and totals plus quadrant counts per aspect."""
    rows = list(rows)
    result: dict[str, Any] = {"response_count": len(rows)}
    for aspect in ASPECTS:
        averages = {
            f"average_{metric}": _mean([row[aspect][metric] for row in rows])
            for metric in _METRICS
        }
        quadrants = Counter(row[aspect]["quadrant"] for row in rows)
        result[aspect] = {
            **averages,
            "quadrant_distribution": {q: quadrants.get(q, 0) for q in scoring.QUADRANTS},
        }
    return result


def survey_report(survey: Survey) -> dict[str, Any]:
    rows = [response_row(r) for r in submitted(survey.responses.all())]
    return {
        "survey": {
            "id": survey.pk,
            "title": survey.title,
            "organization_id": survey.organization_id,
            "question_count": survey.questions.count(),
        },
        "responses": rows,
        "aggregates": aggregate(rows),
    }


def organization_report(org: Organization) -> dict[str, Any]:
    surveys = []
    all_rows: list[dict[str, Any]] = []
    for survey in Survey.objects.filter(organization=org, is_template=False):
        report = survey_report(survey)
        all_rows.extend(report["responses"])
        surveys.append(report)
    return {
        "organization": {"id": org.pk, "name": org.name, "status": org.status},
        "surveys": surveys,
        "aggregates": aggregate(all_rows),
    }


def _result_entry(response: SurveyResponse) -> dict[str, Any]:
    return {
        "response_id": response.pk,
        "survey_id": response.survey_id,
        "survey_title": response.survey.title,
        "submitted_at": response.submitted_at,
        **stored_scores(response),
    }


def employee_results(employee: Employee) -> dict[str, Any]:
    """Per-survey results for one employee with summary totals and averages."""
    results = [
        _result_entry(r) for r in submitted(employee.survey_responses.all())
    ]
    summary: dict[str, Any] = {"total_surveys": len(results)}
    for aspect in ASPECTS:
        for dimension in ("creativity", "morality"):
            summary[f"{aspect}_{dimension}_total"] = sum(
                r[aspect][f"{dimension}_total"] for r in results
            )
            summary[f"average_{aspect}_{dimension}_percentage"] = _mean(
                [r[aspect][f"{dimension}_percentage"] for r in results]
            )
    return {"results": results, "summary": summary}


def organization_user_marks(org: Organization) -> list[dict[str, Any]]:
    rows = []
    people = org.employees.filter(role=Employee.Role.USER).select_related("department")
    for employee in people:
        rows.append(
            {
                "id": employee.pk,
                "name": employee.name,
                "email": employee.email,
                "department": employee.department.name if employee.department else None,
                "invite_status": employee.invite_status,
                "responses": [
                    _result_entry(r)
                    for r in submitted(employee.survey_responses.all())
                ],
            }
        )
    return rows


def _option_text(options: dict, aspect: str, index: int | None) -> str | None:
    if index is None:
        return None
    option = options.get((aspect, index))
    return option.text if option else None


def response_detail(response: SurveyResponse) -> dict[str, Any]:
    answers = []
    for answer in response.answers.select_related("question").prefetch_related(
        "question__options"
    ):
        options = {(o.aspect, o.position): o for o in answer.question.options.all()}
        answers.append(
            {
                "question_id": answer.question_id,
                "question_number": answer.question_number,
                "question_text": answer.question.text,
                "present": {
                    "option_index": answer.present_option_index,
                    "option_text": _option_text(
                        options, Aspect.PRESENT.value, answer.present_option_index
                    ),
                    "creativity_marks": answer.present_creativity_marks,
                    "morality_marks": answer.present_morality_marks,
                },
                "future": {
                    "option_index": answer.future_option_index,
                    "option_text": _option_text(
                        options, Aspect.FUTURE.value, answer.future_option_index
                    ),
                    "creativity_marks": answer.future_creativity_marks,
                    "morality_marks": answer.future_morality_marks,
                },
            }
        )
    employee = response.employee
    return {
        "id": response.pk,
        "survey": {"id": response.survey_id, "title": response.survey.title},
        "employee": {
            "id": employee.pk,
            "name": employee.name,
            "email": employee.email,
            "department": response.department.name if response.department else None,
        },
        "organization_id": response.organization_id,
        "is_draft": response.is_draft,
        "submitted_at": response.submitted_at,
        "scores": stored_scores(response),
        "answers": answers,
    }
