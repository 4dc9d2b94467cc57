from http import HTTPStatus

import pytest
from django.urls import reverse

from cxo_survey.notifications.mailer import Mailer
from cxo_survey.reports import services as reports
from cxo_survey.surveys import scoring
from cxo_survey.surveys import services as surveys
from cxo_survey.surveys.models import SurveyResponse
from tests import factories

pytestmark = pytest.mark.django_db


@pytest.fixture
def scored_survey(org, department, member):
    """Two submissions at opposite ends of the present-aspect scale."""
    other = factories.create_employee(
        "other@acme.test", organization=org, department=department
    )
    survey = factories.create_survey(org, title="Pulse")
    result = surveys.assign_survey_to_departments(survey, [department], mailer=Mailer())
    picks = {member.pk: 5, other.pk: 0}
    for assignment in result.created:
        index = picks[assignment.employee_id]
        surveys.submit_response(
            assignment,
            [
                {
                    "question_id": q.pk,
                    "present_option_index": index,
                    "future_option_index": index,
                }
                for q in survey.questions.all()
            ],
        )
    return survey


def test_survey_report_aggregates(scored_survey):
    report = reports.survey_report(scored_survey)

    assert report["survey"]["question_count"] == 2  # noqa: PLR2004
    assert len(report["responses"]) == 2  # noqa: PLR2004
    present = report["aggregates"]["present"]
    assert present["average_creativity_percentage"] == 50.0  # noqa: PLR2004
    assert present["average_morality_percentage"] == 50.0  # noqa: PLR2004
    assert present["quadrant_distribution"] == {
        scoring.QUADRANT_HOPE_IN_ACTION: 0,
        scoring.QUADRANT_UNBOUNDED_POWER: 1,
        scoring.QUADRANT_SAFE_STAGNATION: 1,
        scoring.QUADRANT_EXTRACTION_ENGINE: 0,
    }
    future = report["aggregates"]["future"]["quadrant_distribution"]
    assert future[scoring.QUADRANT_HOPE_IN_ACTION] == 1
    assert future[scoring.QUADRANT_EXTRACTION_ENGINE] == 1


def test_drafts_are_excluded(scored_survey, org, department):
    late = factories.create_employee(
        "late@acme.test", organization=org, department=department
    )
    surveys.backfill_assignments(late)
    assignment = late.assignments.get()
    surveys.save_draft(assignment, [])

    report = reports.survey_report(scored_survey)
    assert report["aggregates"]["response_count"] == 2  # noqa: PLR2004


def test_empty_aggregate():
    result = reports.aggregate([])
    assert result["response_count"] == 0
    assert result["present"]["average_creativity_percentage"] == 0.0


def test_organization_report_endpoint(as_user, admin, org, scored_survey):
    resp = as_user(admin).get(reverse("api:reports:organization", kwargs={"pk": org.pk}))
    assert resp.status_code == HTTPStatus.OK
    assert resp.data["organization"]["id"] == org.pk
    assert [s["survey"]["id"] for s in resp.data["surveys"]] == [scored_survey.pk]
    assert resp.data["aggregates"]["response_count"] == 2  # noqa: PLR2004


def test_survey_report_endpoint_ignores_templates(as_user, admin):
    template = factories.create_survey(None)
    resp = as_user(admin).get(
        reverse("api:reports:survey", kwargs={"pk": template.pk})
    )
    assert resp.status_code == HTTPStatus.NOT_FOUND


def test_response_detail_lists_option_texts(as_user, admin, member, scored_survey):
    response = SurveyResponse.objects.get(survey=scored_survey, employee=member)
    resp = as_user(admin).get(
        reverse("api:admin:response-detail", kwargs={"pk": response.pk})
    )
    assert resp.status_code == HTTPStatus.OK
    first = resp.data["answers"][0]
    assert first["present"]["option_text"] == "P5"
    assert first["present"]["creativity_marks"] == 5  # noqa: PLR2004
    assert first["future"]["option_text"] == "F5"
    assert resp.data["scores"]["present"]["quadrant"] == scoring.QUADRANT_UNBOUNDED_POWER


def test_reports_hidden_from_ceo(as_user, ceo, org):
    resp = as_user(ceo).get(reverse("api:reports:organization", kwargs={"pk": org.pk}))
    assert resp.status_code == HTTPStatus.FORBIDDEN
