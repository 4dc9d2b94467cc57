from http import HTTPStatus

import pytest
from django.urls import reverse

from cxo_survey.audit.models import AuditLog
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from tests import factories

pytestmark = pytest.mark.django_db


@pytest.fixture
def survey(org, ceo):
    return factories.create_survey(org, created_by=ceo)


def _assign(client, survey, *departments):
    return client.post(
        reverse("api:ceo:survey-assign", kwargs={"pk": survey.pk}),
        {"department_ids": [d.pk for d in departments]},
        format="json",
    )


def _answers(survey, index=3):
    return {
        "answers": [
            {
                "question_id": q.pk,
                "present_option_index": index,
                "future_option_index": index,
            }
            for q in survey.questions.all()
        ]
    }


def _walk(data):
    if isinstance(data, dict):
        yield from data
        for value in data.values():
            yield from _walk(value)
    elif isinstance(data, list):
        for item in data:
            yield from _walk(item)


class TestAdminTemplates:
    def test_admin_creates_nested_template(self, as_user, admin):
        payload = {
            "title": "Leadership",
            "description": "Global template",
            "questions": [factories.question_payload("Vision?", "Q1")],
        }
        resp = as_user(admin).post(
            reverse("api:admin:template-create"), payload, format="json"
        )
        assert resp.status_code == HTTPStatus.CREATED, resp.data
        survey = Survey.objects.get(pk=resp.data["id"])
        assert survey.is_template is True
        assert survey.organization is None
        assert resp.data["questions"][0]["present_options"][5]["creativity_marks"] == 5  # noqa: PLR2004

    def test_marks_above_ceiling_rejected(self, as_user, admin):
        question = factories.question_payload("Vision?")
        question["present_options"][0]["creativity_marks"] = 6
        resp = as_user(admin).post(
            reverse("api:admin:template-create"),
            {"title": "Bad", "questions": [question]},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST

    def test_update_replaces_questions(self, as_user, admin):
        template = factories.create_survey(None, question_count=3)
        resp = as_user(admin).patch(
            reverse("api:admin:template-detail", kwargs={"pk": template.pk}),
            {"questions": [factories.question_payload("Only one")]},
            format="json",
        )
        assert resp.status_code == HTTPStatus.OK, resp.data
        assert template.questions.count() == 1


class TestCEOSurveys:
    def test_create_and_list(self, as_user, ceo, department):
        client = as_user(ceo)
        resp = client.post(
            reverse("api:ceo:survey-list"),
            {"title": "Pulse", "questions": [factories.question_payload("Q?")]},
            format="json",
        )
        assert resp.status_code == HTTPStatus.CREATED, resp.data
        assert resp.data["organization_id"] == ceo.organization_id

        listing = client.get(reverse("api:ceo:survey-list"))
        assert listing.status_code == HTTPStatus.OK
        assert listing.data[0]["title"] == "Pulse"
        assert listing.data[0]["total_assigned"] == 0

    def test_from_template(self, as_user, ceo):
        template = factories.create_survey(None, title="Global")
        resp = as_user(ceo).post(
            reverse("api:ceo:survey-from-template"),
            {"template_id": template.pk},
            format="json",
        )
        assert resp.status_code == HTTPStatus.CREATED
        assert resp.data["is_template"] is False
        assert len(resp.data["questions"]) == template.questions.count()

    def test_from_unknown_template_is_404(self, as_user, ceo, survey):
        resp = as_user(ceo).post(
            reverse("api:ceo:survey-from-template"),
            {"template_id": survey.pk},
            format="json",
        )
        assert resp.status_code == HTTPStatus.NOT_FOUND

    def test_assign_reports_created_and_skipped(
        self, as_user, ceo, survey, member, department, mailoutbox
    ):
        client = as_user(ceo)
        first = _assign(client, survey, department)
        assert first.status_code == HTTPStatus.OK, first.data
        assert len(first.data["assignments"]) == 1
        assert first.data["notified"] == 1
        assert mailoutbox[0].to == [member.email]

        second = _assign(client, survey, department)
        assert second.data["assignments"] == []
        assert second.data["skipped"][0]["email"] == member.email

        listing = client.get(reverse("api:ceo:survey-list"))
        assert listing.data[0]["assigned_departments"] == [
            {"id": department.pk, "name": department.name}
        ]

    def test_sync_assignments(self, as_user, ceo, survey, org, department, member):
        client = as_user(ceo)
        _assign(client, survey, department)
        factories.create_employee(
            "second@acme.test", organization=org, department=department
        )
        resp = client.post(reverse("api:ceo:survey-sync-assignments"))
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["created"] == 1

    def test_delete_cascades_and_audits(
        self, as_user, ceo, survey, department, member
    ):
        client = as_user(ceo)
        _assign(client, survey, department)
        resp = client.delete(reverse("api:ceo:survey-detail", kwargs={"pk": survey.pk}))
        assert resp.status_code == HTTPStatus.OK
        assert not SurveyAssignment.objects.exists()
        log = AuditLog.objects.get(action="survey.delete")
        assert log.before["assignments"] == 1

    def test_analytics_hide_individual_marks(
        self, as_user, ceo, survey, department, member
    ):
        _assign(as_user(ceo), survey, department)
        as_user(member).post(
            reverse("api:user:survey-submit", kwargs={"pk": survey.pk}),
            _answers(survey),
            format="json",
        )
        resp = as_user(ceo).get(
            reverse("api:ceo:survey-analytics", kwargs={"pk": survey.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["completed"] == 1
        assert resp.data["completion_rate"] == 100  # noqa: PLR2004
        assert resp.data["by_department"][department.name]["completed"] == 1
        keys = set(_walk(resp.data["employees"]))
        assert not any("marks" in k or "percentage" in k for k in keys)


class TestRespondent:
    @pytest.fixture
    def assigned(self, as_user, ceo, survey, department, member):
        _assign(as_user(ceo), survey, department)
        return survey

    def test_dashboard_lists_pending(self, as_user, member, assigned):
        resp = as_user(member).get(reverse("api:user:dashboard"))
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["stats"]["pending"] == 1
        assert resp.data["pending"][0]["survey"]["id"] == assigned.pk

    def test_detail_hides_marks(self, as_user, member, assigned):
        resp = as_user(member).get(
            reverse("api:user:survey-detail", kwargs={"pk": assigned.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        option = resp.data["survey"]["questions"][0]["present_options"][0]
        assert set(option) == {"index", "text"}
        assert resp.data["draft"] is None

    def test_unassigned_survey_is_404(self, as_user, org, member):
        other = factories.create_survey(org, title="Not yours")
        resp = as_user(member).get(
            reverse("api:user:survey-detail", kwargs={"pk": other.pk})
        )
        assert resp.status_code == HTTPStatus.NOT_FOUND

    def test_draft_then_submit(self, as_user, member, assigned):
        client = as_user(member)
        draft = client.post(
            reverse("api:user:survey-draft", kwargs={"pk": assigned.pk}),
            _answers(assigned, 1),
            format="json",
        )
        assert draft.status_code == HTTPStatus.OK, draft.data
        detail = client.get(
            reverse("api:user:survey-detail", kwargs={"pk": assigned.pk})
        )
        assert len(detail.data["draft"]["answers"]) == assigned.questions.count()

        submit = client.post(
            reverse("api:user:survey-submit", kwargs={"pk": assigned.pk}),
            _answers(assigned),
            format="json",
        )
        assert submit.status_code == HTTPStatus.OK
        assert submit.data == {"message": "Survey submitted successfully"}

        again = client.post(
            reverse("api:user:survey-draft", kwargs={"pk": assigned.pk}),
            _answers(assigned, 1),
            format="json",
        )
        assert again.status_code == HTTPStatus.BAD_REQUEST
        assert SurveyResponse.objects.filter(survey=assigned).count() == 1

        history = client.get(reverse("api:user:history"))
        assert history.data[0]["survey"]["id"] == assigned.pk
        assert not any("marks" in k for k in _walk(history.data))

    def test_resubmission_overwrites_response(self, as_user, member, assigned):
        client = as_user(member)
        url = reverse("api:user:survey-submit", kwargs={"pk": assigned.pk})
        for index in (1, 5):
            resp = client.post(url, _answers(assigned, index), format="json")
            assert resp.status_code == HTTPStatus.OK

        response = SurveyResponse.objects.get(survey=assigned)
        assert response.present_creativity_percentage == 100  # noqa: PLR2004
        assert response.answers.count() == assigned.questions.count()

    def test_submit_unknown_question_is_400(self, as_user, member, assigned):
        resp = as_user(member).post(
            reverse("api:user:survey-submit", kwargs={"pk": assigned.pk}),
            {"answers": [{"question_id": 999999, "present_option_index": 1}]},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST
        assert "detail" in resp.data


def test_template_catalogue_open_to_members(as_user, member):
    factories.create_survey(None, title="Catalogue")
    resp = as_user(member).get(reverse("api:surveys:template-list"))
    assert resp.status_code == HTTPStatus.OK
    assert [t["title"] for t in resp.data] == ["Catalogue"]
