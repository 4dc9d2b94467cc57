from http import HTTPStatus

import pytest
from django.urls import reverse

from cxo_survey.audit.models import AuditLog
from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword
from cxo_survey.notifications.mailer import Mailer
from cxo_survey.surveys import services as surveys
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from tests import factories

pytestmark = pytest.mark.django_db


def _submit_for(member, org, department):
    survey = factories.create_survey(org)
    result = surveys.assign_survey_to_departments(survey, [department], mailer=Mailer())
    assignment = next(a for a in result.created if a.employee_id == member.pk)
    surveys.submit_response(
        assignment,
        [
            {"question_id": q.pk, "present_option_index": 4, "future_option_index": 2}
            for q in survey.questions.all()
        ],
    )
    return survey


class TestCEOEmployees:
    def test_list_only_members_of_own_org(self, as_user, ceo, org, member):
        pending = factories.create_employee(
            "pending@acme.test", organization=org, accepted=False
        )
        other = factories.create_organization("Globex", ceo_email="ceo@globex.test")
        factories.create_employee("x@globex.test", organization=other)

        resp = as_user(ceo).get(reverse("api:ceo:employee-list"))
        assert resp.status_code == HTTPStatus.OK
        assert {e["email"] for e in resp.data} == {member.email, pending.email}

    def test_filter_by_invite_status(self, as_user, ceo, org, member):
        factories.create_employee("pending@acme.test", organization=org, accepted=False)
        resp = as_user(ceo).get(
            reverse("api:ceo:employee-list"), {"invite_status": "pending"}
        )
        assert [e["email"] for e in resp.data] == ["pending@acme.test"]

    def test_delete_removes_everything_and_audits(
        self, as_user, ceo, org, department, member
    ):
        _submit_for(member, org, department)
        factories.create_invite(member.email, organization=org)
        OneTimePassword.objects.create(email=member.email)

        resp = as_user(ceo).delete(
            reverse("api:ceo:employee-detail", kwargs={"pk": member.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        assert not Employee.objects.filter(pk=member.pk).exists()
        assert not SurveyAssignment.objects.exists()
        assert not SurveyResponse.objects.exists()
        assert not InviteLog.objects.filter(email=member.email).exists()
        assert not OneTimePassword.objects.filter(email=member.email).exists()

        log = AuditLog.objects.get(action="employee.delete")
        assert log.actor == ceo
        assert log.before["responses"] == 1

    def test_ceo_cannot_delete_themselves(self, as_user, ceo):
        resp = as_user(ceo).delete(
            reverse("api:ceo:employee-detail", kwargs={"pk": ceo.pk})
        )
        assert resp.status_code == HTTPStatus.NOT_FOUND


def test_admin_user_detail_includes_results(as_user, admin, org, department, member):
    survey = _submit_for(member, org, department)
    resp = as_user(admin).get(reverse("api:admin:user-detail", kwargs={"pk": member.pk}))

    assert resp.status_code == HTTPStatus.OK
    assert resp.data["employee"]["organization_name"] == org.name
    [result] = resp.data["results"]
    assert result["survey_id"] == survey.pk
    assert result["present"]["creativity_percentage"] == 80.0  # noqa: PLR2004
    assert result["future"]["morality_percentage"] == 40.0  # noqa: PLR2004
    assert resp.data["summary"]["total_surveys"] == 1
    assert resp.data["summary"]["present_creativity_total"] == 8  # noqa: PLR2004


def test_admin_user_detail_unknown_is_404(as_user, admin):
    resp = as_user(admin).get(reverse("api:admin:user-detail", kwargs={"pk": 999999}))
    assert resp.status_code == HTTPStatus.NOT_FOUND
