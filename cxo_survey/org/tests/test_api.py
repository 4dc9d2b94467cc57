from http import HTTPStatus

import pytest
from django.urls import reverse

from cxo_survey.notifications.mailer import Mailer
from cxo_survey.notifications.mailer import MailerMixin
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization
from cxo_survey.surveys import services as surveys
from tests import factories

pytestmark = pytest.mark.django_db


class TestAdminOrganizations:
    def test_create_returns_invite_details(self, as_user, admin, mailoutbox):
        resp = as_user(admin).post(
            reverse("api:admin:organization-list"),
            {"name": "Initech", "ceo_email": "boss@initech.test"},
            format="json",
        )
        assert resp.status_code == HTTPStatus.CREATED, resp.data
        assert resp.data["organization"]["status"] == "pending"
        assert resp.data["email_sent"] is True
        assert resp.data["signup_link"].endswith(resp.data["invite_token"])
        assert mailoutbox[0].to == ["boss@initech.test"]

    def test_create_with_failed_mail(self, as_user, admin, broken_mailer, monkeypatch):
        monkeypatch.setattr(
            MailerMixin, "mailer_factory", staticmethod(lambda: broken_mailer)
        )
        resp = as_user(admin).post(
            reverse("api:admin:organization-list"),
            {"name": "Initech", "ceo_email": "boss@initech.test"},
            format="json",
        )
        assert resp.status_code == HTTPStatus.CREATED
        assert resp.data["email_sent"] is False
        assert Organization.objects.filter(name="Initech").exists()

    def test_blank_name_rejected(self, as_user, admin):
        resp = as_user(admin).post(
            reverse("api:admin:organization-list"),
            {"name": "   ", "ceo_email": "boss@initech.test"},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST

    def test_existing_account_conflicts(self, as_user, admin, ceo):
        resp = as_user(admin).post(
            reverse("api:admin:organization-list"),
            {"name": "Again", "ceo_email": ceo.email},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST

    def test_list_includes_stats(self, as_user, admin, org, member):
        resp = as_user(admin).get(reverse("api:admin:organization-list"))
        assert resp.status_code == HTTPStatus.OK
        row = next(o for o in resp.data if o["id"] == org.pk)
        assert row["stats"]["employees"] == 1
        assert row["stats"]["departments"] == 1

    def test_detail(self, as_user, admin, org, ceo, member):
        factories.create_survey(org, title="Pulse")
        resp = as_user(admin).get(
            reverse("api:admin:organization-detail", kwargs={"pk": org.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["organization"]["ceo_id"] == ceo.pk
        assert {e["email"] for e in resp.data["employees"]} == {ceo.email, member.email}
        assert [s["title"] for s in resp.data["surveys"]] == ["Pulse"]
        assert resp.data["stats"]["total_employees"] == 1

    def test_resend_invite_for_pending_org(self, as_user, admin, mailoutbox):
        client = as_user(admin)
        created = client.post(
            reverse("api:admin:organization-list"),
            {"name": "Initech", "ceo_email": "boss@initech.test"},
            format="json",
        )
        pk = created.data["organization"]["id"]
        resp = client.post(reverse("api:admin:organization-resend-invite", kwargs={"pk": pk}))
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["email_sent"] is True
        assert resp.data["signup_link"] != created.data["signup_link"]
        assert len(mailoutbox) == 2  # noqa: PLR2004

    def test_resend_invite_for_active_org_rejected(self, as_user, admin, org):
        resp = as_user(admin).post(
            reverse("api:admin:organization-resend-invite", kwargs={"pk": org.pk})
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST

    def test_user_marks(self, as_user, admin, org, ceo, member, department):
        survey = factories.create_survey(org)
        result = surveys.assign_survey_to_departments(
            survey, [department], mailer=Mailer()
        )
        surveys.submit_response(
            result.created[0],
            [
                {"question_id": q.pk, "present_option_index": 5, "future_option_index": 5}
                for q in survey.questions.all()
            ],
        )
        resp = as_user(admin).get(
            reverse("api:admin:organization-user-marks", kwargs={"pk": org.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        assert [u["email"] for u in resp.data["users"]] == [member.email]
        assert len(resp.data["users"][0]["responses"]) == 1

    def test_admin_dashboard_lists_recent_submissions(self, as_user, admin, org):
        resp = as_user(admin).get(reverse("api:admin:dashboard"))
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["recent_submissions"] == []
        assert "stats" in resp.data


class TestCEOArea:
    def test_dashboard(self, as_user, ceo, org, member):
        resp = as_user(ceo).get(reverse("api:ceo:dashboard"))
        assert resp.status_code == HTTPStatus.OK
        assert resp.data["organization"]["id"] == org.pk
        assert resp.data["stats"]["total_employees"] == 1

    def test_department_create_and_list(self, as_user, ceo, org, member):
        client = as_user(ceo)
        resp = client.post(
            reverse("api:ceo:department-list"), {"name": " Finance "}, format="json"
        )
        assert resp.status_code == HTTPStatus.CREATED, resp.data
        assert resp.data["organization_id"] == org.pk
        assert Department.objects.get(pk=resp.data["id"]).name == "Finance"

        listing = client.get(reverse("api:ceo:department-list"))
        counts = {d["name"]: d["employee_count"] for d in listing.data}
        assert counts == {"Engineering": 1, "Finance": 0}

    def test_department_head_must_be_in_org(self, as_user, ceo):
        other = factories.create_organization("Globex", ceo_email="ceo@globex.test")
        outsider = factories.create_employee("x@globex.test", organization=other)
        resp = as_user(ceo).post(
            reverse("api:ceo:department-list"),
            {"name": "Finance", "head_id": outsider.pk},
            format="json",
        )
        assert resp.status_code == HTTPStatus.BAD_REQUEST
        assert "head_id" in resp.data

    def test_department_employees(self, as_user, ceo, department, member):
        resp = as_user(ceo).get(
            reverse("api:ceo:department-employees", kwargs={"pk": department.pk})
        )
        assert resp.status_code == HTTPStatus.OK
        assert [e["email"] for e in resp.data["employees"]] == [member.email]

    def test_admin_without_org_gets_400(self, as_user, admin):
        resp = as_user(admin).get(reverse("api:ceo:dashboard"))
        assert resp.status_code == HTTPStatus.BAD_REQUEST
        assert "organization" in resp.data["detail"]

    def test_user_is_forbidden(self, as_user, member):
        resp = as_user(member).get(reverse("api:ceo:dashboard"))
        assert resp.status_code == HTTPStatus.FORBIDDEN
