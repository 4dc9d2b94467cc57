from __future__ import annotations

from cxo_survey.support.models import SupportTicket
from tests import factories
from tests.mixins import ROLE_ADMIN
from tests.mixins import ROLE_CEO
from tests.mixins import ROLE_FOREIGN_CEO
from tests.mixins import ROLE_USER
from tests.mixins import RoleAPITestCase

ADMIN_ROUTES = [
    "api:admin:organization-list",
    "api:admin:invites",
    "api:admin:dashboard",
    "api:admin:template-list",
    "api:analytics:global",
    "api:support:admin-ticket-list",
]

CEO_ROUTES = [
    "api:ceo:dashboard",
    "api:ceo:department-list",
    "api:ceo:employee-list",
    "api:ceo:survey-list",
    "api:ceo:survey-templates",
    "api:analytics:organization",
]

MEMBER_ROUTES = [
    "api:user:dashboard",
    "api:user:history",
    "api:surveys:template-list",
    "api:support:ticket-list",
    "api:auth:me",
]


class TestRoleMatrix(RoleAPITestCase):
    def test_anonymous_requests_are_unauthorized(self):
        for name in ADMIN_ROUTES + CEO_ROUTES + MEMBER_ROUTES:
            self.assert_denied(self.get(name, role=None), 401)

    def test_admin_routes_reject_other_roles(self):
        for name in ADMIN_ROUTES:
            self.assert_allowed(self.get(name, role=ROLE_ADMIN))
            self.assert_denied(self.get(name, role=ROLE_CEO))
            self.assert_denied(self.get(name, role=ROLE_USER))

    def test_ceo_routes_reject_users(self):
        for name in CEO_ROUTES:
            self.assert_allowed(self.get(name, role=ROLE_CEO))
            self.assert_denied(self.get(name, role=ROLE_USER))

    def test_ceo_routes_need_an_organization(self):
        for name in CEO_ROUTES:
            self.assert_denied(self.get(name, role=ROLE_ADMIN), 400)

    def test_member_routes_open_to_every_role(self):
        for name in MEMBER_ROUTES:
            for role in (ROLE_ADMIN, ROLE_CEO, ROLE_USER):
                self.assert_allowed(self.get(name, role=role))

    def test_reports_are_admin_only(self):
        kwargs = {"pk": self.org.pk}
        self.assert_allowed(
            self.get("api:reports:organization", role=ROLE_ADMIN, reverse_kwargs=kwargs)
        )
        self.assert_denied(
            self.get("api:reports:organization", role=ROLE_CEO, reverse_kwargs=kwargs)
        )

    def test_template_clone_limited_to_ceo_and_admin(self):
        template = factories.create_survey(None, title="Template")
        kwargs = {"pk": template.pk}
        self.assert_denied(
            self.post("api:surveys:template-clone", role=ROLE_USER, reverse_kwargs=kwargs)
        )
        res = self.post("api:surveys:template-clone", role=ROLE_CEO, reverse_kwargs=kwargs)
        self.assert_http_status(res, 201)
        assert res.data["organization_id"] == self.org.pk
        assert res.data["status"] == "draft"


class TestTenantIsolation(RoleAPITestCase):
    def test_foreign_department_is_not_found(self):
        res = self.get(
            "api:ceo:department-employees",
            role=ROLE_FOREIGN_CEO,
            reverse_kwargs={"pk": self.departments["eng"].pk},
        )
        self.assert_denied(res, 404)

    def test_foreign_survey_is_not_found(self):
        survey = factories.create_survey(self.org)
        for name in ("api:ceo:survey-analytics", "api:ceo:survey-detail"):
            method = self.get if name.endswith("analytics") else self.delete
            res = method(name, role=ROLE_FOREIGN_CEO, reverse_kwargs={"pk": survey.pk})
            self.assert_denied(res, 404)

    def test_foreign_employee_cannot_be_deleted(self):
        res = self.delete(
            "api:ceo:employee-detail",
            role=ROLE_FOREIGN_CEO,
            reverse_kwargs={"pk": self.roles[ROLE_USER].pk},
        )
        self.assert_denied(res, 404)

    def test_assign_rejects_foreign_department(self):
        survey = factories.create_survey(self.org)
        res = self.post(
            "api:ceo:survey-assign",
            role=ROLE_CEO,
            payload={"department_ids": [self.departments["foreign"].pk]},
            reverse_kwargs={"pk": survey.pk},
        )
        self.assert_denied(res, 404)

    def test_ticket_of_another_user_is_forbidden(self):
        ticket = SupportTicket.objects.create(
            ticket_number="TKT-999999",
            subject="Other",
            created_by=self.roles[ROLE_FOREIGN_CEO],
            created_by_role=ROLE_CEO,
            organization=self.other_org,
        )
        res = self.get(
            "api:support:ticket-detail", role=ROLE_USER, reverse_kwargs={"pk": ticket.pk}
        )
        self.assert_denied(res, 403)
        res = self.get(
            "api:support:ticket-detail", role=ROLE_ADMIN, reverse_kwargs={"pk": ticket.pk}
        )
        self.assert_allowed(res)
