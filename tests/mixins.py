from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from cxo_survey.employees.models import Employee
from tests import factories

ROLE_ADMIN = Employee.Role.ADMIN
ROLE_CEO = Employee.Role.CEO
ROLE_USER = Employee.Role.USER
ROLE_FOREIGN_CEO = "foreign_ceo"


class RoleAPITestCase(APITestCase):
    """Two tenants and one account per role, plus request helpers."""

    def setUp(self):
        super().setUp()
        self.org = factories.create_organization("Acme", ceo_email="ceo@acme.test")
        self.other_org = factories.create_organization(
            "Globex", ceo_email="ceo@globex.test"
        )
        self.departments = {
            "eng": factories.create_department(self.org, "Engineering"),
            "ops": factories.create_department(self.org, "Operations"),
            "foreign": factories.create_department(self.other_org, "Sales"),
        }
        self.roles: dict[str, Employee] = {
            ROLE_ADMIN: factories.create_admin(),
            ROLE_CEO: factories.create_employee(
                "ceo@acme.test", role=ROLE_CEO, organization=self.org
            ),
            ROLE_USER: factories.create_employee(
                "user@acme.test",
                organization=self.org,
                department=self.departments["eng"],
            ),
            ROLE_FOREIGN_CEO: factories.create_employee(
                "ceo@globex.test", role=ROLE_CEO, organization=self.other_org
            ),
        }

    # Utilities -------------------------------------------------------------
    def authenticate(self, role: str | None):
        if role is None:
            self.client.force_authenticate(user=None)
        else:
            self.client.force_authenticate(user=self.roles[role])

    def assert_http_status(self, response, expected_status: int):
        msg = getattr(response, "data", response)
        assert response.status_code == expected_status, msg

    def get(self, url_name: str, *, role: str | None, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.get(url, **kwargs)

    def post(
        self, url_name: str, *, role: str | None, payload=None, reverse_kwargs=None
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.post(url, data=payload or {}, format="json")

    def patch(
        self, url_name: str, *, role: str | None, payload=None, reverse_kwargs=None
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.patch(url, data=payload or {}, format="json")

    def delete(self, url_name: str, *, role: str | None, reverse_kwargs=None):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.delete(url)

    def assert_allowed(self, response):
        assert response.status_code in (
            status.HTTP_200_OK,
            status.HTTP_201_CREATED,
            status.HTTP_204_NO_CONTENT,
        ), response.data

    def assert_denied(self, response, code=status.HTTP_403_FORBIDDEN):
        assert response.status_code == code, getattr(response, "data", response)
