from unittest import mock

import pytest
from rest_framework.test import APIClient

from cxo_survey.notifications.mailer import Mailer
from tests import factories


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def org(db):
    return factories.create_organization()


@pytest.fixture
def department(org):
    return factories.create_department(org)


@pytest.fixture
def admin(db):
    return factories.create_admin()


@pytest.fixture
def ceo(org):
    return factories.create_employee(
        "ceo@acme.test", role="ceo", organization=org, name="Chief"
    )


@pytest.fixture
def member(org, department):
    return factories.create_employee(
        "member@acme.test", organization=org, department=department, name="Member"
    )


@pytest.fixture
def as_user(api_client):
    """Return a client authenticated as the given employee."""

    def _login(employee):
        api_client.force_authenticate(user=employee)
        return api_client

    return _login


@pytest.fixture
def broken_mailer():
    """A mailer whose every send fails, for degraded-delivery paths."""
    mailer = mock.create_autospec(Mailer, instance=True)
    for name in (
        "send_otp",
        "send_ceo_invite",
        "send_employee_invite",
        "send_survey_assigned",
    ):
        getattr(mailer, name).side_effect = ConnectionRefusedError("smtp down")
    return mailer
