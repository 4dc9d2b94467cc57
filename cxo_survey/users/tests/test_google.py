from types import SimpleNamespace
from unittest import mock
from urllib.parse import parse_qs
from urllib.parse import urlparse

import pytest
from allauth.core.exceptions import ImmediateHttpResponse
from django.test import RequestFactory
from django.urls import reverse
from rest_framework_simplejwt.tokens import AccessToken

from cxo_survey.users.adapters import SocialAccountAdapter

pytestmark = pytest.mark.django_db


def _sociallogin(email, uid="google-123"):
    login = mock.Mock()
    login.is_existing = False
    login.user = SimpleNamespace(email=email)
    login.email_addresses = []
    login.account = SimpleNamespace(uid=uid, provider="google")
    return login


def test_adapter_links_existing_employee(member):
    request = RequestFactory().get("/")
    login = _sociallogin("Member@Acme.test")

    SocialAccountAdapter().pre_social_login(request, login)

    login.connect.assert_called_once_with(request, member)
    member.refresh_from_db()
    assert member.google_id == "google-123"


def test_adapter_rejects_unknown_email():
    login = _sociallogin("stranger@nowhere.test")
    with pytest.raises(ImmediateHttpResponse) as excinfo:
        SocialAccountAdapter().pre_social_login(RequestFactory().get("/"), login)
    assert excinfo.value.response.url.endswith("/login?error=no_account")
    login.connect.assert_not_called()


def test_adapter_rejects_deactivated_employee(member):
    member.is_active = False
    member.save()
    with pytest.raises(ImmediateHttpResponse):
        SocialAccountAdapter().pre_social_login(
            RequestFactory().get("/"), _sociallogin(member.email)
        )


def test_adapter_closes_signup():
    assert SocialAccountAdapter().is_open_for_signup(None, None) is False


def test_google_start_redirects_to_provider(client):
    resp = client.get(reverse("api:auth:google"))
    assert resp.status_code == 302  # noqa: PLR2004
    assert resp.url.startswith(reverse("google_login"))


def test_google_complete_hands_token_to_frontend(client, member):
    client.force_login(member)
    resp = client.get(reverse("api:auth:google-complete"))

    assert resp.status_code == 302  # noqa: PLR2004
    url = urlparse(resp.url)
    assert url.path == "/auth/callback"
    token = AccessToken(parse_qs(url.query)["token"][0])
    assert token["email"] == member.email
    # The OAuth session is dropped once the bearer token is issued.
    assert "_auth_user_id" not in client.session


def test_google_complete_without_session(client):
    resp = client.get(reverse("api:auth:google-complete"))
    assert resp.status_code == 302  # noqa: PLR2004
    assert resp.url.endswith("/login?error=google_auth_failed")
