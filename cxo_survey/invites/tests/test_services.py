from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from cxo_survey.audit.models import AuditLog
from cxo_survey.employees.models import Employee
from cxo_survey.invites import services
from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword
from cxo_survey.notifications.mailer import Mailer
from cxo_survey.org.models import Organization
from cxo_survey.utils.exceptions import ConflictError
from cxo_survey.utils.exceptions import DomainError
from cxo_survey.utils.exceptions import InviteError
from cxo_survey.utils.exceptions import OTPError
from tests import factories

pytestmark = pytest.mark.django_db


@pytest.fixture
def mailer():
    return Mailer()


class TestOneTimePasswords:
    def test_issue_replaces_previous_code(self, mailer, mailoutbox):
        first = services.issue_otp("A@Example.com", "login", mailer=mailer)
        second = services.issue_otp("a@example.com", "login", mailer=mailer)

        assert not OneTimePassword.objects.filter(pk=first.pk).exists()
        assert OneTimePassword.objects.get().pk == second.pk
        assert len(mailoutbox) == 2  # noqa: PLR2004
        assert second.otp in mailoutbox[-1].body

    def test_code_is_single_use(self, mailer):
        otp = services.issue_otp("a@example.com", "login", mailer=mailer)
        services.consume_otp("a@example.com", otp.otp, "login")
        with pytest.raises(OTPError):
            services.consume_otp("a@example.com", otp.otp, "login")

    def test_expired_or_wrong_purpose_rejected(self, mailer):
        otp = services.issue_otp("a@example.com", "login", mailer=mailer)
        with pytest.raises(OTPError):
            services.consume_otp("a@example.com", otp.otp, "signup")

        OneTimePassword.objects.update(expires_at=timezone.now() - timedelta(seconds=1))
        with pytest.raises(OTPError):
            services.consume_otp("a@example.com", otp.otp, "login")

    def test_blank_code_rejected(self):
        with pytest.raises(OTPError):
            services.consume_otp("a@example.com", "  ", "login")


class TestInviteResolution:
    def test_accepted_invite_rejected(self, org):
        invite = factories.create_invite(
            "x@acme.test", organization=org, status=InviteLog.Status.ACCEPTED
        )
        with pytest.raises(InviteError, match="already been used"):
            services.resolve_usable_invite(invite.token)

    def test_lapsed_invite_is_marked_expired(self, org):
        invite = factories.create_invite(
            "x@acme.test", organization=org, expires_in=timedelta(seconds=-1)
        )
        with pytest.raises(InviteError, match="expired"):
            services.resolve_usable_invite(invite.token)
        invite.refresh_from_db()
        assert invite.status == InviteLog.Status.EXPIRED

    def test_unknown_token_rejected(self):
        with pytest.raises(InviteError):
            services.resolve_usable_invite("nope")

    def test_click_is_recorded_once(self, org):
        invite = factories.create_invite("x@acme.test", organization=org)
        services.mark_invite_clicked(invite.token)
        invite.refresh_from_db()
        clicked_at = invite.clicked_at
        assert invite.status == InviteLog.Status.CLICKED

        services.mark_invite_clicked(invite.token)
        invite.refresh_from_db()
        assert invite.clicked_at == clicked_at


class TestOrganizationInvite:
    def test_creates_pending_org_ceo_and_invite(self, admin, mailer, mailoutbox):
        result = services.create_organization_with_ceo_invite(
            name=" Initech ", ceo_email="Boss@Initech.test", invited_by=admin, mailer=mailer
        )

        org = result.organization
        assert org.name == "Initech"
        assert org.status == Organization.Status.PENDING
        assert result.employee.role == Employee.Role.CEO
        assert result.employee.invite_status == Employee.InviteStatus.PENDING
        assert result.invite.email == "boss@initech.test"
        assert result.email_sent is True
        assert result.signup_link.endswith(f"/signup?token={result.invite.token}")
        assert mailoutbox[0].to == ["boss@initech.test"]
        assert AuditLog.objects.filter(action="organization.create").exists()

    def test_reinvite_supersedes_pending_records(self, admin, mailer):
        first = services.create_organization_with_ceo_invite(
            name="Initech", ceo_email="boss@initech.test", invited_by=admin, mailer=mailer
        )
        second = services.create_organization_with_ceo_invite(
            name="Initech 2", ceo_email="boss@initech.test", invited_by=admin, mailer=mailer
        )

        assert not Organization.objects.filter(pk=first.organization.pk).exists()
        assert Organization.objects.get().pk == second.organization.pk
        assert Employee.objects.filter(email="boss@initech.test").count() == 1
        assert InviteLog.objects.count() == 1
        log = AuditLog.objects.get(action="invite.superseded")
        assert log.before["organizations"] == [first.organization.pk]

    def test_existing_account_conflicts(self, admin, mailer, ceo):
        with pytest.raises(ConflictError):
            services.create_organization_with_ceo_invite(
                name="Dup", ceo_email=ceo.email, invited_by=admin, mailer=mailer
            )

    def test_mail_failure_keeps_invite(self, admin, broken_mailer):
        result = services.create_organization_with_ceo_invite(
            name="Initech",
            ceo_email="boss@initech.test",
            invited_by=admin,
            mailer=broken_mailer,
        )
        assert result.email_sent is False
        assert InviteLog.objects.filter(token=result.invite.token).exists()

    def test_resend_rotates_token(self, admin, mailer):
        created = services.create_organization_with_ceo_invite(
            name="Initech", ceo_email="boss@initech.test", invited_by=admin, mailer=mailer
        )
        old_token = created.invite.token
        resent = services.resend_ceo_invite(created.organization, mailer=mailer)

        assert resent.invite.pk == created.invite.pk
        assert resent.invite.token != old_token
        resent.employee.refresh_from_db()
        assert resent.employee.invite_token == resent.invite.token

    def test_resend_for_active_org_rejected(self, org, mailer):
        with pytest.raises(DomainError):
            services.resend_ceo_invite(org, mailer=mailer)


class TestEmployeeInvites:
    def test_invite_creates_pending_member(self, org, department, ceo, mailer, mailoutbox):
        result = services.invite_employee(
            org,
            email="new@acme.test",
            name="New",
            department=department,
            invited_by=ceo,
            mailer=mailer,
        )
        assert result.employee.department == department
        assert result.employee.invite_status == Employee.InviteStatus.PENDING
        assert result.invite.role == InviteLog.Role.USER
        assert department.name in mailoutbox[0].body

    def test_second_invite_conflicts(self, org, ceo, mailer):
        services.invite_employee(org, email="new@acme.test", invited_by=ceo, mailer=mailer)
        with pytest.raises(ConflictError, match="pending"):
            services.invite_employee(
                org, email="NEW@acme.test", invited_by=ceo, mailer=mailer
            )

    def test_mail_failure_is_degraded_success(self, org, ceo, broken_mailer):
        result = services.invite_employee(
            org, email="new@acme.test", invited_by=ceo, mailer=broken_mailer
        )
        assert result.email_sent is False
        assert Employee.objects.filter(email="new@acme.test").exists()

    def test_batch_reports_each_row(self, org, department, ceo, member, mailer):
        report = services.batch_invite(
            org,
            [
                {"email": "one@acme.test", "department_id": department.pk},
                {"email": member.email},
                {"email": "not-an-email"},
                {"email": "two@acme.test", "department_id": 999999},
                {"email": "three@acme.test", "name": "Three"},
            ],
            invited_by=ceo,
            mailer=mailer,
        )
        assert [r["status"] for r in report.results] == [
            "invited",
            "skipped",
            "failed",
            "failed",
            "invited",
        ]
        assert report.summary == {"total": 5, "invited": 2, "skipped": 1, "failed": 2}

    def test_resend_for_accepted_member_rejected(self, member, mailer):
        with pytest.raises(DomainError):
            services.resend_employee_invite(member, mailer=mailer)


class TestLogin:
    def test_invited_email_materializes_account(self, org, mailer):
        factories.create_invite("fresh@acme.test", organization=org)
        employee = services.request_login_otp("fresh@acme.test", mailer=mailer)
        assert employee.invite_status == Employee.InviteStatus.PENDING
        assert OneTimePassword.objects.filter(email="fresh@acme.test").exists()

    def test_unknown_email_rejected(self, mailer):
        with pytest.raises(DomainError, match="No account"):
            services.request_login_otp("ghost@nowhere.test", mailer=mailer)

    def test_deactivated_account_forbidden(self, member, mailer):
        member.is_active = False
        member.save()
        with pytest.raises(PermissionDenied):
            services.request_login_otp(member.email, mailer=mailer)

    def test_first_verification_accepts_invite(self, org, department, ceo, mailer):
        result = services.invite_employee(
            org,
            email="new@acme.test",
            department=department,
            invited_by=ceo,
            mailer=mailer,
        )
        otp = services.issue_otp("new@acme.test", "login", mailer=mailer)
        employee = services.verify_login_otp("new@acme.test", otp.otp)

        assert employee.is_accepted
        assert employee.invite_token == ""
        result.invite.refresh_from_db()
        assert result.invite.status == InviteLog.Status.ACCEPTED

    def test_ceo_verification_activates_organization(self, admin, mailer):
        created = services.create_organization_with_ceo_invite(
            name="Initech", ceo_email="boss@initech.test", invited_by=admin, mailer=mailer
        )
        otp = services.issue_otp("boss@initech.test", "login", mailer=mailer)
        ceo = services.verify_login_otp("boss@initech.test", otp.otp)

        org = Organization.objects.get(pk=created.organization.pk)
        assert org.status == Organization.Status.ACTIVE
        assert org.ceo == ceo

    def test_backfill_failure_does_not_undo_login(
        self, org, department, ceo, mailer, monkeypatch, caplog
    ):
        services.invite_employee(
            org,
            email="new@acme.test",
            department=department,
            invited_by=ceo,
            mailer=mailer,
        )

        def explode(employee):
            raise RuntimeError("assignment table locked")

        monkeypatch.setattr(services, "backfill_assignments", explode)
        otp = services.issue_otp("new@acme.test", "login", mailer=mailer)
        employee = services.verify_login_otp("new@acme.test", otp.otp)

        employee.refresh_from_db()
        assert employee.is_accepted
        assert "Assignment backfill failed for new@acme.test" in caplog.text


class TestSignup:
    def test_signup_sets_name_and_password(self, org, mailer):
        invite = factories.create_invite("joiner@acme.test", organization=org)
        services.signup_send_otp(invite.token, mailer=mailer)
        otp = OneTimePassword.objects.get(email="joiner@acme.test", purpose="signup")

        employee = services.signup_verify_otp(
            invite.token, otp.otp, name="  Joiner ", password="S3cret!pass"
        )
        assert employee.name == "Joiner"
        assert employee.check_password("S3cret!pass")
        assert employee.is_accepted

    def test_signup_for_existing_account_conflicts(self, org, member, mailer):
        invite = factories.create_invite(member.email, organization=org)
        with pytest.raises(ConflictError):
            services.signup_send_otp(invite.token, mailer=mailer)
