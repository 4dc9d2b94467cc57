"""Invite and one-time-password lifecycle.

An email moves from no account, to invited (pending placeholder employee plus
a live InviteLog), to verified (accepted) the first time an OTP for it is
confirmed. Every multi-row write happens inside one transaction and mail is
sent only once the rows are stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from datetime import timedelta
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied

from cxo_survey.audit.models import AuditLog
from cxo_survey.audit.utils import log_action
from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import InviteLog
from cxo_survey.invites.models import OneTimePassword
from cxo_survey.invites.models import generate_invite_token
from cxo_survey.notifications.mailer import signup_link
from cxo_survey.org.models import Organization
from cxo_survey.surveys.services import backfill_assignments
from cxo_survey.utils.exceptions import ConflictError
from cxo_survey.utils.exceptions import DomainError
from cxo_survey.utils.exceptions import InviteError
from cxo_survey.utils.exceptions import OTPError

if TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterable

    from cxo_survey.notifications.mailer import Mailer
    from cxo_survey.org.models import Department

logger = logging.getLogger(__name__)

LIVE_STATUSES = (InviteLog.Status.SENT, InviteLog.Status.CLICKED)


def normalize_email(value: Any) -> str:
    return str(value or "").strip().lower()


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value)
    except DjangoValidationError:
        return False
    return True


@dataclass
class InviteResult:
    invite: InviteLog
    employee: Employee
    email_sent: bool
    organization: Organization | None = None

    @property
    def signup_link(self) -> str:
        return signup_link(self.invite.token)


@dataclass
class BatchInviteReport:
    results: list[dict[str, Any]] = field(default_factory=list)

    def add(self, email: str, status: str, **extra: Any) -> None:
        self.results.append({"email": email, "status": status, **extra})

    @property
    def summary(self) -> dict[str, int]:
        counts = {"total": len(self.results), "invited": 0, "skipped": 0, "failed": 0}
        for row in self.results:
            counts[row["status"]] += 1
        return counts


def _deliver(send: Callable[[], None], email: str, kind: str) -> bool:
    """Send an invite mail; a delivery failure leaves the stored invite valid."""
    try:
        send()
    except Exception:  # noqa: BLE001 - the admin can share the link manually
        logger.warning("Failed to send %s mail to %s", kind, email, exc_info=True)
        return False
    return True


def _renewed_expiry():
    return timezone.now() + timedelta(days=settings.INVITE_TTL_DAYS)


# One-time passwords ---------------------------------------------------------
def issue_otp(email: str, purpose: str, *, mailer: Mailer) -> OneTimePassword:
    """Replace any outstanding code for (email, purpose) and mail a new one."""
    email = normalize_email(email)
    OneTimePassword.objects.filter(email__iexact=email, purpose=purpose).delete()
    otp = OneTimePassword.objects.create(email=email, purpose=purpose)
    mailer.send_otp(email, otp.otp, purpose)
    return otp


def consume_otp(email: str, code: Any, purpose: str) -> None:
    """Burn a matching unexpired code, then every other code for the pair."""
    email = normalize_email(email)
    code = str(code or "").strip()
    if not code:
        raise OTPError
    deleted, _ = OneTimePassword.objects.filter(
        email__iexact=email,
        purpose=purpose,
        otp=code,
        expires_at__gt=timezone.now(),
    ).delete()
    if not deleted:
        raise OTPError
    OneTimePassword.objects.filter(email__iexact=email, purpose=purpose).delete()


# Invite resolution ----------------------------------------------------------
def resolve_usable_invite(token: str) -> InviteLog:
    invite = (
        InviteLog.objects.select_related("organization", "department")
        .filter(token=str(token or "").strip())
        .first()
    )
    if invite is None:
        msg = "Invalid invitation link"
        raise InviteError(msg)
    if invite.status == InviteLog.Status.ACCEPTED:
        msg = "This invitation has already been used"
        raise InviteError(msg)
    if invite.status == InviteLog.Status.EXPIRED:
        msg = "This invitation has expired"
        raise InviteError(msg)
    if invite.is_expired:
        invite.status = InviteLog.Status.EXPIRED
        invite.save(update_fields=["status"])
        msg = "This invitation has expired"
        raise InviteError(msg)
    return invite


def mark_invite_clicked(token: str) -> InviteLog:
    invite = resolve_usable_invite(token)
    if invite.status == InviteLog.Status.SENT:
        invite.status = InviteLog.Status.CLICKED
        invite.clicked_at = timezone.now()
        invite.save(update_fields=["status", "clicked_at"])
    return invite


def materialize_employee_from_invite(invite: InviteLog) -> Employee:
    return Employee.objects.create_user(
        email=invite.email,
        role=invite.role,
        organization=invite.organization,
        department=invite.department,
        invite_token=invite.token,
        invite_status=Employee.InviteStatus.PENDING,
    )


@transaction.atomic
def accept_invite(employee: Employee) -> Employee:
    """First verification of a pending account."""
    now = timezone.now()
    employee.invite_status = Employee.InviteStatus.ACCEPTED
    employee.accepted_at = now
    employee.invite_token = ""
    employee.save(update_fields=["invite_status", "accepted_at", "invite_token"])

    InviteLog.objects.for_email(employee.email).filter(
        status__in=LIVE_STATUSES
    ).update(status=InviteLog.Status.ACCEPTED, accepted_at=now)

    if employee.role == Employee.Role.CEO and employee.organization_id:
        Organization.objects.filter(pk=employee.organization_id).update(
            ceo=employee, status=Organization.Status.ACTIVE
        )
    if employee.department_id:
        try:
            with transaction.atomic():
                backfill_assignments(employee)
        except Exception:  # noqa: BLE001
            logger.exception("Assignment backfill failed for %s", employee.email)
    return employee


# Organization / CEO invites -------------------------------------------------
def _purge_pending_records(email: str, actor: Employee | None) -> None:
    invites = InviteLog.objects.for_email(email).filter(status__in=LIVE_STATUSES)
    employees = Employee.objects.filter(
        email__iexact=email, invite_status=Employee.InviteStatus.PENDING
    )
    organizations = Organization.objects.filter(
        ceo_email__iexact=email, status=Organization.Status.PENDING
    )
    summary = {
        "invites": list(invites.values_list("id", flat=True)),
        "employees": list(employees.values_list("id", flat=True)),
        "organizations": list(organizations.values_list("id", flat=True)),
    }
    if not any(summary.values()):
        return
    invites.delete()
    employees.delete()
    organizations.delete()
    log_action(
        AuditLog.Action.INVITE_SUPERSEDED,
        actor=actor,
        message=f"Removed pending invitation records for {email}",
        model_name="invites.InviteLog",
        before=summary,
    )


def create_organization_with_ceo_invite(
    *,
    name: str,
    ceo_email: str,
    invited_by: Employee,
    mailer: Mailer,
) -> InviteResult:
    email = normalize_email(ceo_email)
    if Employee.objects.filter(
        email__iexact=email, invite_status=Employee.InviteStatus.ACCEPTED
    ).exists():
        msg = "An account with this email already exists"
        raise ConflictError(msg)

    token = generate_invite_token()
    with transaction.atomic():
        _purge_pending_records(email, invited_by)
        org = Organization.objects.create(
            name=name.strip(), ceo_email=email, invite_token=token
        )
        employee = Employee.objects.create_user(
            email=email,
            name="CEO",
            role=Employee.Role.CEO,
            organization=org,
            invite_token=token,
            invite_status=Employee.InviteStatus.PENDING,
        )
        invite = InviteLog.objects.create(
            email=email,
            organization=org,
            invited_by=invited_by,
            role=InviteLog.Role.CEO,
            token=token,
        )
        log_action(
            AuditLog.Action.ORGANIZATION_CREATE,
            actor=invited_by,
            organization=org,
            message=f"Created organization {org.name} and invited {email}",
            model_name="org.Organization",
            record_id=org.pk,
            after={"name": org.name, "ceo_email": email},
        )

    sent = _deliver(
        lambda: mailer.send_ceo_invite(email, org.name, token), email, "CEO invite"
    )
    return InviteResult(
        invite=invite, employee=employee, email_sent=sent, organization=org
    )


def resend_ceo_invite(org: Organization, *, mailer: Mailer) -> InviteResult:
    if org.status == Organization.Status.ACTIVE:
        msg = "Organization is already active"
        raise DomainError(msg)

    token = generate_invite_token()
    with transaction.atomic():
        org.invite_token = token
        org.save(update_fields=["invite_token"])
        employee = Employee.objects.filter(
            email__iexact=org.ceo_email, organization=org
        ).first()
        if employee is None:
            employee = Employee.objects.create_user(
                email=org.ceo_email,
                name="CEO",
                role=Employee.Role.CEO,
                organization=org,
                invite_status=Employee.InviteStatus.PENDING,
            )
        employee.invite_token = token
        employee.save(update_fields=["invite_token"])
        invite = _rotate_invite(
            email=org.ceo_email,
            organization=org,
            department=None,
            role=InviteLog.Role.CEO,
            token=token,
        )

    sent = _deliver(
        lambda: mailer.send_ceo_invite(org.ceo_email, org.name, token),
        org.ceo_email,
        "CEO invite",
    )
    return InviteResult(
        invite=invite, employee=employee, email_sent=sent, organization=org
    )


def _rotate_invite(
    *,
    email: str,
    organization: Organization,
    department: Department | None,
    role: str,
    token: str,
    invited_by: Employee | None = None,
) -> InviteLog:
    invite = (
        InviteLog.objects.for_email(email)
        .filter(organization=organization)
        .exclude(status=InviteLog.Status.ACCEPTED)
        .order_by("-sent_at")
        .first()
    )
    if invite is None:
        return InviteLog.objects.create(
            email=email,
            organization=organization,
            department=department,
            invited_by=invited_by,
            role=role,
            token=token,
        )
    invite.token = token
    invite.status = InviteLog.Status.SENT
    invite.sent_at = timezone.now()
    invite.clicked_at = None
    invite.expires_at = _renewed_expiry()
    invite.save(
        update_fields=["token", "status", "sent_at", "clicked_at", "expires_at"]
    )
    return invite


# Employee invites -----------------------------------------------------------
def invite_employee(  # noqa: PLR0913
    org: Organization,
    *,
    email: str,
    invited_by: Employee,
    mailer: Mailer,
    name: str = "",
    department: Department | None = None,
) -> InviteResult:
    email = normalize_email(email)
    existing = Employee.objects.filter(email__iexact=email).first()
    if existing is not None and existing.is_accepted:
        msg = "An account with this email already exists"
        raise ConflictError(msg)
    if existing is not None or InviteLog.objects.for_email(email).live().exists():
        msg = "An invitation is already pending for this email"
        raise ConflictError(msg)

    token = generate_invite_token()
    with transaction.atomic():
        employee = Employee.objects.create_user(
            email=email,
            name=(name or "").strip(),
            role=Employee.Role.USER,
            organization=org,
            department=department,
            invite_token=token,
            invite_status=Employee.InviteStatus.PENDING,
        )
        invite = InviteLog.objects.create(
            email=email,
            organization=org,
            department=department,
            invited_by=invited_by,
            role=InviteLog.Role.USER,
            token=token,
        )

    sent = _deliver(
        lambda: mailer.send_employee_invite(
            email, org.name, token, department.name if department else None
        ),
        email,
        "employee invite",
    )
    return InviteResult(invite=invite, employee=employee, email_sent=sent)


def batch_invite(
    org: Organization,
    rows: Iterable[dict[str, Any]],
    *,
    invited_by: Employee,
    mailer: Mailer,
) -> BatchInviteReport:
    """Invite rows one at a time; one bad row never aborts the rest."""
    report = BatchInviteReport()
    departments = {d.pk: d for d in org.departments.all()}
    for row in rows:
        raw_email = row.get("email") if isinstance(row, dict) else None
        email = normalize_email(raw_email)
        if not email or not is_valid_email(email):
            report.add(str(raw_email or ""), "failed", reason="Invalid email address")
            continue

        department = None
        department_id = row.get("department_id")
        if department_id not in (None, ""):
            try:
                department = departments.get(int(department_id))
            except (TypeError, ValueError):
                department = None
            if department is None:
                report.add(email, "failed", reason="Department not found")
                continue

        try:
            result = invite_employee(
                org,
                email=email,
                name=str(row.get("name") or ""),
                department=department,
                invited_by=invited_by,
                mailer=mailer,
            )
        except ConflictError as exc:
            report.add(email, "skipped", reason=str(exc.detail))
        except Exception as exc:  # noqa: BLE001 - reported per row
            logger.exception("Batch invite failed for %s", email)
            report.add(email, "failed", reason=str(exc))
        else:
            report.add(
                email,
                "invited",
                employee_id=result.employee.pk,
                email_sent=result.email_sent,
            )
    return report


def resend_employee_invite(employee: Employee, *, mailer: Mailer) -> InviteResult:
    if employee.is_accepted:
        msg = "Employee has already accepted the invitation"
        raise DomainError(msg)

    token = generate_invite_token()
    with transaction.atomic():
        employee.invite_token = token
        employee.save(update_fields=["invite_token"])
        invite = _rotate_invite(
            email=employee.email,
            organization=employee.organization,
            department=employee.department,
            role=InviteLog.Role.USER,
            token=token,
        )

    org_name = employee.organization.name if employee.organization else ""
    dept_name = employee.department.name if employee.department else None
    sent = _deliver(
        lambda: mailer.send_employee_invite(employee.email, org_name, token, dept_name),
        employee.email,
        "employee invite",
    )
    return InviteResult(invite=invite, employee=employee, email_sent=sent)


# Login and signup -----------------------------------------------------------
def _ensure_active(employee: Employee) -> None:
    if not employee.is_active:
        msg = "This account has been deactivated"
        raise PermissionDenied(msg)


def request_login_otp(email: str, *, mailer: Mailer) -> Employee:
    email = normalize_email(email)
    employee = Employee.objects.filter(email__iexact=email).first()
    if employee is None:
        invite = InviteLog.objects.for_email(email).live().order_by("-sent_at").first()
        if invite is None:
            msg = "No account found with this email. Please contact your administrator."
            raise DomainError(msg)
        employee = materialize_employee_from_invite(invite)
    _ensure_active(employee)
    issue_otp(employee.email, OneTimePassword.Purpose.LOGIN, mailer=mailer)
    return employee


def verify_login_otp(email: str, otp: Any) -> Employee:
    email = normalize_email(email)
    consume_otp(email, otp, OneTimePassword.Purpose.LOGIN)
    employee = Employee.objects.filter(email__iexact=email).first()
    if employee is None:
        msg = "No account found with this email"
        raise DomainError(msg)
    _ensure_active(employee)
    if not employee.is_accepted:
        accept_invite(employee)
    return employee


def _ensure_no_account(email: str) -> None:
    if Employee.objects.filter(
        email__iexact=email, invite_status=Employee.InviteStatus.ACCEPTED
    ).exists():
        msg = "Account already exists. Please login instead."
        raise ConflictError(msg)


def signup_send_otp(token: str, *, mailer: Mailer) -> InviteLog:
    invite = resolve_usable_invite(token)
    _ensure_no_account(invite.email)
    issue_otp(invite.email, OneTimePassword.Purpose.SIGNUP, mailer=mailer)
    return invite


def signup_verify_otp(
    token: str, otp: Any, *, name: str = "", password: str | None = None
) -> Employee:
    invite = resolve_usable_invite(token)
    _ensure_no_account(invite.email)
    consume_otp(invite.email, otp, OneTimePassword.Purpose.SIGNUP)

    with transaction.atomic():
        employee = Employee.objects.filter(email__iexact=invite.email).first()
        if employee is None:
            employee = materialize_employee_from_invite(invite)
        if name and name.strip():
            employee.name = name.strip()
        if password:
            employee.set_password(password)
        employee.save()
        accept_invite(employee)
    return employee
