from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework import status
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.employees.api.serializers import BatchInviteSerializer
from cxo_survey.employees.api.serializers import EmployeeSerializer
from cxo_survey.employees.api.serializers import InviteEmployeeSerializer
from cxo_survey.employees.models import Employee
from cxo_survey.invites import services as invites
from cxo_survey.invites.models import InviteLog
from cxo_survey.notifications.mailer import MailerMixin
from cxo_survey.org.api.mixins import OrganizationScopedMixin
from cxo_survey.users.api.permissions import IsAdmin

from .serializers import InviteLogSerializer


def _delivery_message(result, sent_text: str) -> str:
    if result.email_sent:
        return sent_text
    return (
        "Invitation created but the email could not be sent. "
        "Share the signup link manually."
    )


@extend_schema(tags=["Admin"])
class AdminInviteListView(generics.ListAPIView):
    queryset = InviteLog.objects.select_related(
        "organization", "department", "invited_by"
    ).order_by("-sent_at")
    serializer_class = InviteLogSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["status", "role", "organization"]


class CEOInviteView(OrganizationScopedMixin, MailerMixin, APIView):
    @extend_schema(tags=["CEO"], request=InviteEmployeeSerializer)
    def post(self, request):
        org = self.get_organization()
        ser = InviteEmployeeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        department = None
        if ser.validated_data.get("department_id") is not None:
            department = get_object_or_404(
                org.departments, pk=ser.validated_data["department_id"]
            )
        result = invites.invite_employee(
            org,
            email=ser.validated_data["email"],
            name=ser.validated_data.get("name", ""),
            department=department,
            invited_by=request.user,
            mailer=self.get_mailer(),
        )
        return Response(
            {
                "message": _delivery_message(result, "Invitation sent"),
                "employee": EmployeeSerializer(result.employee).data,
                "email_sent": result.email_sent,
                "signup_link": result.signup_link,
            },
            status=status.HTTP_201_CREATED,
        )


class CEOBatchInviteView(OrganizationScopedMixin, MailerMixin, APIView):
    @extend_schema(tags=["CEO"], request=BatchInviteSerializer)
    def post(self, request):
        org = self.get_organization()
        ser = BatchInviteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = invites.batch_invite(
            org,
            ser.validated_data["employees"],
            invited_by=request.user,
            mailer=self.get_mailer(),
        )
        summary = report.summary
        return Response(
            {
                "message": (
                    f"Processed {summary['total']} invitations: "
                    f"{summary['invited']} invited, {summary['skipped']} skipped, "
                    f"{summary['failed']} failed"
                ),
                "results": report.results,
                "summary": summary,
            }
        )


class CEOResendInviteView(OrganizationScopedMixin, MailerMixin, APIView):
    @extend_schema(tags=["CEO"], request=None)
    def post(self, request, pk: int):
        employee = get_object_or_404(
            Employee.objects.select_related("organization", "department"),
            pk=pk,
            organization=self.get_organization(),
            role=Employee.Role.USER,
            invite_status=Employee.InviteStatus.PENDING,
        )
        result = invites.resend_employee_invite(employee, mailer=self.get_mailer())
        return Response(
            {
                "message": _delivery_message(result, "Invitation resent"),
                "email_sent": result.email_sent,
                "signup_link": result.signup_link,
            }
        )
