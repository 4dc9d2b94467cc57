from django.db.models import Count
from django.db.models import Q
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.analytics import selectors
from cxo_survey.employees.api.serializers import EmployeeSerializer
from cxo_survey.employees.models import Employee
from cxo_survey.invites import services as invites
from cxo_survey.notifications.mailer import MailerMixin
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization
from cxo_survey.reports import services as reports
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.users.api.permissions import IsAdmin

from .mixins import OrganizationScopedMixin
from .serializers import DepartmentSerializer
from .serializers import OrganizationCreateSerializer
from .serializers import OrganizationSerializer


def _survey_summary(survey: Survey) -> dict:
    return {
        "id": survey.pk,
        "title": survey.title,
        "status": survey.status,
        "due_date": survey.due_date,
        "created_at": survey.created_at,
    }


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"], request=OrganizationCreateSerializer),
)
class AdminOrganizationViewSet(
    MailerMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Organization.objects.all()
    serializer_class = OrganizationSerializer
    permission_classes = [IsAdmin]

    def list(self, request, *args, **kwargs):
        data = [
            {**OrganizationSerializer(org).data, "stats": selectors.org_summary_stats(org)}
            for org in self.get_queryset()
        ]
        return Response(data)

    def create(self, request, *args, **kwargs):
        ser = OrganizationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = invites.create_organization_with_ceo_invite(
            name=ser.validated_data["name"],
            ceo_email=ser.validated_data["ceo_email"],
            invited_by=request.user,
            mailer=self.get_mailer(),
        )
        if result.email_sent:
            message = "Organization created and CEO invitation sent"
        else:
            message = (
                "Organization created but the invitation email could not be "
                "sent. Share the signup link with the CEO manually."
            )
        return Response(
            {
                "organization": OrganizationSerializer(result.organization).data,
                "invite_token": result.invite.token,
                "email_sent": result.email_sent,
                "signup_link": result.signup_link,
                "message": message,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, *args, **kwargs):
        org = self.get_object()
        employees = org.employees.exclude(role=Employee.Role.ADMIN).select_related(
            "department"
        )
        surveys = org.surveys.filter(is_template=False)
        return Response(
            {
                "organization": OrganizationSerializer(org).data,
                "departments": selectors.department_rows(org),
                "employees": EmployeeSerializer(employees, many=True).data,
                "surveys": [_survey_summary(s) for s in surveys],
                "stats": selectors.org_detail_stats(org),
            }
        )

    @extend_schema(tags=["Admin"], request=None)
    @action(detail=True, methods=["post"], url_path="resend-invite")
    def resend_invite(self, request, pk=None):
        org = self.get_object()
        result = invites.resend_ceo_invite(org, mailer=self.get_mailer())
        return Response(
            {
                "message": "Invitation resent"
                if result.email_sent
                else "Invitation renewed but the email could not be sent",
                "email_sent": result.email_sent,
                "signup_link": result.signup_link,
            }
        )

    @extend_schema(tags=["Admin"])
    @action(detail=True, methods=["get"], url_path="user-marks")
    def user_marks(self, request, pk=None):
        org = self.get_object()
        return Response(
            {
                "organization": OrganizationSerializer(org).data,
                "users": reports.organization_user_marks(org),
            }
        )


class AdminDashboardView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Admin"])
    def get(self, request):
        recent = (
            SurveyResponse.objects.filter(is_draft=False)
            .select_related("employee", "survey", "organization")
            .order_by("-submitted_at")[:10]
        )
        return Response(
            {
                "stats": selectors.global_overview(),
                "recent_submissions": [
                    {
                        "id": r.pk,
                        "survey_title": r.survey.title,
                        "employee_name": r.employee.name,
                        "employee_email": r.employee.email,
                        "organization_name": r.organization.name,
                        "submitted_at": r.submitted_at,
                    }
                    for r in recent
                ],
            }
        )


class CEODashboardView(OrganizationScopedMixin, APIView):
    @extend_schema(tags=["CEO"])
    def get(self, request):
        org = self.get_organization()
        recent = org.surveys.filter(is_template=False).order_by("-created_at")[:5]
        return Response(
            {
                "organization": OrganizationSerializer(org).data,
                "stats": selectors.org_detail_stats(org),
                "departments": selectors.department_rows(org),
                "recent_surveys": [_survey_summary(s) for s in recent],
            }
        )


@extend_schema_view(
    list=extend_schema(tags=["CEO"]),
    create=extend_schema(tags=["CEO"]),
)
class CEODepartmentViewSet(
    OrganizationScopedMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = DepartmentSerializer

    def get_queryset(self):
        user_only = Q(employees__role=Employee.Role.USER)
        accepted = Q(employees__invite_status=Employee.InviteStatus.ACCEPTED)
        return Department.objects.filter(
            organization=self.get_organization()
        ).annotate(
            employee_count=Count("employees", filter=user_only, distinct=True),
            active_count=Count("employees", filter=user_only & accepted, distinct=True),
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["organization"] = self.get_organization()
        return context

    def list(self, request, *args, **kwargs):
        data = [
            {
                **DepartmentSerializer(dept).data,
                "employee_count": dept.employee_count,
                "active_count": dept.active_count,
                "pending_count": dept.employee_count - dept.active_count,
            }
            for dept in self.get_queryset()
        ]
        return Response(data)

    def perform_create(self, serializer):
        serializer.save(organization=self.get_organization())

    @extend_schema(tags=["CEO"])
    @action(detail=True, methods=["get"])
    def employees(self, request, pk=None):
        dept = get_object_or_404(
            Department, pk=pk, organization=self.get_organization()
        )
        people = dept.employees.filter(role=Employee.Role.USER).select_related(
            "department"
        )
        return Response(
            {
                "department": DepartmentSerializer(dept).data,
                "employees": EmployeeSerializer(people, many=True).data,
            }
        )
