from __future__ import annotations

from math import ceil

from django.utils import timezone
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.analytics.selectors import survey_analytics
from cxo_survey.audit.models import AuditLog
from cxo_survey.audit.utils import client_ip
from cxo_survey.audit.utils import log_action
from cxo_survey.notifications.mailer import MailerMixin
from cxo_survey.org.api.mixins import OrganizationScopedMixin
from cxo_survey.surveys import services
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.surveys.scoring import completion_rate
from cxo_survey.users.api.permissions import IsAdmin
from cxo_survey.users.api.permissions import IsMember

from .serializers import AnswersSerializer
from .serializers import AssignmentSerializer
from .serializers import AssignSerializer
from .serializers import CloneSerializer
from .serializers import DraftSerializer
from .serializers import FromTemplateSerializer
from .serializers import RespondentSurveySerializer
from .serializers import SurveyDetailSerializer
from .serializers import SurveySerializer
from .serializers import SurveyWriteSerializer

_TEMPLATES = Survey.objects.filter(is_template=True).select_related("created_by")


@extend_schema_view(
    list=extend_schema(tags=["Admin"]),
    retrieve=extend_schema(tags=["Admin"]),
    create=extend_schema(tags=["Admin"]),
    update=extend_schema(tags=["Admin"]),
    partial_update=extend_schema(tags=["Admin"]),
    destroy=extend_schema(tags=["Admin"]),
)
class AdminTemplateViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAdmin]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return _TEMPLATES.all()

    def get_serializer_class(self):
        if self.action in {"create", "update", "partial_update"}:
            return SurveyWriteSerializer
        if self.action == "retrieve":
            return SurveyDetailSerializer
        return SurveySerializer

    def perform_create(self, serializer):
        serializer.save(
            is_template=True,
            organization=None,
            created_by=self.request.user,
            status=Survey.Status.ACTIVE,
        )


@extend_schema_view(list=extend_schema(tags=["Surveys"]))
class TemplateViewSet(
    OrganizationScopedMixin, mixins.ListModelMixin, viewsets.GenericViewSet
):
    """Template catalogue; cloning is limited to CEOs and admins."""

    serializer_class = SurveySerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return _TEMPLATES.all()

    def get_permissions(self):
        if self.action == "clone":
            return super().get_permissions()
        return [IsAuthenticated()]

    @extend_schema(tags=["Surveys"], request=CloneSerializer)
    @action(detail=True, methods=["post"])
    def clone(self, request, pk=None):
        org = self.get_organization()
        template = self.get_object()
        ser = CloneSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        survey = services.clone_survey(
            template,
            organization=org,
            created_by=request.user,
            due_date=ser.validated_data.get("due_date"),
        )
        return Response(
            SurveyDetailSerializer(survey).data, status=status.HTTP_201_CREATED
        )


@extend_schema_view(
    list=extend_schema(tags=["CEO"]),
    create=extend_schema(tags=["CEO"]),
    destroy=extend_schema(tags=["CEO"]),
)
class CEOSurveyViewSet(
    OrganizationScopedMixin,
    MailerMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return Survey.objects.filter(
            organization=self.get_organization(), is_template=False
        ).select_related("created_by")

    def get_serializer_class(self):
        if self.action == "create":
            return SurveyWriteSerializer
        return SurveySerializer

    def list(self, request, *args, **kwargs):
        data = []
        for survey in self.get_queryset():
            assignments = survey.assignments.select_related("department")
            departments = {
                a.department_id: a.department.name
                for a in assignments
                if a.department_id is not None
            }
            data.append(
                {
                    **SurveySerializer(survey).data,
                    "assigned_departments": [
                        {"id": pk, "name": name} for pk, name in departments.items()
                    ],
                    "total_assigned": len(assignments),
                    "completed_count": sum(
                        1
                        for a in assignments
                        if a.status == SurveyAssignment.Status.COMPLETED
                    ),
                }
            )
        return Response(data)

    def perform_create(self, serializer):
        serializer.save(
            organization=self.get_organization(),
            created_by=self.request.user,
            is_template=False,
        )

    def destroy(self, request, *args, **kwargs):
        survey = self.get_object()
        snapshot = {
            "title": survey.title,
            "assignments": survey.assignments.count(),
            "responses": survey.responses.count(),
        }
        pk, organization = survey.pk, survey.organization
        survey.delete()
        log_action(
            AuditLog.Action.SURVEY_DELETE,
            actor=request.user,
            organization=organization,
            message=f"Deleted survey {snapshot['title']}",
            model_name="surveys.Survey",
            record_id=pk,
            before=snapshot,
            ip_address=client_ip(request),
        )
        return Response({"message": "Survey deleted successfully"})

    @extend_schema(tags=["CEO"], responses=SurveySerializer(many=True))
    @action(detail=False, methods=["get"])
    def templates(self, request):
        self.get_organization()
        return Response(SurveySerializer(_TEMPLATES.all(), many=True).data)

    @extend_schema(tags=["CEO"], request=FromTemplateSerializer)
    @action(detail=False, methods=["post"], url_path="from-template")
    def from_template(self, request):
        org = self.get_organization()
        ser = FromTemplateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        template = get_object_or_404(_TEMPLATES, pk=ser.validated_data["template_id"])
        survey = services.clone_survey(
            template,
            organization=org,
            created_by=request.user,
            due_date=ser.validated_data.get("due_date"),
        )
        return Response(
            SurveyDetailSerializer(survey).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(tags=["CEO"], request=AssignSerializer)
    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        org = self.get_organization()
        survey = self.get_object()
        ser = AssignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        wanted = set(ser.validated_data["department_ids"])
        departments = list(org.departments.filter(pk__in=wanted))
        if len(departments) != len(wanted):
            return Response(
                {"detail": "Department not found"}, status=status.HTTP_404_NOT_FOUND
            )
        result = services.assign_survey_to_departments(
            survey, departments, mailer=self.get_mailer()
        )
        return Response(
            {
                "message": (
                    f"Survey assigned to {len(result.created)} employees"
                    f" ({len(result.skipped)} already assigned)"
                ),
                "assignments": AssignmentSerializer(result.created, many=True).data,
                "skipped": [
                    {"id": e.pk, "name": e.name, "email": e.email}
                    for e in result.skipped
                ],
                "notified": result.notified,
            }
        )

    @extend_schema(tags=["CEO"], request=None)
    @action(detail=False, methods=["post"], url_path="sync-assignments")
    def sync_assignments(self, request):
        created = services.sync_assignments(self.get_organization())
        return Response(
            {"message": f"Created {created} missing assignments", "created": created}
        )

    @extend_schema(tags=["CEO"])
    @action(detail=True, methods=["get"])
    def analytics(self, request, pk=None):
        return Response(survey_analytics(self.get_object()))


# Respondent area ------------------------------------------------------------
def _days_left(due_date) -> int | None:
    if due_date is None:
        return None
    return ceil((due_date - timezone.now()).total_seconds() / 86400)


class AssignmentLookupMixin:
    permission_classes = [IsMember]

    def get_assignment(self, survey_id: int) -> SurveyAssignment:
        return get_object_or_404(
            SurveyAssignment.objects.select_related("survey"),
            survey_id=survey_id,
            employee=self.request.user,
        )


class UserDashboardView(APIView):
    permission_classes = [IsMember]

    @extend_schema(tags=["User"])
    def get(self, request):
        assignments = list(
            SurveyAssignment.objects.filter(employee=request.user)
            .select_related("survey")
            .order_by("-assigned_at")
        )
        pending = [
            a for a in assignments if a.status != SurveyAssignment.Status.COMPLETED
        ]
        completed = [
            a for a in assignments if a.status == SurveyAssignment.Status.COMPLETED
        ]
        return Response(
            {
                "pending": [
                    {
                        "assignment_id": a.pk,
                        "survey": SurveySerializer(a.survey).data,
                        "due_date": a.due_date,
                        "status": a.status,
                        "days_left": _days_left(a.due_date),
                    }
                    for a in pending
                ],
                "completed": [
                    {
                        "assignment_id": a.pk,
                        "survey": SurveySerializer(a.survey).data,
                        "completed_at": a.completed_at,
                    }
                    for a in completed
                ],
                "stats": {
                    "total_assigned": len(assignments),
                    "completed": len(completed),
                    "pending": len(pending),
                    "completion_rate": completion_rate(
                        len(completed), len(assignments)
                    ),
                },
            }
        )


class UserSurveyDetailView(AssignmentLookupMixin, APIView):
    @extend_schema(tags=["User"])
    def get(self, request, pk: int):
        assignment = self.get_assignment(pk)
        draft = SurveyResponse.objects.filter(
            survey_id=pk, employee=request.user, is_draft=True
        ).first()
        return Response(
            {
                "survey": RespondentSurveySerializer(assignment.survey).data,
                "assignment": AssignmentSerializer(assignment).data,
                "draft": DraftSerializer(draft).data if draft else None,
            }
        )


class UserSurveyDraftView(AssignmentLookupMixin, APIView):
    @extend_schema(tags=["User"], request=AnswersSerializer)
    def post(self, request, pk: int):
        assignment = self.get_assignment(pk)
        ser = AnswersSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        response = services.save_draft(assignment, ser.validated_data["answers"])
        return Response(
            {"message": "Draft saved", "response": DraftSerializer(response).data}
        )


class UserSurveySubmitView(AssignmentLookupMixin, APIView):
    @extend_schema(tags=["User"], request=AnswersSerializer)
    def post(self, request, pk: int):
        assignment = self.get_assignment(pk)
        ser = AnswersSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        services.submit_response(assignment, ser.validated_data["answers"])
        return Response({"message": "Survey submitted successfully"})


class UserHistoryView(APIView):
    permission_classes = [IsMember]

    @extend_schema(tags=["User"])
    def get(self, request):
        responses = (
            SurveyResponse.objects.filter(employee=request.user, is_draft=False)
            .select_related("survey")
            .order_by("-submitted_at")
        )
        return Response(
            [
                {
                    "id": r.pk,
                    "survey": {
                        "id": r.survey_id,
                        "title": r.survey.title,
                        "description": r.survey.description,
                    },
                    "submitted_at": r.submitted_at,
                }
                for r in responses
            ]
        )
