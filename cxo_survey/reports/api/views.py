from drf_spectacular.utils import extend_schema
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.org.models import Organization
from cxo_survey.reports import services
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.users.api.permissions import IsAdmin


class _ReportView(APIView):
    permission_classes = [IsAdmin]


class OrganizationReportView(_ReportView):
    @extend_schema(tags=["Reports"])
    def get(self, request, pk: int):
        org = get_object_or_404(Organization, pk=pk)
        return Response(services.organization_report(org))


class SurveyReportView(_ReportView):
    @extend_schema(tags=["Reports"])
    def get(self, request, pk: int):
        survey = get_object_or_404(Survey, pk=pk, is_template=False)
        return Response(services.survey_report(survey))


class ResponseDetailView(_ReportView):
    @extend_schema(tags=["Admin"])
    def get(self, request, pk: int):
        response = get_object_or_404(
            SurveyResponse.objects.select_related("survey", "employee", "department"),
            pk=pk,
        )
        return Response(services.response_detail(response))
