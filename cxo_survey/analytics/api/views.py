from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.analytics import selectors
from cxo_survey.org.api.mixins import OrganizationScopedMixin
from cxo_survey.org.models import Organization
from cxo_survey.users.api.permissions import IsAdmin


class GlobalAnalyticsView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Analytics"])
    def get(self, request):
        organizations = []
        for org in Organization.objects.all():
            stats = selectors.org_summary_stats(org)
            organizations.append(
                {"id": org.pk, "name": org.name, "status": org.status, **stats}
            )
        overview = selectors.global_overview()
        return Response(
            {
                **overview,
                "average_completion_rate": overview["completion_rate"],
                "organizations": organizations,
                "trend": selectors.completion_trend(),
            }
        )


class OrganizationAnalyticsView(OrganizationScopedMixin, APIView):
    @extend_schema(tags=["Analytics"])
    def get(self, request):
        org = self.get_organization()
        return Response(
            {
                "organization": {"id": org.pk, "name": org.name},
                "stats": selectors.org_detail_stats(org),
                "departments": selectors.department_rows(org),
                "surveys": selectors.survey_rows(org),
                "trend": selectors.completion_trend(org),
            }
        )
