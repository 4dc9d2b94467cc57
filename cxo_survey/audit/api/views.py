from __future__ import annotations

from typing import TYPE_CHECKING

from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.audit.api.serializers import AuditLogSerializer
from cxo_survey.audit.models import AuditLog
from cxo_survey.users.api.permissions import IsAdmin

if TYPE_CHECKING:
    from django.db.models import QuerySet


class RecentAuditView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Admin"], responses=AuditLogSerializer(many=True))
    def get(self, request):
        try:
            limit = int(request.query_params.get("limit", "5"))
        except (TypeError, ValueError):
            limit = 5
        limit = max(1, min(limit, 50))

        qs: QuerySet[AuditLog] = AuditLog.objects.select_related("actor").all()
        organization = request.query_params.get("organization", "")
        if organization.isdigit():
            qs = qs.filter(organization_id=int(organization))
        rows = list(qs[:limit])
        data = AuditLogSerializer(rows, many=True).data
        return Response({"results": data, "limit": limit})
