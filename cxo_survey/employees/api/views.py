from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.generics import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.audit.utils import client_ip
from cxo_survey.employees.models import Employee
from cxo_survey.employees.services import remove_employee
from cxo_survey.org.api.mixins import OrganizationScopedMixin
from cxo_survey.reports import services as reports
from cxo_survey.users.api.permissions import IsAdmin

from .serializers import EmployeeSerializer


@extend_schema_view(
    list=extend_schema(tags=["CEO"]),
    destroy=extend_schema(tags=["CEO"]),
)
class CEOEmployeeViewSet(
    OrganizationScopedMixin,
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = EmployeeSerializer
    filterset_fields = ["department", "invite_status"]

    def get_queryset(self):
        return Employee.objects.filter(
            organization=self.get_organization(), role=Employee.Role.USER
        ).select_related("department")

    def destroy(self, request, *args, **kwargs):
        employee = self.get_object()
        remove_employee(employee, actor=request.user, ip_address=client_ip(request))
        return Response({"message": "Employee removed"}, status=status.HTTP_200_OK)


class AdminEmployeeDetailView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Admin"])
    def get(self, request, pk: int):
        employee = get_object_or_404(
            Employee.objects.select_related("organization", "department"), pk=pk
        )
        return Response(
            {
                "employee": {
                    **EmployeeSerializer(employee).data,
                    "organization_name": employee.organization.name
                    if employee.organization
                    else None,
                },
                **reports.employee_results(employee),
            }
        )
