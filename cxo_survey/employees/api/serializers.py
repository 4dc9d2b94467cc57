from rest_framework import serializers

from cxo_survey.employees.models import Employee


class EmployeeSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(
        source="department.name", read_only=True, default=None
    )

    class Meta:
        model = Employee
        fields = [
            "id",
            "name",
            "email",
            "role",
            "organization_id",
            "department_id",
            "department_name",
            "invite_status",
            "accepted_at",
            "is_active",
            "last_login",
            "created_at",
        ]
        read_only_fields = fields


class InviteEmployeeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)


class BatchInviteSerializer(serializers.Serializer):
    employees = serializers.ListField(
        child=serializers.DictField(), allow_empty=False
    )
