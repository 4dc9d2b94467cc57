from rest_framework import serializers

from cxo_survey.employees.models import Employee
from cxo_survey.org.models import Department
from cxo_survey.org.models import Organization


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = ["id", "name", "ceo_email", "ceo_id", "status", "created_at"]
        read_only_fields = fields


class OrganizationCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    ceo_email = serializers.EmailField()

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "Organization name is required"
            raise serializers.ValidationError(msg)
        return value


class DepartmentSerializer(serializers.ModelSerializer):
    head_id = serializers.PrimaryKeyRelatedField(
        source="head",
        queryset=Employee.objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Department
        fields = ["id", "name", "organization_id", "head_id", "created_at"]
        read_only_fields = ["id", "organization_id", "created_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "Department name is required"
            raise serializers.ValidationError(msg)
        return value

    def validate_head_id(self, value):
        org = self.context.get("organization")
        if value is not None and org is not None and value.organization_id != org.pk:
            msg = "Department head must belong to your organization"
            raise serializers.ValidationError(msg)
        return value
