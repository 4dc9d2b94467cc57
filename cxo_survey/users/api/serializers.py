from rest_framework import serializers

from cxo_survey.employees.models import Employee
from cxo_survey.invites.models import OneTimePassword


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value: str) -> str:
        return value.strip().lower()


class VerifyOTPSerializer(EmailSerializer):
    otp = serializers.CharField(max_length=6, trim_whitespace=True)


class ResendOTPSerializer(EmailSerializer):
    purpose = serializers.ChoiceField(
        choices=OneTimePassword.Purpose.choices,
        default=OneTimePassword.Purpose.LOGIN,
    )


class InviteTokenSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64, trim_whitespace=True)


class SignupVerifySerializer(InviteTokenSerializer):
    otp = serializers.CharField(max_length=6, trim_whitespace=True)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    password = serializers.CharField(
        required=False, allow_blank=True, write_only=True, trim_whitespace=False
    )


class MeSerializer(serializers.ModelSerializer):
    org_id = serializers.IntegerField(source="organization_id", read_only=True)
    org_name = serializers.CharField(
        source="organization.name", read_only=True, default=None
    )
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
            "org_id",
            "org_name",
            "department_id",
            "department_name",
            "invite_status",
            "accepted_at",
            "last_login",
        ]
        read_only_fields = fields
