from rest_framework import serializers

from cxo_survey.invites.models import InviteLog


class InviteLogSerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(
        source="organization.name", read_only=True, default=None
    )
    department_name = serializers.CharField(
        source="department.name", read_only=True, default=None
    )
    invited_by_email = serializers.CharField(
        source="invited_by.email", read_only=True, default=None
    )

    class Meta:
        model = InviteLog
        fields = [
            "id",
            "email",
            "role",
            "status",
            "organization_id",
            "organization_name",
            "department_id",
            "department_name",
            "invited_by_email",
            "sent_at",
            "clicked_at",
            "accepted_at",
            "expires_at",
        ]
        read_only_fields = fields
