from django.contrib.auth import get_user_model
from rest_framework import serializers

from cxo_survey.support.models import SupportTicket
from cxo_survey.support.models import TicketMessage

User = get_user_model()


class ParticipantSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role"]


class TicketMessageSerializer(serializers.ModelSerializer):
    sender = ParticipantSerializer(read_only=True)

    class Meta:
        model = TicketMessage
        fields = ["id", "sender", "sender_role", "message", "created_at"]
        read_only_fields = fields


class SupportTicketSerializer(serializers.ModelSerializer):
    created_by = ParticipantSerializer(read_only=True)
    assigned_to = ParticipantSerializer(read_only=True)
    organization_name = serializers.CharField(
        source="organization.name", read_only=True, default=None
    )

    class Meta:
        model = SupportTicket
        fields = [
            "id",
            "ticket_number",
            "subject",
            "category",
            "priority",
            "status",
            "created_by",
            "created_by_role",
            "organization_id",
            "organization_name",
            "assigned_to",
            "created_at",
            "updated_at",
            "resolved_at",
        ]
        read_only_fields = fields


class SupportTicketDetailSerializer(SupportTicketSerializer):
    messages = TicketMessageSerializer(many=True, read_only=True)

    class Meta(SupportTicketSerializer.Meta):
        fields = [*SupportTicketSerializer.Meta.fields, "messages"]
        read_only_fields = fields


class TicketCreateSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=255)
    message = serializers.CharField()
    category = serializers.ChoiceField(
        choices=SupportTicket.Category.choices,
        default=SupportTicket.Category.OTHER,
    )
    priority = serializers.ChoiceField(
        choices=SupportTicket.Priority.choices,
        default=SupportTicket.Priority.MEDIUM,
    )


class TicketMessageCreateSerializer(serializers.Serializer):
    message = serializers.CharField()


class TicketUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=SupportTicket.Status.choices, required=False
    )
    priority = serializers.ChoiceField(
        choices=SupportTicket.Priority.choices, required=False
    )
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role="admin"), required=False, allow_null=True
    )
