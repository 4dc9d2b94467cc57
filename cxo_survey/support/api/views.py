from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import BasePermission
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from cxo_survey.audit.utils import client_ip
from cxo_survey.support import services
from cxo_survey.support.models import SupportTicket
from cxo_survey.users.api.permissions import IsAdmin

from .filters import SupportTicketFilter
from .serializers import SupportTicketDetailSerializer
from .serializers import SupportTicketSerializer
from .serializers import TicketCreateSerializer
from .serializers import TicketMessageCreateSerializer
from .serializers import TicketUpdateSerializer

_TICKETS = SupportTicket.objects.select_related(
    "created_by", "assigned_to", "organization"
)


class IsTicketOwnerOrAdmin(BasePermission):
    message = "Access denied"

    def has_object_permission(self, request, view, obj) -> bool:
        user = request.user
        return bool(user.is_admin or obj.created_by_id == user.pk)


@extend_schema_view(
    list=extend_schema(tags=["Support"]),
    retrieve=extend_schema(tags=["Support"]),
    create=extend_schema(tags=["Support"], request=TicketCreateSerializer),
)
class SupportTicketViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, IsTicketOwnerOrAdmin]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        if self.action in {"retrieve", "messages"}:
            # Foreign tickets must answer 403, not 404.
            return _TICKETS.all()
        if self.request.user.is_admin:
            return _TICKETS.all()
        return _TICKETS.filter(created_by=self.request.user)

    def get_serializer_class(self):
        if self.action == "retrieve":
            return SupportTicketDetailSerializer
        return SupportTicketSerializer

    def create(self, request, *args, **kwargs):
        ser = TicketCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        ticket = services.open_ticket(request.user, **ser.validated_data)
        return Response(
            SupportTicketDetailSerializer(ticket).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(tags=["Support"], request=TicketMessageCreateSerializer)
    @action(detail=True, methods=["post"])
    def messages(self, request, pk=None):
        ticket = self.get_object()
        ser = TicketMessageCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        services.add_message(ticket, request.user, ser.validated_data["message"])
        ticket.refresh_from_db()
        return Response(SupportTicketDetailSerializer(ticket).data)


@extend_schema_view(
    list=extend_schema(tags=["Support"]),
    partial_update=extend_schema(tags=["Support"], request=TicketUpdateSerializer),
)
class AdminTicketViewSet(
    mixins.ListModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = _TICKETS.all()
    serializer_class = SupportTicketSerializer
    permission_classes = [IsAdmin]
    filterset_class = SupportTicketFilter
    http_method_names = ["get", "patch", "head", "options"]
    lookup_value_regex = r"\d+"

    def list(self, request, *args, **kwargs):
        tickets = self.filter_queryset(self.get_queryset())
        return Response(
            {
                "tickets": SupportTicketSerializer(tickets, many=True).data,
                "stats": services.ticket_stats(),
            }
        )

    def partial_update(self, request, *args, **kwargs):
        ticket = self.get_object()
        ser = TicketUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        services.update_ticket(
            ticket,
            dict(ser.validated_data),
            actor=request.user,
            ip_address=client_ip(request),
        )
        return Response(SupportTicketDetailSerializer(ticket).data)
