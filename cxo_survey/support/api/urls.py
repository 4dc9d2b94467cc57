from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from cxo_survey.support.api.views import AdminTicketViewSet
from cxo_survey.support.api.views import SupportTicketViewSet

router = SimpleRouter()
router.register("tickets", SupportTicketViewSet, basename="ticket")
router.register("admin/tickets", AdminTicketViewSet, basename="admin-ticket")

app_name = "support"
urlpatterns = [
    path("", include(router.urls)),
]
