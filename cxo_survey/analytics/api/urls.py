from django.urls import path

from .views import GlobalAnalyticsView
from .views import OrganizationAnalyticsView

app_name = "analytics"
urlpatterns = [
    path("global/", GlobalAnalyticsView.as_view(), name="global"),
    path("organization/", OrganizationAnalyticsView.as_view(), name="organization"),
]
