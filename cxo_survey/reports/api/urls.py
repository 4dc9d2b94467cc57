from django.urls import path

from .views import OrganizationReportView
from .views import SurveyReportView

app_name = "reports"
urlpatterns = [
    path(
        "organizations/<int:pk>/",
        OrganizationReportView.as_view(),
        name="organization",
    ),
    path("surveys/<int:pk>/", SurveyReportView.as_view(), name="survey"),
]
