from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from cxo_survey.employees.api.views import AdminEmployeeDetailView
from cxo_survey.employees.api.views import CEOEmployeeViewSet
from cxo_survey.invites.api.views import AdminInviteListView
from cxo_survey.invites.api.views import CEOBatchInviteView
from cxo_survey.invites.api.views import CEOInviteView
from cxo_survey.invites.api.views import CEOResendInviteView
from cxo_survey.org.api.views import AdminDashboardView
from cxo_survey.org.api.views import AdminOrganizationViewSet
from cxo_survey.org.api.views import CEODashboardView
from cxo_survey.org.api.views import CEODepartmentViewSet
from cxo_survey.reports.api.views import ResponseDetailView
from cxo_survey.surveys.api.views import AdminTemplateViewSet
from cxo_survey.surveys.api.views import CEOSurveyViewSet
from cxo_survey.surveys.api.views import TemplateViewSet
from cxo_survey.surveys.api.views import UserDashboardView
from cxo_survey.surveys.api.views import UserHistoryView
from cxo_survey.surveys.api.views import UserSurveyDetailView
from cxo_survey.surveys.api.views import UserSurveyDraftView
from cxo_survey.surveys.api.views import UserSurveySubmitView

from .health import health as health_view

# Admin area -----------------------------------------------------------------
admin_router = SimpleRouter()
admin_router.register(
    "organizations", AdminOrganizationViewSet, basename="organization"
)
admin_router.register("surveys/templates", AdminTemplateViewSet, basename="template")

admin_urlpatterns = [
    path("dashboard/", AdminDashboardView.as_view(), name="dashboard"),
    path("invites/", AdminInviteListView.as_view(), name="invites"),
    path(
        "responses/<int:pk>/",
        ResponseDetailView.as_view(),
        name="response-detail",
    ),
    path("users/<int:pk>/", AdminEmployeeDetailView.as_view(), name="user-detail"),
    # Singular alias kept for clients posting a single template.
    path(
        "surveys/template/",
        AdminTemplateViewSet.as_view({"post": "create"}),
        name="template-create",
    ),
    path(
        "audit/",
        include(("cxo_survey.audit.api.urls", "audit"), namespace="audit"),
    ),
    *admin_router.urls,
]

# CEO area -------------------------------------------------------------------
ceo_router = SimpleRouter()
ceo_router.register("departments", CEODepartmentViewSet, basename="department")
ceo_router.register("employees", CEOEmployeeViewSet, basename="employee")
ceo_router.register("surveys", CEOSurveyViewSet, basename="survey")

ceo_urlpatterns = [
    path("dashboard/", CEODashboardView.as_view(), name="dashboard"),
    path("invite/", CEOInviteView.as_view(), name="invite"),
    path("invite/batch/", CEOBatchInviteView.as_view(), name="invite-batch"),
    path(
        "invite/<int:pk>/resend/",
        CEOResendInviteView.as_view(),
        name="invite-resend",
    ),
    *ceo_router.urls,
]

# Respondent area ------------------------------------------------------------
user_urlpatterns = [
    path("dashboard/", UserDashboardView.as_view(), name="dashboard"),
    path("surveys/<int:pk>/", UserSurveyDetailView.as_view(), name="survey-detail"),
    path(
        "surveys/<int:pk>/draft/",
        UserSurveyDraftView.as_view(),
        name="survey-draft",
    ),
    path(
        "surveys/<int:pk>/submit/",
        UserSurveySubmitView.as_view(),
        name="survey-submit",
    ),
    path("history/", UserHistoryView.as_view(), name="history"),
]

# Shared template catalogue --------------------------------------------------
surveys_router = SimpleRouter()
surveys_router.register("templates", TemplateViewSet, basename="template")


app_name = "api"
urlpatterns = [
    path("health/", health_view, name="health"),
    path(
        "auth/",
        include(("cxo_survey.users.api.auth_urls", "auth"), namespace="auth"),
    ),
    path("admin/", include((admin_urlpatterns, "admin"), namespace="admin")),
    path("ceo/", include((ceo_urlpatterns, "ceo"), namespace="ceo")),
    path("user/", include((user_urlpatterns, "user"), namespace="user")),
    path(
        "surveys/",
        include((surveys_router.urls, "surveys"), namespace="surveys"),
    ),
    path(
        "analytics/",
        include(("cxo_survey.analytics.api.urls", "analytics"), namespace="analytics"),
    ),
    path(
        "reports/",
        include(("cxo_survey.reports.api.urls", "reports"), namespace="reports"),
    ),
    path(
        "support/",
        include(("cxo_survey.support.api.urls", "support"), namespace="support"),
    ),
    path(
        "chatbot/",
        include(("cxo_survey.chatbot.api.urls", "chatbot"), namespace="chatbot"),
    ),
]
