from django.urls import path

from .auth_views import GoogleCompleteView
from .auth_views import GoogleLoginView
from .auth_views import LoginSendOTPView
from .auth_views import LoginVerifyOTPView
from .auth_views import MeView
from .auth_views import ResendOTPView
from .auth_views import SignupSendOTPView
from .auth_views import SignupVerifyOTPView
from .auth_views import VerifyInviteView

app_name = "auth"

urlpatterns = [
    path("login/send-otp/", LoginSendOTPView.as_view(), name="login-send-otp"),
    path("login/verify-otp/", LoginVerifyOTPView.as_view(), name="login-verify-otp"),
    path("resend-otp/", ResendOTPView.as_view(), name="resend-otp"),
    path(
        "verify-invite/<str:token>/",
        VerifyInviteView.as_view(),
        name="verify-invite",
    ),
    path("signup/send-otp/", SignupSendOTPView.as_view(), name="signup-send-otp"),
    path(
        "signup/verify-otp/",
        SignupVerifyOTPView.as_view(),
        name="signup-verify-otp",
    ),
    path("google/", GoogleLoginView.as_view(), name="google"),
    path("google/complete/", GoogleCompleteView.as_view(), name="google-complete"),
    path("me/", MeView.as_view(), name="me"),
]
