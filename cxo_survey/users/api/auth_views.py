"""Passwordless authentication: email OTP, invite signup and Google OAuth."""

import logging
from urllib.parse import urlencode

from django.contrib.auth import logout
from django.shortcuts import redirect
from django.urls import reverse
from django.views import View
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.invites import services as invites
from cxo_survey.notifications.mailer import MailerMixin
from cxo_survey.notifications.mailer import frontend_url
from cxo_survey.users.tokens import complete_login
from cxo_survey.users.tokens import issue_access_token
from cxo_survey.utils.exceptions import InviteError

from .serializers import EmailSerializer
from .serializers import InviteTokenSerializer
from .serializers import MeSerializer
from .serializers import ResendOTPSerializer
from .serializers import SignupVerifySerializer
from .serializers import VerifyOTPSerializer

logger = logging.getLogger(__name__)


class _PublicAuthView(MailerMixin, APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []


@extend_schema(tags=["Authentication"], request=EmailSerializer)
class LoginSendOTPView(_PublicAuthView):
    def post(self, request):
        ser = EmailSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        employee = invites.request_login_otp(
            ser.validated_data["email"], mailer=self.get_mailer()
        )
        return Response({"message": "OTP sent to your email", "email": employee.email})


@extend_schema(tags=["Authentication"], request=VerifyOTPSerializer)
class LoginVerifyOTPView(_PublicAuthView):
    def post(self, request):
        ser = VerifyOTPSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        employee = invites.verify_login_otp(
            ser.validated_data["email"], ser.validated_data["otp"]
        )
        return Response(complete_login(request, employee))


@extend_schema(tags=["Authentication"], request=ResendOTPSerializer)
class ResendOTPView(_PublicAuthView):
    def post(self, request):
        ser = ResendOTPSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        invites.issue_otp(
            ser.validated_data["email"],
            ser.validated_data["purpose"],
            mailer=self.get_mailer(),
        )
        return Response({"message": "OTP resent successfully"})


@extend_schema(tags=["Authentication"], request=None)
class VerifyInviteView(_PublicAuthView):
    def get(self, request, token: str):
        try:
            invite = invites.mark_invite_clicked(token)
        except InviteError as exc:
            return Response(
                {"valid": False, "detail": str(exc.detail)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(
            {
                "valid": True,
                "email": invite.email,
                "role": invite.role,
                "org_name": invite.organization.name if invite.organization else None,
                "department_name": invite.department.name
                if invite.department
                else None,
            }
        )


@extend_schema(tags=["Authentication"], request=InviteTokenSerializer)
class SignupSendOTPView(_PublicAuthView):
    def post(self, request):
        ser = InviteTokenSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        invite = invites.signup_send_otp(
            ser.validated_data["token"], mailer=self.get_mailer()
        )
        return Response({"message": "OTP sent to your email", "email": invite.email})


@extend_schema(tags=["Authentication"], request=SignupVerifySerializer)
class SignupVerifyOTPView(_PublicAuthView):
    def post(self, request):
        ser = SignupVerifySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        employee = invites.signup_verify_otp(
            data["token"],
            data["otp"],
            name=data.get("name", ""),
            password=data.get("password") or None,
        )
        return Response(
            complete_login(request, employee, method="signup"),
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Authentication"], responses=MeSerializer)
class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


class GoogleLoginView(View):
    """Hand the browser to the Google provider flow."""

    def get(self, request):
        query = urlencode(
            {"process": "login", "next": reverse("api:auth:google-complete")}
        )
        return redirect(f"{reverse('google_login')}?{query}")


class GoogleCompleteView(View):
    """Exchange the OAuth session for a bearer token and return to the frontend."""

    def get(self, request):
        user = request.user
        if not user.is_authenticated:
            return redirect(frontend_url("/login?error=google_auth_failed"))
        token = issue_access_token(user)
        logout(request)
        logger.info("Google login completed for %s", user.email)
        return redirect(frontend_url(f"/auth/callback?{urlencode({'token': token})}"))
