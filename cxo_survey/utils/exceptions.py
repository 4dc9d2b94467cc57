"""Domain errors and the project-wide DRF exception handler."""

from __future__ import annotations

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid request.")
    default_code = "invalid"


class InviteError(DomainError):
    default_detail = _("Invalid or expired invitation.")
    default_code = "invalid_invite"


class OTPError(DomainError):
    default_detail = _("Invalid or expired OTP.")
    default_code = "invalid_otp"


class ConflictError(DomainError):
    default_detail = _("Conflicting record exists.")
    default_code = "conflict"


class ServiceUnavailableError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("Service temporarily unavailable.")
    default_code = "service_unavailable"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response
    view = context.get("view")
    logger.exception(
        "Unhandled error in %s", type(view).__name__ if view else "request"
    )
    return Response(
        {"detail": str(exc) or "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
