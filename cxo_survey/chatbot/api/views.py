import logging

from django.conf import settings
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from cxo_survey.integrations.llm.client import get_llm_client_from_settings
from cxo_survey.integrations.llm.prompts import build_chat_prompt
from cxo_survey.utils.exceptions import ServiceUnavailableError

from .serializers import ChatRequestSerializer

logger = logging.getLogger(__name__)

QUICK_REPLIES = [
    {"id": 1, "text": "How do I take a survey?", "category": "survey"},
    {"id": 2, "text": "How are scores calculated?", "category": "scoring"},
    {"id": 3, "text": "How do I invite team members?", "category": "ceo"},
    {"id": 4, "text": "What do the quadrants mean?", "category": "scoring"},
    {"id": 5, "text": "How do I create a support ticket?", "category": "support"},
    {"id": 6, "text": "I didn't receive my OTP", "category": "auth"},
]


class ChatView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    llm_client_factory = staticmethod(get_llm_client_from_settings)

    def get_llm_client(self):
        return self.llm_client_factory()

    @extend_schema(tags=["Chatbot"], request=ChatRequestSerializer)
    def post(self, request):
        ser = ChatRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        client = self.get_llm_client()
        if client is None:
            msg = "AI service not configured"
            raise ServiceUnavailableError(msg)

        prompt = build_chat_prompt(
            ser.validated_data["message"],
            ser.validated_data.get("conversation_history"),
            limit=settings.CHATBOT_HISTORY_LIMIT,
        )
        reply = client.generate_text(prompt)
        if not reply:
            logger.warning("Chatbot provider returned no reply")
            return Response(
                {"detail": "Failed to generate response"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"reply": reply, "timestamp": timezone.now().isoformat()})


class QuickRepliesView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(tags=["Chatbot"])
    def get(self, request):
        return Response({"quick_replies": QUICK_REPLIES})
