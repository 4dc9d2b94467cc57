from django.urls import path

from .views import ChatView
from .views import QuickRepliesView

app_name = "chatbot"

urlpatterns = [
    path("chat/", ChatView.as_view(), name="chat"),
    path("quick-replies/", QuickRepliesView.as_view(), name="quick-replies"),
]
