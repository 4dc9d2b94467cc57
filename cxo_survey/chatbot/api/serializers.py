from rest_framework import serializers


class ChatTurnSerializer(serializers.Serializer):
    role = serializers.CharField(max_length=20)
    content = serializers.CharField(allow_blank=True)


class ChatRequestSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=4000)
    conversation_history = ChatTurnSerializer(many=True, required=False)
