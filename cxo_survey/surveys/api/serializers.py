from django.db import transaction
from rest_framework import serializers

from cxo_survey.surveys.models import Aspect
from cxo_survey.surveys.models import Question
from cxo_survey.surveys.models import QuestionOption
from cxo_survey.surveys.models import ResponseAnswer
from cxo_survey.surveys.models import Survey
from cxo_survey.surveys.models import SurveyAssignment
from cxo_survey.surveys.models import SurveyResponse
from cxo_survey.surveys.scoring import MAX_MARKS_PER_QUESTION
from cxo_survey.surveys.services import write_questions


# Write side -----------------------------------------------------------------
class OptionWriteSerializer(serializers.Serializer):
    text = serializers.CharField()
    creativity_marks = serializers.IntegerField(
        min_value=0, max_value=MAX_MARKS_PER_QUESTION, default=0
    )
    morality_marks = serializers.IntegerField(
        min_value=0, max_value=MAX_MARKS_PER_QUESTION, default=0
    )


class QuestionWriteSerializer(serializers.Serializer):
    text = serializers.CharField()
    question_number = serializers.CharField(
        max_length=20, required=False, allow_blank=True
    )
    required = serializers.BooleanField(default=True)
    position = serializers.IntegerField(min_value=0, required=False)
    present_options = OptionWriteSerializer(many=True, required=False)
    future_options = OptionWriteSerializer(many=True, required=False)


class SurveyWriteSerializer(serializers.ModelSerializer):
    """Survey with its full nested question set; updates replace the set."""

    questions = QuestionWriteSerializer(many=True, required=False)

    class Meta:
        model = Survey
        fields = ["id", "title", "description", "due_date", "questions"]
        read_only_fields = ["id"]

    def create(self, validated_data):
        questions = validated_data.pop("questions", [])
        with transaction.atomic():
            survey = Survey.objects.create(**validated_data)
            write_questions(survey, questions)
        return survey

    def update(self, instance, validated_data):
        questions = validated_data.pop("questions", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if questions is not None:
                write_questions(instance, questions)
        return instance

    def to_representation(self, instance):
        return SurveyDetailSerializer(instance, context=self.context).data


class FromTemplateSerializer(serializers.Serializer):
    template_id = serializers.IntegerField()
    due_date = serializers.DateTimeField(required=False, allow_null=True)


class CloneSerializer(serializers.Serializer):
    due_date = serializers.DateTimeField(required=False, allow_null=True)


class AssignSerializer(serializers.Serializer):
    department_ids = serializers.ListField(
        child=serializers.IntegerField(), allow_empty=False
    )


class AnswerSerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    present_option_index = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )
    future_option_index = serializers.IntegerField(
        min_value=0, required=False, allow_null=True
    )


class AnswersSerializer(serializers.Serializer):
    answers = AnswerSerializer(many=True)


# Read side ------------------------------------------------------------------
class OptionSerializer(serializers.ModelSerializer):
    index = serializers.IntegerField(source="position")

    class Meta:
        model = QuestionOption
        fields = ["index", "text", "creativity_marks", "morality_marks"]


class OptionTextSerializer(serializers.ModelSerializer):
    """Option as shown to respondents; marks are never exposed."""

    index = serializers.IntegerField(source="position")

    class Meta:
        model = QuestionOption
        fields = ["index", "text"]


class QuestionSerializer(serializers.ModelSerializer):
    option_serializer_class = OptionSerializer

    present_options = serializers.SerializerMethodField()
    future_options = serializers.SerializerMethodField()

    class Meta:
        model = Question
        fields = [
            "id",
            "position",
            "question_number",
            "text",
            "required",
            "present_options",
            "future_options",
        ]

    def _options(self, obj, aspect):
        options = [o for o in obj.options.all() if o.aspect == aspect]
        return self.option_serializer_class(options, many=True).data

    def get_present_options(self, obj):
        return self._options(obj, Aspect.PRESENT.value)

    def get_future_options(self, obj):
        return self._options(obj, Aspect.FUTURE.value)


class RespondentQuestionSerializer(QuestionSerializer):
    option_serializer_class = OptionTextSerializer


class SurveySerializer(serializers.ModelSerializer):
    question_count = serializers.SerializerMethodField()
    created_by_name = serializers.CharField(
        source="created_by.name", read_only=True, default=None
    )

    class Meta:
        model = Survey
        fields = [
            "id",
            "title",
            "description",
            "organization_id",
            "is_template",
            "status",
            "due_date",
            "created_by_name",
            "question_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_question_count(self, obj) -> int:
        return obj.questions.count()


class SurveyDetailSerializer(SurveySerializer):
    questions = serializers.SerializerMethodField()
    question_serializer_class = QuestionSerializer

    class Meta(SurveySerializer.Meta):
        fields = [*SurveySerializer.Meta.fields, "questions"]
        read_only_fields = fields

    def get_questions(self, obj):
        questions = obj.questions.prefetch_related("options")
        return self.question_serializer_class(questions, many=True).data


class RespondentSurveySerializer(SurveyDetailSerializer):
    question_serializer_class = RespondentQuestionSerializer


class AssignmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SurveyAssignment
        fields = [
            "id",
            "survey_id",
            "department_id",
            "employee_id",
            "status",
            "due_date",
            "assigned_at",
            "completed_at",
        ]
        read_only_fields = fields


class DraftAnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = ResponseAnswer
        fields = ["question_id", "present_option_index", "future_option_index"]


class DraftSerializer(serializers.ModelSerializer):
    answers = DraftAnswerSerializer(many=True, read_only=True)

    class Meta:
        model = SurveyResponse
        fields = ["id", "survey_id", "is_draft", "updated_at", "answers"]
        read_only_fields = fields
