from django.contrib import admin

from cxo_survey.surveys import models


class QuestionOptionInline(admin.TabularInline):
    model = models.QuestionOption
    extra = 0


@admin.register(models.Survey)
class SurveyAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "organization", "is_template", "status"]
    search_fields = ["title"]
    list_filter = ["is_template", "status"]


@admin.register(models.Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ["id", "survey", "position", "question_number"]
    inlines = [QuestionOptionInline]


@admin.register(models.SurveyAssignment)
class SurveyAssignmentAdmin(admin.ModelAdmin):
    list_display = ["id", "survey", "employee", "department", "status"]
    list_filter = ["status"]


@admin.register(models.SurveyResponse)
class SurveyResponseAdmin(admin.ModelAdmin):
    list_display = ["id", "survey", "employee", "is_draft", "submitted_at"]
    list_filter = ["is_draft"]
