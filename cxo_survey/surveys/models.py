from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Aspect(models.TextChoices):
    PRESENT = "present", _("Present")
    FUTURE = "future", _("Future")


class Survey(models.Model):
    """Either a global template (no organization) or an org-owned instance."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        ACTIVE = "active", _("Active")
        CLOSED = "closed", _("Closed")

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="surveys",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_surveys",
    )
    is_template = models.BooleanField(default=False)
    due_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.DRAFT
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


class Question(models.Model):
    survey = models.ForeignKey(
        Survey, on_delete=models.CASCADE, related_name="questions"
    )
    position = models.PositiveIntegerField(default=0)
    question_number = models.CharField(max_length=20, blank=True, default="")
    text = models.TextField()
    required = models.BooleanField(default=True)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.question_number or self.position}: {self.text[:40]}"


class QuestionOption(models.Model):
    question = models.ForeignKey(
        Question, on_delete=models.CASCADE, related_name="options"
    )
    aspect = models.CharField(max_length=10, choices=Aspect.choices)
    position = models.PositiveIntegerField(default=0)
    text = models.TextField()
    creativity_marks = models.PositiveSmallIntegerField(default=0)
    morality_marks = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["aspect", "position"]
        constraints = [
            models.UniqueConstraint(
                fields=["question", "aspect", "position"],
                name="unique_option_index_per_aspect",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.aspect}[{self.position}] {self.text[:30]}"


class SurveyAssignment(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        IN_PROGRESS = "in_progress", _("In progress")
        COMPLETED = "completed", _("Completed")

    survey = models.ForeignKey(
        Survey, on_delete=models.CASCADE, related_name="assignments"
    )
    organization = models.ForeignKey(
        "org.Organization", on_delete=models.CASCADE, related_name="assignments"
    )
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments",
    )
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assignments",
    )
    status = models.CharField(
        max_length=15, choices=Status.choices, default=Status.PENDING
    )
    due_date = models.DateTimeField(null=True, blank=True)
    assigned_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-assigned_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["survey", "employee"], name="unique_assignment_per_employee"
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Assignment(survey={self.survey_id}, employee={self.employee_id})"


class SurveyResponse(models.Model):
    """One row per (survey, employee); drafts and submissions share it."""

    survey = models.ForeignKey(
        Survey, on_delete=models.CASCADE, related_name="responses"
    )
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="survey_responses",
    )
    organization = models.ForeignKey(
        "org.Organization", on_delete=models.CASCADE, related_name="responses"
    )
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="responses",
    )
    present_creativity_total = models.PositiveIntegerField(default=0)
    present_morality_total = models.PositiveIntegerField(default=0)
    present_creativity_percentage = models.DecimalField(
        max_digits=4, decimal_places=1, default=0
    )
    present_morality_percentage = models.DecimalField(
        max_digits=4, decimal_places=1, default=0
    )
    present_creativity_band = models.CharField(max_length=20, blank=True, default="")
    present_morality_band = models.CharField(max_length=20, blank=True, default="")
    future_creativity_total = models.PositiveIntegerField(default=0)
    future_morality_total = models.PositiveIntegerField(default=0)
    future_creativity_percentage = models.DecimalField(
        max_digits=4, decimal_places=1, default=0
    )
    future_morality_percentage = models.DecimalField(
        max_digits=4, decimal_places=1, default=0
    )
    future_creativity_band = models.CharField(max_length=20, blank=True, default="")
    future_morality_band = models.CharField(max_length=20, blank=True, default="")
    is_draft = models.BooleanField(default=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-submitted_at", "-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["survey", "employee"], name="unique_response_per_employee"
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Response(survey={self.survey_id}, employee={self.employee_id})"


class ResponseAnswer(models.Model):
    response = models.ForeignKey(
        SurveyResponse, on_delete=models.CASCADE, related_name="answers"
    )
    question = models.ForeignKey(
        Question, on_delete=models.CASCADE, related_name="answers"
    )
    question_number = models.CharField(max_length=20, blank=True, default="")
    present_option_index = models.PositiveSmallIntegerField(null=True, blank=True)
    present_creativity_marks = models.PositiveSmallIntegerField(default=0)
    present_morality_marks = models.PositiveSmallIntegerField(default=0)
    future_option_index = models.PositiveSmallIntegerField(null=True, blank=True)
    future_creativity_marks = models.PositiveSmallIntegerField(default=0)
    future_morality_marks = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["question__position", "question__id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Answer(response={self.response_id}, question={self.question_id})"
