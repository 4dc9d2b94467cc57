from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('org', '0002_organization_ceo_department_head'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Survey',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('is_template', models.BooleanField(default=False)),
                ('due_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('active', 'Active'), ('closed', 'Closed')], default='draft', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_surveys', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='surveys', to='org.organization')),
            ],
            options={'ordering': ['-created_at']},
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField(default=0)),
                ('question_number', models.CharField(blank=True, default='', max_length=20)),
                ('text', models.TextField()),
                ('required', models.BooleanField(default=True)),
                ('survey', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='surveys.survey')),
            ],
            options={'ordering': ['position', 'id']},
        ),
        migrations.CreateModel(
            name='QuestionOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('aspect', models.CharField(choices=[('present', 'Present'), ('future', 'Future')], max_length=10)),
                ('position', models.PositiveIntegerField(default=0)),
                ('text', models.TextField()),
                ('creativity_marks', models.PositiveSmallIntegerField(default=0)),
                ('morality_marks', models.PositiveSmallIntegerField(default=0)),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='surveys.question')),
            ],
            options={'ordering': ['aspect', 'position']},
        ),
        migrations.AddConstraint(
            model_name='questionoption',
            constraint=models.UniqueConstraint(fields=('question', 'aspect', 'position'), name='unique_option_index_per_aspect'),
        ),
        migrations.CreateModel(
            name='SurveyAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In progress'), ('completed', 'Completed')], default='pending', max_length=15)),
                ('due_date', models.DateTimeField(blank=True, null=True)),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assignments', to='org.department')),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='org.organization')),
                ('survey', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='surveys.survey')),
            ],
            options={'ordering': ['-assigned_at']},
        ),
        migrations.AddConstraint(
            model_name='surveyassignment',
            constraint=models.UniqueConstraint(fields=('survey', 'employee'), name='unique_assignment_per_employee'),
        ),
        migrations.CreateModel(
            name='SurveyResponse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('present_creativity_total', models.PositiveIntegerField(default=0)),
                ('present_morality_total', models.PositiveIntegerField(default=0)),
                ('present_creativity_percentage', models.DecimalField(decimal_places=1, default=0, max_digits=4)),
                ('present_morality_percentage', models.DecimalField(decimal_places=1, default=0, max_digits=4)),
                ('present_creativity_band', models.CharField(blank=True, default='', max_length=20)),
                ('present_morality_band', models.CharField(blank=True, default='', max_length=20)),
                ('future_creativity_total', models.PositiveIntegerField(default=0)),
                ('future_morality_total', models.PositiveIntegerField(default=0)),
                ('future_creativity_percentage', models.DecimalField(decimal_places=1, default=0, max_digits=4)),
                ('future_morality_percentage', models.DecimalField(decimal_places=1, default=0, max_digits=4)),
                ('future_creativity_band', models.CharField(blank=True, default='', max_length=20)),
                ('future_morality_band', models.CharField(blank=True, default='', max_length=20)),
                ('is_draft', models.BooleanField(default=True)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='responses', to='org.department')),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='survey_responses', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='org.organization')),
                ('survey', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='responses', to='surveys.survey')),
            ],
            options={'ordering': ['-submitted_at', '-updated_at']},
        ),
        migrations.AddConstraint(
            model_name='surveyresponse',
            constraint=models.UniqueConstraint(fields=('survey', 'employee'), name='unique_response_per_employee'),
        ),
        migrations.CreateModel(
            name='ResponseAnswer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('question_number', models.CharField(blank=True, default='', max_length=20)),
                ('present_option_index', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('present_creativity_marks', models.PositiveSmallIntegerField(default=0)),
                ('present_morality_marks', models.PositiveSmallIntegerField(default=0)),
                ('future_option_index', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('future_creativity_marks', models.PositiveSmallIntegerField(default=0)),
                ('future_morality_marks', models.PositiveSmallIntegerField(default=0)),
                ('question', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to='surveys.question')),
                ('response', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to='surveys.surveyresponse')),
            ],
            options={'ordering': ['question__position', 'question__id']},
        ),
    ]
