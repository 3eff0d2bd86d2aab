import datetime

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import tasks.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(default='New task', max_length=255)),
                ('color', models.CharField(default=tasks.models.random_task_color, max_length=7)),
                ('task_type', models.CharField(choices=[('project', 'Project task'), ('habit', 'Habit')], default='project', max_length=10)),
                ('is_default', models.BooleanField(default=False)),
                ('daily_goal', models.PositiveIntegerField(blank=True, null=True)),
                ('total_actions', models.PositiveIntegerField(default=0)),
                ('total_duration', models.DurationField(default=datetime.timedelta)),
                ('first_action_at', models.DateTimeField(blank=True, null=True)),
                ('last_action_at', models.DateTimeField(blank=True, null=True)),
                ('current_streak', models.PositiveIntegerField(default=0)),
                ('longest_streak', models.PositiveIntegerField(default=0)),
                ('today_completed_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to=settings.AUTH_USER_MODEL)),
                ('project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='tasks', to='projects.project')),
            ],
            options={
                'ordering': ['-is_default', 'created_at'],
            },
        ),
    ]
