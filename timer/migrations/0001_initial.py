import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tasks', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Action',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('start_time', models.DateTimeField(default=django.utils.timezone.now)),
                ('end_time', models.DateTimeField(blank=True, null=True)),
                ('user_start_time', models.DateTimeField(blank=True)),
                ('user_end_time', models.DateTimeField(blank=True, null=True)),
                ('note', models.TextField(blank=True, default='Focus')),
                ('is_completed', models.BooleanField(default=False)),
                ('action_type', models.CharField(choices=[('pomodoro', 'Pomodoro'), ('habit', 'Habit')], default='pomodoro', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='actions', to=settings.AUTH_USER_MODEL)),
                ('task', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='actions', to='tasks.task')),
            ],
            options={
                'ordering': ['-start_time'],
                'indexes': [
                    models.Index(fields=['owner', 'user_start_time'], name='timer_action_owner_start_idx'),
                    models.Index(fields=['task', 'is_completed'], name='timer_action_task_done_idx'),
                ],
            },
        ),
    ]
