from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Project',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Human-readable project name', max_length=255)),
                ('is_billable', models.BooleanField(default=False, help_text='Whether time spent on this project is billed')),
                ('hourly_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Rate applied per hour when the project is billable', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('monthly_budget_limit', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Monthly budget cap (0 means not set)', max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, help_text='User who owns the project', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='projects', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Project',
                'verbose_name_plural': 'Projects',
                'ordering': ['-created_at'],
            },
        ),
    ]
