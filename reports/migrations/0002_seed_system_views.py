from django.db import migrations

from reports.system_views import seed_system_views


def create_system_views(apps, schema_editor):
    seed_system_views(model=apps.get_model('reports', 'ReportView'))


def remove_system_views(apps, schema_editor):
    apps.get_model('reports', 'ReportView').objects.filter(is_system=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('reports', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_system_views, remove_system_views),
    ]
