from django.db import migrations

from apps.core.seeds import seed_reference_data


def forwards(apps, schema_editor):
    Status = apps.get_model('core', 'Status')
    LeadSource = apps.get_model('core', 'LeadSource')
    seed_reference_data(Status, LeadSource)


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(forwards, migrations.RunPython.noop),
    ]
