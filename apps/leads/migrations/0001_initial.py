import django.db.models.deletion
import django.utils.timezone
import taggit.managers
import uuid
from django.conf import settings
from django.db import migrations, models


VALUE_TIER_CHOICES = [('high', 'High Value'), ('medium', 'Medium Value'), ('low', 'Low Value')]
SUBSTATUS_CHOICES = [('hot', 'Hot'), ('warm', 'Warm'), ('cif', 'CIF')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('taggit', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Lead',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lead_code', models.CharField(blank=True, editable=False, help_text='Sequential reference, e.g. LEAD000042', max_length=20, null=True, unique=True)),
                ('name', models.CharField(help_text="Lead's full name", max_length=200)),
                ('phone', models.CharField(db_index=True, help_text='Phone number in international format', max_length=20)),
                ('email', models.EmailField(blank=True, help_text='Email address (optional)', max_length=254, null=True)),
                ('intake_channel', models.CharField(choices=[('manual', 'Manual Entry'), ('bulk_import', 'Bulk Import'), ('api', 'API Integration')], default='manual', help_text='How the lead entered the pipeline', max_length=20)),
                ('substatus', models.CharField(blank=True, choices=SUBSTATUS_CHOICES, help_text='Urgency once qualified', max_length=10)),
                ('is_qualified', models.BooleanField(db_index=True, default=False)),
                ('value_tier', models.CharField(blank=True, choices=VALUE_TIER_CHOICES, help_text='Estimated deal value', max_length=10)),
                ('next_call_at', models.DateTimeField(blank=True, db_index=True, help_text='When is the next call, site visit or meeting?', null=True)),
                ('cif_at', models.DateTimeField(blank=True, help_text='When the customer information form was collected', null=True)),
                ('qualified_at', models.DateTimeField(blank=True, null=True)),
                ('won_at', models.DateTimeField(blank=True, null=True)),
                ('lost_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, help_text='General notes about this lead')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='Tombstone; leads are never hard-deleted', null=True)),
                ('centre', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='leads', to='core.centre')),
                ('language', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='leads', to='core.language')),
                ('lead_status', models.ForeignKey(help_text='Current pipeline status', limit_choices_to={'type': 'lead_status'}, on_delete=django.db.models.deletion.PROTECT, related_name='leads', to='core.status')),
                ('presales_owner', models.ForeignKey(blank=True, help_text='Pre-sales agent working the lead until qualification', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='presales_leads', to=settings.AUTH_USER_MODEL)),
                ('sales_owner', models.ForeignKey(blank=True, help_text='Sales agent owning the lead after qualification', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales_leads', to=settings.AUTH_USER_MODEL)),
                ('source', models.ForeignKey(help_text='Where did this lead come from?', on_delete=django.db.models.deletion.PROTECT, related_name='leads', to='core.leadsource')),
                ('tags', taggit.managers.TaggableManager(blank=True, help_text='Campaign / ad set labels', through='taggit.TaggedItem', to='taggit.Tag', verbose_name='Tags')),
            ],
            options={
                'verbose_name': 'Lead',
                'verbose_name_plural': 'Leads',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['lead_status', 'substatus'], name='lead_status_substatus_idx'),
                    models.Index(fields=['presales_owner', 'lead_status'], name='lead_presales_status_idx'),
                    models.Index(fields=['sales_owner', 'lead_status'], name='lead_sales_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CallLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('call_code', models.CharField(blank=True, editable=False, max_length=20, null=True, unique=True)),
                ('called_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('duration_seconds', models.PositiveIntegerField(default=0)),
                ('connection', models.CharField(choices=[('connected', 'Connected'), ('not_connected', 'Not Connected')], max_length=20)),
                ('outcome', models.CharField(blank=True, choices=[('qualified', 'Qualified'), ('follow_up', 'Follow Up'), ('not_interested', 'Not Interested'), ('site_visit', 'Site Visit Scheduled'), ('meeting_scheduled', 'Meeting Scheduled'), ('cif', 'CIF Collected'), ('won', 'Won')], help_text='Required when the call connected', max_length=20)),
                ('next_call_at', models.DateTimeField(blank=True, null=True)),
                ('site_visit_at', models.DateTimeField(blank=True, null=True)),
                ('meeting_at', models.DateTimeField(blank=True, null=True)),
                ('cif_at', models.DateTimeField(blank=True, null=True)),
                ('value_tier', models.CharField(blank=True, choices=VALUE_TIER_CHOICES, max_length=10)),
                ('remarks', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('agent', models.ForeignKey(help_text='Agent who made or took the call', on_delete=django.db.models.deletion.PROTECT, related_name='call_logs', to=settings.AUTH_USER_MODEL)),
                ('centre', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.centre')),
                ('language', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.language')),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='call_logs', to='leads.lead')),
            ],
            options={
                'verbose_name': 'Call Log',
                'verbose_name_plural': 'Call Logs',
                'ordering': ['-called_at'],
                'indexes': [
                    models.Index(fields=['lead', '-called_at'], name='calllog_lead_called_idx'),
                    models.Index(fields=['agent', '-called_at'], name='calllog_agent_called_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeadActivity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_key', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Idempotency key; a retried write never duplicates an entry', unique=True)),
                ('note', models.TextField(help_text='Human-readable description of what happened')),
                ('changed_fields', models.JSONField(blank=True, default=list, help_text='Names of the lead fields this entry snapshots')),
                ('name', models.CharField(blank=True, max_length=200)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('substatus', models.CharField(blank=True, choices=SUBSTATUS_CHOICES, max_length=10)),
                ('value_tier', models.CharField(blank=True, choices=VALUE_TIER_CHOICES, max_length=10)),
                ('next_call_at', models.DateTimeField(blank=True, null=True)),
                ('site_visit', models.BooleanField(blank=True, null=True)),
                ('site_visit_at', models.DateTimeField(blank=True, null=True)),
                ('meeting', models.BooleanField(blank=True, null=True)),
                ('meeting_at', models.DateTimeField(blank=True, null=True)),
                ('cif_at', models.DateTimeField(blank=True, null=True)),
                ('is_completed', models.BooleanField(blank=True, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When did this activity occur')),
                ('actor', models.ForeignKey(blank=True, help_text='Who performed this action (empty for system)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lead_activities', to=settings.AUTH_USER_MODEL)),
                ('centre', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.centre')),
                ('language', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.language')),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='leads.lead')),
                ('lead_status', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.status')),
                ('presales_owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('sales_owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('source', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='core.leadsource')),
            ],
            options={
                'verbose_name': 'Lead Activity',
                'verbose_name_plural': 'Lead Activities',
                'ordering': ['-created_at', '-pk'],
                'indexes': [
                    models.Index(fields=['lead', '-created_at'], name='activity_lead_created_idx'),
                    models.Index(fields=['actor', '-created_at'], name='activity_actor_created_idx'),
                ],
            },
        ),
    ]
