import apps.accounts.models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('email', models.EmailField(db_index=True, help_text='Required. Used for login.', max_length=255, unique=True, verbose_name='email address')),
                ('first_name', models.CharField(blank=True, max_length=50, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=50, verbose_name='last name')),
                ('phone', models.CharField(blank=True, max_length=17, null=True, validators=[django.core.validators.RegexValidator(message='Phone number must be entered in the format: +999999999. Up to 15 digits allowed.', regex='^\\+?1?\\d{9,15}$')], verbose_name='phone number')),
                ('role', models.CharField(choices=[('admin', 'Administrator'), ('presales_agent', 'Pre-Sales Executive'), ('presales_manager', 'Pre-Sales Manager'), ('sales_agent', 'Sales Executive'), ('sales_manager', 'Sales Manager')], db_index=True, default='presales_agent', help_text='Role decides which team receives this user in round-robin', max_length=20, verbose_name='role')),
                ('qualification', models.CharField(blank=True, choices=[('high_value', 'High Value'), ('low_value', 'Low Value')], help_text='Lead value tier handled by this agent (sales team)', max_length=20, verbose_name='qualification')),
                ('last_assigned_at', models.DateTimeField(blank=True, db_index=True, help_text='Round-robin cursor: when this agent last received a lead', null=True, verbose_name='last assigned at')),
                ('total_leads_assigned', models.PositiveIntegerField(default=0, help_text='Total number of leads assigned to this user', verbose_name='total leads assigned')),
                ('is_active', models.BooleanField(default=True, help_text='Inactive agents never receive leads. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into admin site.', verbose_name='staff status')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('centre', models.ForeignKey(blank=True, help_text='Centre this agent works from', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='agents', to='core.centre', verbose_name='centre')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('languages', models.ManyToManyField(blank=True, help_text='Languages this agent is comfortable speaking', related_name='agents', to='core.language', verbose_name='languages')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'ordering': ['-date_joined'],
                'indexes': [models.Index(fields=['role', 'is_active', 'last_assigned_at'], name='user_role_active_cursor_idx'), models.Index(fields=['centre', 'role'], name='user_centre_role_idx')],
            },
            managers=[
                ('objects', apps.accounts.models.UserManager()),
            ],
        ),
    ]
