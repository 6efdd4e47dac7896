from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Centre',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Centre name (e.g. Kochi Experience Centre)', max_length=150, unique=True)),
                ('slug', models.SlugField(help_text='URL-friendly name (auto-generated)', max_length=150, unique=True)),
                ('city', models.CharField(blank=True, help_text='City the centre is located in', max_length=100)),
                ('is_active', models.BooleanField(default=True, help_text='Is this centre accepting leads?')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Centre',
                'verbose_name_plural': 'Centres',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Language',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Language name (e.g. Malayalam)', max_length=100, unique=True)),
                ('code', models.SlugField(help_text='Short code (e.g. ml)', max_length=20, unique=True)),
                ('is_active', models.BooleanField(default=True, help_text='Is this language offered?')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Language',
                'verbose_name_plural': 'Languages',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='LeadSource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Source name (e.g. Website, Facebook)', max_length=100, unique=True)),
                ('slug', models.SlugField(help_text='URL-friendly name (auto-generated)', max_length=100, unique=True)),
                ('description', models.TextField(blank=True, help_text='Optional description')),
                ('is_api_source', models.BooleanField(default=False, help_text='Leads arrive through a webhook integration')),
                ('is_active', models.BooleanField(default=True, help_text='Is this source active?')),
                ('order', models.PositiveIntegerField(default=0, help_text='Display order (lower numbers appear first)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Lead Source',
                'verbose_name_plural': 'Lead Sources',
                'ordering': ['order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Status',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('account_status', 'Account Status'), ('lead_status', 'Lead Status'), ('lead_substatus', 'Lead Substatus')], db_index=True, help_text='Which taxonomy this status belongs to', max_length=20)),
                ('name', models.CharField(help_text='Display name (e.g. Qualified)', max_length=100)),
                ('slug', models.SlugField(help_text='Stable identifier used by the workflow engine', max_length=100)),
                ('description', models.TextField(blank=True)),
                ('order', models.PositiveIntegerField(default=0, help_text='Display order inside its taxonomy')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Status',
                'verbose_name_plural': 'Statuses',
                'ordering': ['type', 'order', 'name'],
                'unique_together': {('type', 'slug')},
            },
        ),
    ]
