import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('weddings', '0001_initial'),
        ('wedding_sites', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SiteTemplate',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, verbose_name='name')),
                ('slug', models.SlugField(max_length=140, unique=True, verbose_name='slug')),
                ('description', models.CharField(blank=True, max_length=500, verbose_name='description')),
                ('thumbnail', models.URLField(blank=True, max_length=500, verbose_name='thumbnail')),
                ('content', models.JSONField(default=dict, verbose_name='content')),
                ('is_public', models.BooleanField(default=False, verbose_name='public')),
                ('wedding', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='site_templates', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'site template',
                'verbose_name_plural': 'site templates',
                'ordering': ['-is_public', 'name'],
            },
        ),
    ]
