import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('weddings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SiteLayout',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('slug', models.SlugField(max_length=100, unique=True, verbose_name='slug')),
                ('custom_domain', models.CharField(blank=True, max_length=255, null=True, unique=True, verbose_name='custom domain')),
                ('access_token', models.CharField(blank=True, help_text='Hashed password guests must enter to see the site.', max_length=128, null=True, verbose_name='access token')),
                ('draft_content', models.JSONField(blank=True, default=dict, verbose_name='draft content')),
                ('published_content', models.JSONField(blank=True, null=True, verbose_name='published content')),
                ('is_published', models.BooleanField(default=False, verbose_name='published')),
                ('published_at', models.DateTimeField(blank=True, null=True, verbose_name='published at')),
                ('wedding', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='site', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'site layout',
                'verbose_name_plural': 'site layouts',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='SiteVersion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('content', models.JSONField(default=dict, verbose_name='content')),
                ('summary', models.CharField(blank=True, max_length=500, verbose_name='summary')),
                ('is_published', models.BooleanField(default=False, verbose_name='published')),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='versions', to='wedding_sites.sitelayout', verbose_name='site')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='site_versions', to=settings.AUTH_USER_MODEL, verbose_name='user')),
            ],
            options={
                'verbose_name': 'site version',
                'verbose_name_plural': 'site versions',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
