import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('weddings', '0001_initial'),
        ('wedding_sites', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PlanLimit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('slug', models.SlugField(unique=True, verbose_name='slug')),
                ('name', models.CharField(max_length=100, verbose_name='name')),
                ('max_files', models.PositiveIntegerField(verbose_name='max files')),
                ('max_storage_bytes', models.BigIntegerField(verbose_name='max storage (bytes)')),
            ],
            options={
                'verbose_name': 'plan limit',
                'verbose_name_plural': 'plan limits',
                'ordering': ['max_storage_bytes'],
            },
        ),
        migrations.CreateModel(
            name='AlbumType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('slug', models.SlugField(unique=True, verbose_name='slug')),
                ('name', models.CharField(max_length=100, verbose_name='name')),
                ('description', models.TextField(blank=True, verbose_name='description')),
            ],
            options={
                'verbose_name': 'album type',
                'verbose_name_plural': 'album types',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Album',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('description', models.TextField(blank=True, null=True, verbose_name='description')),
                ('album_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='albums', to='media.albumtype', verbose_name='album type')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='albums', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'album',
                'verbose_name_plural': 'albums',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='UploadBatch',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total_files', models.PositiveIntegerField(default=0, verbose_name='total files')),
                ('completed_files', models.PositiveIntegerField(default=0, verbose_name='completed files')),
                ('failed_files', models.PositiveIntegerField(default=0, verbose_name='failed files')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='status')),
                ('errors', models.JSONField(blank=True, default=list, verbose_name='errors')),
                ('album', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='upload_batches', to='media.album', verbose_name='album')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='upload_batches', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'upload batch',
                'verbose_name_plural': 'upload batches',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='SiteMedia',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('original_name', models.CharField(max_length=255, verbose_name='original name')),
                ('path', models.CharField(blank=True, max_length=500, verbose_name='path')),
                ('size', models.BigIntegerField(default=0, verbose_name='size in bytes')),
                ('mime_type', models.CharField(default='application/octet-stream', max_length=100, verbose_name='MIME type')),
                ('variants', models.JSONField(blank=True, default=dict, verbose_name='variants')),
                ('width', models.PositiveIntegerField(blank=True, null=True, verbose_name='width')),
                ('height', models.PositiveIntegerField(blank=True, null=True, verbose_name='height')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed')], default='completed', max_length=20, verbose_name='status')),
                ('error_message', models.TextField(blank=True, null=True, verbose_name='error message')),
                ('album', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='media', to='media.album', verbose_name='album')),
                ('batch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='media', to='media.uploadbatch', verbose_name='batch')),
                ('site', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='media', to='wedding_sites.sitelayout', verbose_name='site')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='uploaded_media', to=settings.AUTH_USER_MODEL, verbose_name='uploaded by')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='media', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'site media',
                'verbose_name_plural': 'site media',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['wedding', 'status'], name='media_sitem_wedding_2b7c1e_idx'),
                    models.Index(fields=['batch', 'status'], name='media_sitem_batch_i_8d41f0_idx'),
                ],
            },
        ),
        migrations.AddField(
            model_name='album',
            name='cover_media',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='media.sitemedia', verbose_name='cover media'),
        ),
    ]
