import uuid

import apps.weddings.models
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
            name='Wedding',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255, verbose_name='title')),
                ('slug', models.SlugField(blank=True, max_length=255, unique=True, verbose_name='slug')),
                ('wedding_date', models.DateField(blank=True, null=True, verbose_name='wedding date')),
                ('venue', models.CharField(blank=True, max_length=255, verbose_name='venue')),
                ('plan', models.CharField(choices=[('basic', 'Basic'), ('premium', 'Premium')], default='basic', max_length=20, verbose_name='plan')),
                ('details', models.JSONField(blank=True, default=dict, verbose_name='details')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_weddings', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
            ],
            options={
                'verbose_name': 'wedding',
                'verbose_name_plural': 'weddings',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='WeddingUser',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('couple', 'Couple'), ('organizer', 'Organizer'), ('guest', 'Guest')], default='guest', max_length=20, verbose_name='role')),
                ('permissions', models.JSONField(blank=True, default=list, help_text='Modules an organizer may access.', verbose_name='permissions')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wedding_memberships', to=settings.AUTH_USER_MODEL, verbose_name='user')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'wedding user',
                'verbose_name_plural': 'wedding users',
                'unique_together': {('wedding', 'user')},
            },
        ),
        migrations.CreateModel(
            name='GuestEvent',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('slug', models.SlugField(max_length=100, verbose_name='slug')),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('event_at', models.DateTimeField(blank=True, null=True, verbose_name='event at')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='metadata')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='guest_events', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'guest event',
                'verbose_name_plural': 'guest events',
                'ordering': ['event_at'],
                'unique_together': {('wedding', 'slug')},
            },
        ),
        migrations.CreateModel(
            name='PartnerInvite',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, verbose_name='email')),
                ('name', models.CharField(max_length=255, verbose_name='name')),
                ('token', models.CharField(max_length=64, unique=True, verbose_name='token')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('declined', 'Declined'), ('expired', 'Expired')], default='pending', max_length=20, verbose_name='status')),
                ('expires_at', models.DateTimeField(default=apps.weddings.models.default_invite_expiration, verbose_name='expires at')),
                ('accepted_at', models.DateTimeField(blank=True, null=True, verbose_name='accepted at')),
                ('declined_at', models.DateTimeField(blank=True, null=True, verbose_name='declined at')),
                ('existing_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='received_partner_invites', to=settings.AUTH_USER_MODEL, verbose_name='existing user')),
                ('invited_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sent_partner_invites', to=settings.AUTH_USER_MODEL, verbose_name='invited by')),
                ('previous_wedding', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='weddings.wedding', verbose_name='previous wedding')),
                ('wedding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partner_invites', to='weddings.wedding', verbose_name='wedding')),
            ],
            options={
                'verbose_name': 'partner invite',
                'verbose_name_plural': 'partner invites',
                'ordering': ['-created_at'],
            },
        ),
    ]
