"""
Celery configuration for the Nupcial platform.

Handles emails, media processing and periodic housekeeping jobs.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('nupcial')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    'expire-partner-invites': {
        'task': 'apps.weddings.tasks.expire_partner_invites',
        'schedule': crontab(minute=0),  # Every hour
        'options': {
            'queue': 'maintenance',
        }
    },
}

app.conf.task_routes = {
    'apps.weddings.tasks.send_partner_invite_email': {'queue': 'emails'},
    'apps.sites.tasks.notify_site_published': {'queue': 'emails'},
    'apps.media.tasks.process_media_upload': {'queue': 'media'},
    'apps.weddings.tasks.expire_partner_invites': {'queue': 'maintenance'},
}

app.conf.update(
    timezone='America/Sao_Paulo',
    enable_utc=True,

    task_soft_time_limit=300,
    task_time_limit=600,
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    result_expires=3600,

    worker_max_tasks_per_child=1000,

    task_default_queue='default',
    task_default_exchange='default',
    task_default_exchange_type='direct',
    task_default_routing_key='default',
)
