# Seed the plan limits and album types the media library relies on

from django.db import migrations


PLAN_LIMITS = (
    ('basic', 'Basic', 100, 524288000),
    ('premium', 'Premium', 1000, 5368709120),
)

ALBUM_TYPES = (
    ('pre_casamento', 'Pré-casamento', 'Fotos e vídeos antes do casamento'),
    ('pos_casamento', 'Pós-casamento', 'Fotos e vídeos do grande dia e depois'),
    ('uso_site', 'Uso no site', 'Imagens usadas nas seções do site'),
)


def seed(apps, schema_editor):
    PlanLimit = apps.get_model('media', 'PlanLimit')
    AlbumType = apps.get_model('media', 'AlbumType')

    for slug, name, max_files, max_storage_bytes in PLAN_LIMITS:
        PlanLimit.objects.update_or_create(
            slug=slug,
            defaults={'name': name, 'max_files': max_files, 'max_storage_bytes': max_storage_bytes},
        )

    for slug, name, description in ALBUM_TYPES:
        AlbumType.objects.update_or_create(
            slug=slug,
            defaults={'name': name, 'description': description},
        )


def unseed(apps, schema_editor):
    apps.get_model('media', 'PlanLimit').objects.filter(slug__in=[row[0] for row in PLAN_LIMITS]).delete()
    apps.get_model('media', 'AlbumType').objects.filter(slug__in=[row[0] for row in ALBUM_TYPES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('media', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
