# Seed the public system templates every wedding can apply

from django.db import migrations


SITE_TEMPLATES = (
    (
        'classico', 'Clássico',
        'Estilo elegante e tradicional com tons dourados e marrons. Perfeito para casamentos sofisticados.',
        {'primaryColor': '#d4a574', 'secondaryColor': '#8b7355', 'fontFamily': 'Playfair Display', 'fontSize': '16px'},
        {'header': '#faf8f5', 'saveTheDate': '#faf8f5', 'footer': '#8b7355'},
    ),
    (
        'moderno', 'Moderno',
        'Estilo clean e contemporâneo com design minimalista. Ideal para casais que apreciam modernidade.',
        {'primaryColor': '#2d3436', 'secondaryColor': '#00b894', 'fontFamily': 'Montserrat', 'fontSize': '16px'},
        {'header': '#ffffff', 'saveTheDate': '#f8f9fa', 'footer': '#2d3436'},
    ),
    (
        'minimalista', 'Minimalista',
        'Estilo simples e direto com foco no conteúdo. Para quem prefere elegância na simplicidade.',
        {'primaryColor': '#000000', 'secondaryColor': '#ffffff', 'fontFamily': 'Inter', 'fontSize': '16px'},
        {'header': '#ffffff', 'saveTheDate': '#ffffff', 'footer': '#000000'},
    ),
    (
        'romantico', 'Romântico',
        'Estilo delicado e feminino com tons de rosa. Perfeito para casamentos românticos e sonhadores.',
        {'primaryColor': '#e84393', 'secondaryColor': '#fd79a8', 'fontFamily': 'Dancing Script', 'fontSize': '18px'},
        {'header': '#fff5f8', 'saveTheDate': '#fff5f8', 'footer': '#e84393'},
    ),
)


def _content(theme, backgrounds):
    return {
        'theme': theme,
        'sections': {
            name: {'style': {'backgroundColor': color}}
            for name, color in backgrounds.items()
        },
    }


def seed(apps, schema_editor):
    SiteTemplate = apps.get_model('wedding_sites', 'SiteTemplate')

    for slug, name, description, theme, backgrounds in SITE_TEMPLATES:
        SiteTemplate.objects.update_or_create(
            slug=slug,
            defaults={
                'name': name,
                'description': description,
                'content': _content(theme, backgrounds),
                'is_public': True,
                'wedding': None,
            },
        )


def unseed(apps, schema_editor):
    apps.get_model('wedding_sites', 'SiteTemplate').objects.filter(
        slug__in=[row[0] for row in SITE_TEMPLATES]
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('wedding_sites', '0002_sitetemplate'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
