"""
Site content schema.

Defines the JSON document a wedding site is made of, its defaults and the
structural checks applied before publishing.
"""

import copy

VERSION = '1.0'

REQUIRED_SECTIONS = (
    'header',
    'hero',
    'saveTheDate',
    'giftRegistry',
    'rsvp',
    'photoGallery',
    'footer',
)

_DEFAULT_SECTIONS = {
    'header': {
        'enabled': True,
        'logo': {
            'type': 'image',
            'url': '',
            'alt': '',
            'text': {
                'initials': ['', ''],
                'connector': '&',
            },
        },
        'title': '',
        'subtitle': '',
        'navigation': [],
        'actionButton': {
            'label': '',
            'target': '',
            'style': 'primary',
            'icon': None,
        },
        'style': {
            'height': '80px',
            'alignment': 'center',
            'backgroundColor': '#ffffff',
            'sticky': False,
            'overlay': {
                'enabled': False,
                'opacity': 0.3,
            },
        },
    },
    'hero': {
        'enabled': True,
        'media': {
            'type': 'image',
            'url': '',
            'fallback': '',
            'autoplay': True,
            'loop': True,
        },
        'title': '',
        'subtitle': '',
        'ctaPrimary': {
            'label': '',
            'target': '',
        },
        'ctaSecondary': {
            'label': '',
            'target': '',
        },
        'layout': 'full-bleed',
        'style': {
            'overlay': {
                'color': '#000000',
                'opacity': 0.3,
            },
            'textAlign': 'center',
            'animation': 'fade',
            'animationDuration': 500,
        },
    },
    'saveTheDate': {
        'enabled': True,
        'navigation': {
            'label': 'Save the Date',
            'showInMenu': True,
        },
        'showMap': True,
        'mapProvider': 'google',
        'mapCoordinates': {
            'lat': None,
            'lng': None,
        },
        'description': '',
        'showCountdown': True,
        'countdownFormat': 'days',
        'showCalendarButton': True,
        'style': {
            'backgroundColor': '#f5f5f5',
            'layout': 'card',
        },
    },
    'giftRegistry': {
        'enabled': False,
        'navigation': {
            'label': 'Lista de Presentes',
            'showInMenu': True,
        },
        'title': 'Lista de Presentes',
        'description': 'Em breve...',
        'style': {
            'backgroundColor': '#ffffff',
        },
    },
    'rsvp': {
        'enabled': False,
        'navigation': {
            'label': 'Confirme Presença',
            'showInMenu': True,
        },
        'title': 'Confirme sua Presença',
        'description': '',
        'mockFields': [
            {'label': 'Nome', 'type': 'text'},
            {'label': 'Email', 'type': 'email'},
            {'label': 'Confirmação', 'type': 'select'},
            {'label': 'Acompanhantes', 'type': 'number'},
        ],
        'style': {
            'backgroundColor': '#f5f5f5',
        },
    },
    'photoGallery': {
        'enabled': False,
        'navigation': {
            'label': 'Galeria de Fotos',
            'showInMenu': True,
        },
        'albums': {
            'before': {
                'title': 'Nossa História',
                'photos': [],
            },
            'after': {
                'title': 'O Grande Dia',
                'photos': [],
            },
        },
        'layout': 'masonry',
        'showLightbox': True,
        'allowDownload': True,
        'style': {
            'backgroundColor': '#ffffff',
            'columns': 3,
        },
    },
    'footer': {
        'enabled': True,
        'socialLinks': [],
        'copyrightText': '',
        'copyrightYear': None,
        'showPrivacyPolicy': False,
        'privacyPolicyUrl': '',
        'showBackToTop': True,
        'style': {
            'backgroundColor': '#333333',
            'textColor': '#ffffff',
            'borderTop': False,
        },
    },
}

_DEFAULT_META = {
    'title': '',
    'description': '',
    'ogImage': '',
    'canonical': '',
}

_DEFAULT_THEME = {
    'primaryColor': '#d4a574',
    'secondaryColor': '#8b7355',
    'fontFamily': 'Playfair Display',
    'fontSize': '16px',
}


def get_default_content():
    """Return a fresh copy of the content a new site starts with."""
    return {
        'version': VERSION,
        'sections': copy.deepcopy(_DEFAULT_SECTIONS),
        'meta': copy.deepcopy(_DEFAULT_META),
        'theme': copy.deepcopy(_DEFAULT_THEME),
    }


def get_default_section(name):
    return copy.deepcopy(_DEFAULT_SECTIONS[name])


def validate(content):
    """
    Check the structure of ``content``.

    Returns a list of error messages, empty when the content is valid.
    """
    if not isinstance(content, dict) or not isinstance(content.get('sections'), dict):
        return ["Content must have a 'sections' key"]

    sections = content['sections']
    errors = [
        f"Missing required section: {name}"
        for name in REQUIRED_SECTIONS
        if name not in sections
    ]

    for name in REQUIRED_SECTIONS:
        section = sections.get(name)
        if section is not None and (not isinstance(section, dict) or 'enabled' not in section):
            errors.append(f"Section '{name}' must have an 'enabled' field")

    return errors


def _merge(defaults, value):
    # Dicts merge key by key; any other value replaces the default.
    if isinstance(defaults, dict) and isinstance(value, dict):
        merged = copy.deepcopy(defaults)
        for key, item in value.items():
            merged[key] = _merge(defaults[key], item) if key in defaults else copy.deepcopy(item)
        return merged
    return copy.deepcopy(value)


def normalize(content):
    """Fill every missing key of ``content`` from the default content."""
    if not isinstance(content, dict):
        content = {}
    normalized = _merge(get_default_content(), content)
    normalized['version'] = VERSION
    return normalized
