"""Publish validation and QA checklist for wedding sites."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlparse

from django.conf import settings

from core.models import SystemConfig

logger = logging.getLogger(__name__)

WCAG_AA_CONTRAST_RATIO = 4.5
WCAG_AA_LARGE_TEXT_CONTRAST_RATIO = 3.0

RGBA_RE = re.compile(
    r'^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([+-]?\d*\.?\d+)\s*\)$',
    re.IGNORECASE,
)
RGB_RE = re.compile(r'^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$', re.IGNORECASE)
HEX_DIGITS_RE = re.compile(r'^[0-9a-f]+$', re.IGNORECASE)
NUMBER_RE = re.compile(r'-?\d+(?:\.\d+)?')

WHITE = (255, 255, 255)

SECTION_LABELS = {
    'header': 'Header',
    'hero': 'Hero',
    'saveTheDate': 'Save the Date',
    'photoGallery': 'Photo gallery',
    'footer': 'Footer',
}


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self):
        return not self.errors

    def add_error(self, message):
        self.errors.append(message)
        return self

    def add_warning(self, message):
        self.warnings.append(message)
        return self

    def merge(self, other):
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


@dataclass
class QAResult:
    """Outcome of the pre-publish checklist."""

    STATUS_PASSED = 'pass'
    STATUS_FAILED = 'fail'
    STATUS_WARNING = 'warning'

    checks: List[Dict] = field(default_factory=list)

    def add_check(self, name, status, message, section=None):
        self.checks.append({
            'name': name,
            'status': status,
            'message': message,
            'section': section,
        })
        return self

    def add_passed_check(self, name, message, section=None):
        return self.add_check(name, self.STATUS_PASSED, message, section)

    def add_failed_check(self, name, message, section=None):
        return self.add_check(name, self.STATUS_FAILED, message, section)

    def add_warning_check(self, name, message, section=None):
        return self.add_check(name, self.STATUS_WARNING, message, section)

    def get_failed_checks(self):
        return [check for check in self.checks if check['status'] == self.STATUS_FAILED]

    def get_warnings(self):
        return [check for check in self.checks if check['status'] == self.STATUS_WARNING]

    def get_passed_checks(self):
        return [check for check in self.checks if check['status'] == self.STATUS_PASSED]

    @property
    def passed(self):
        return not self.get_failed_checks()

    def can_publish(self):
        """Warnings never block publishing; failed checks do."""
        return self.passed

    def get_counts(self):
        return {
            'total': len(self.checks),
            'passed': len(self.get_passed_checks()),
            'failed': len(self.get_failed_checks()),
            'warnings': len(self.get_warnings()),
        }

    def to_dict(self):
        return {
            'passed': self.passed,
            'can_publish': self.can_publish(),
            'checks': self.checks,
            'counts': self.get_counts(),
        }


def _dict(value):
    return value if isinstance(value, dict) else {}


def _list(value):
    return value if isinstance(value, list) else []


def _text(value):
    return '' if value is None else str(value).strip()


def is_valid_url(url):
    """True for absolute http(s) URLs."""
    if not url:
        return False
    try:
        scheme = urlparse(url).scheme
    except ValueError:
        return False
    return scheme.lower() in ('http', 'https')


def is_anchor_or_valid_url(target):
    if not target or target.startswith('#'):
        return True
    return is_valid_url(target)


def _is_number(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
    except (TypeError, ValueError):
        return False
    return True


def is_valid_latitude(value):
    return _is_number(value) and -90 <= float(value) <= 90


def is_valid_longitude(value):
    return _is_number(value) and -180 <= float(value) <= 180


# Colour handling

def parse_color(color):
    """Parse hex, rgb(), rgba() or ``transparent`` into an ``(r, g, b, a)`` tuple."""
    normalized = _text(color).lower()
    if not normalized:
        return None

    if normalized == 'transparent':
        return (0, 0, 0, 0.0)

    if normalized.startswith('#'):
        return _parse_hex_color(normalized)

    match = RGBA_RE.match(normalized)
    if match:
        r, g, b = (_clamp_channel(int(match.group(i))) for i in (1, 2, 3))
        return (r, g, b, max(0.0, min(1.0, float(match.group(4)))))

    match = RGB_RE.match(normalized)
    if match:
        r, g, b = (_clamp_channel(int(match.group(i))) for i in (1, 2, 3))
        return (r, g, b, 1.0)

    return None


def _parse_hex_color(value):
    digits = value.lstrip('#')
    if len(digits) in (3, 4):
        digits = ''.join(char * 2 for char in digits)
    if len(digits) not in (6, 8) or not HEX_DIGITS_RE.match(digits):
        return None

    alpha = 1.0
    if len(digits) == 8:
        alpha = round(int(digits[6:8], 16) / 255, 4)

    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha)


def _clamp_channel(value):
    return max(0, min(255, value))


def _composite(source, destination):
    alpha = max(0.0, min(1.0, source[3]))
    inverse = 1 - alpha
    return tuple(
        int(round(source[i] * alpha + destination[i] * inverse))
        for i in range(3)
    )


def _linearize(value):
    if value <= 0.03928:
        return value / 12.92
    return ((value + 0.055) / 1.055) ** 2.4


def relative_luminance(rgb):
    r, g, b = (_linearize(channel / 255) for channel in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground, background):
    """
    WCAG 2.0 contrast ratio between two CSS colours.

    The background is composited over white and the foreground over the
    resulting background, so translucent colours are measured as rendered.
    """
    parsed_background = parse_color(background) or (255, 255, 255, 1.0)
    effective_background = _composite(parsed_background, WHITE)

    parsed_foreground = parse_color(foreground) or (0, 0, 0, 1.0)
    effective_foreground = _composite(parsed_foreground, effective_background)

    l1 = relative_luminance(effective_foreground)
    l2 = relative_luminance(effective_background)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def _parse_font_size(value):
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        match = NUMBER_RE.search(value)
        if match:
            return float(match.group(0))
    return None


def _parse_font_weight(value):
    if _is_number(value):
        return int(float(value))
    if not isinstance(value, str):
        return 400
    normalized = value.strip().lower()
    if normalized == 'bold':
        return 700
    if normalized.isdigit():
        return int(normalized)
    return 400


def required_contrast_ratio(font_size, font_weight):
    """Large text (24px, or 18.66px bold) only needs 3:1."""
    size = _parse_font_size(font_size)
    if size is None:
        return WCAG_AA_CONTRAST_RATIO
    weight = _parse_font_weight(font_weight)
    is_large = size >= 24 or (size >= 18.66 and weight >= 700)
    return WCAG_AA_LARGE_TEXT_CONTRAST_RATIO if is_large else WCAG_AA_CONTRAST_RATIO


class SiteValidator:
    """Validate site content and run the QA checklist shown before publishing."""

    # Publish validation

    @classmethod
    def validate_for_publish(cls, content):
        result = ValidationResult()
        content = _dict(content)

        if not _text(_dict(content.get('meta')).get('title')):
            result.add_error("The site title (meta.title) is required")

        sections = _dict(content.get('sections'))
        header_enabled = _dict(sections.get('header')).get('enabled') is True
        hero_enabled = _dict(sections.get('hero')).get('enabled') is True
        if not header_enabled and not hero_enabled:
            result.add_error("At least one section (Header or Hero) must be enabled")

        for name, section in sections.items():
            if _dict(section).get('enabled') is True:
                result.merge(cls.validate_section(name, section))

        return result

    @classmethod
    def validate_section(cls, name, content):
        content = _dict(content)
        if not content.get('enabled'):
            return ValidationResult()

        validators = {
            'header': cls._validate_header,
            'hero': cls._validate_hero,
            'saveTheDate': cls._validate_save_the_date,
            'photoGallery': cls._validate_photo_gallery,
            'footer': cls._validate_footer,
        }
        validator = validators.get(name)
        return validator(content) if validator else ValidationResult()

    @staticmethod
    def _validate_header(content):
        result = ValidationResult()
        if not _text(content.get('title')):
            result.add_error("Header: the title cannot be empty when the section is enabled")

        logo = _dict(content.get('logo'))
        if logo.get('type', 'image') == 'image' and _text(logo.get('url')) and not _text(logo.get('alt')):
            result.add_warning("Header: the logo should have alternative text for accessibility")
        return result

    @staticmethod
    def _validate_hero(content):
        result = ValidationResult()
        media_url = _text(_dict(content.get('media')).get('url'))
        if not media_url and not _text(content.get('title')):
            result.add_error("Hero: a media (image/video) or a title is required")
        return result

    @staticmethod
    def _validate_save_the_date(content):
        result = ValidationResult()
        if content.get('showMap'):
            coordinates = _dict(content.get('mapCoordinates'))
            lat, lng = coordinates.get('lat'), coordinates.get('lng')
            if lat is None or lng is None:
                result.add_error("Save the Date: map coordinates are required when the map is enabled")
            elif not is_valid_latitude(lat) or not is_valid_longitude(lng):
                result.add_error("Save the Date: map coordinates are invalid")
        return result

    @classmethod
    def _validate_photo_gallery(cls, content):
        result = ValidationResult()
        missing = []
        for album_name, album in _dict(content.get('albums')).items():
            for index, item in enumerate(cls._gallery_items(album)):
                if cls._gallery_item_type(item) != 'image':
                    continue
                if not _text(_dict(item).get('alt')):
                    missing.append(f"{album_name}[{index}]")

        if missing:
            message = "Photo gallery: these photos have no alternative text: " + ', '.join(missing[:5])
            if len(missing) > 5:
                message += f" and {len(missing) - 5} more"
            result.add_warning(message)
        return result

    @staticmethod
    def _validate_footer(content):
        result = ValidationResult()
        privacy_url = _text(content.get('privacyPolicyUrl'))
        if content.get('showPrivacyPolicy') and not privacy_url:
            result.add_error("Footer: the privacy policy URL is required when it is shown")
        if privacy_url and not is_valid_url(privacy_url):
            result.add_error("Footer: the privacy policy URL is invalid")
        return result

    # QA checklist

    @classmethod
    def run_qa_checklist(cls, site):
        result = QAResult()
        content = _dict(site.draft_content)

        cls._check_images_alt_text(content, result)
        cls._check_links(content, result)
        cls._check_required_fields(content, result)
        cls._check_contrast(content, result)
        cls._check_resource_size(site, content, result)

        logger.debug(f"[SITES] QA checklist for site {site.id}: {result.get_counts()}")
        return result

    @classmethod
    def check_accessibility(cls, content):
        content = _dict(content)
        return cls._find_missing_alt_text(content) + cls._find_low_contrast(content)

    @classmethod
    def _check_images_alt_text(cls, content, result):
        missing = cls._find_missing_alt_text(content)
        if not missing:
            result.add_passed_check('images_alt_text', "All images have alternative text")
        else:
            result.add_failed_check(
                'images_alt_text',
                f"{len(missing)} image(s) without alternative text",
                missing[0]['section'],
            )

    @classmethod
    def _check_links(cls, content, result):
        invalid = cls.find_invalid_links(content)
        if not invalid:
            result.add_passed_check('valid_links', "All links are valid (HTTP/HTTPS)")
        else:
            result.add_failed_check(
                'valid_links',
                f"{len(invalid)} invalid link(s) found",
                invalid[0]['section'],
            )

    @classmethod
    def _check_required_fields(cls, content, result):
        sections = _dict(content.get('sections'))
        header_enabled = _dict(sections.get('header')).get('enabled') is True
        hero_enabled = _dict(sections.get('hero')).get('enabled') is True

        if header_enabled or hero_enabled:
            result.add_passed_check('required_fields', "All required fields are filled")
        else:
            result.add_failed_check(
                'required_fields',
                "At least one section (Header or Hero) must be enabled",
            )

    @classmethod
    def _check_contrast(cls, content, result):
        low_contrast = cls._find_low_contrast(content)
        if not low_contrast:
            result.add_passed_check('wcag_contrast', "Colour contrast meets WCAG AA")
            return

        details = []
        for warning in low_contrast:
            label = SECTION_LABELS.get(warning['section'], warning['section'])
            detail = f"{label}: {', '.join(warning['elements'])}"
            if detail not in details:
                details.append(detail)

        message = f"{len(low_contrast)} section(s) with contrast below the recommended level"
        message += "\n\nLow contrast items:\n• " + "\n• ".join(details)
        result.add_warning_check('wcag_contrast', message, low_contrast[0]['section'])

    @classmethod
    def _check_resource_size(cls, site, content, result):
        threshold = int(SystemConfig.get('site.performance_threshold', settings.SITE_PERFORMANCE_THRESHOLD))
        total, top_files = cls.calculate_resource_size(site, content)
        size_mb = round(total / 1048576, 2)

        if total <= threshold:
            result.add_passed_check('resource_size', f"Total resource size: {size_mb}MB")
            return

        threshold_mb = round(threshold / 1048576, 2)
        message = f"Total size ({size_mb}MB) exceeds the recommended {threshold_mb}MB"
        if top_files:
            message += "\n\nLargest files:"
            for item in top_files:
                message += f"\n• {item['name']} ({round(item['size'] / 1048576, 2)}MB)"
        result.add_warning_check('resource_size', message)

    # Collectors

    @classmethod
    def _find_missing_alt_text(cls, content):
        warnings = []
        sections = _dict(content.get('sections'))

        header = _dict(sections.get('header'))
        if header.get('enabled'):
            logo = _dict(header.get('logo'))
            if logo.get('type', 'image') == 'image' and _text(logo.get('url')) and not _text(logo.get('alt')):
                warnings.append({
                    'type': 'missing_alt',
                    'section': 'header',
                    'element': 'logo',
                    'message': "The header logo has no alternative text",
                })

        hero = _dict(sections.get('hero'))
        if hero.get('enabled'):
            media = _dict(hero.get('media'))
            if media.get('type', 'image') == 'image' and _text(media.get('url')) and not _text(media.get('alt')):
                warnings.append({
                    'type': 'missing_alt',
                    'section': 'hero',
                    'element': 'media',
                    'message': "The hero image has no alternative text",
                })

        gallery = _dict(sections.get('photoGallery'))
        if gallery.get('enabled'):
            for album_name, album in _dict(gallery.get('albums')).items():
                for index, item in enumerate(cls._gallery_items(album)):
                    if cls._gallery_item_type(item) != 'image':
                        continue
                    if not _text(_dict(item).get('alt')):
                        warnings.append({
                            'type': 'missing_alt',
                            'section': 'photoGallery',
                            'element': f"albums.{album_name}.items[{index}]",
                            'message': f"Media {index} in album '{album_name}' has no alternative text",
                        })

        return warnings

    @classmethod
    def find_invalid_links(cls, content):
        invalid = []
        sections = _dict(_dict(content).get('sections'))

        header = _dict(sections.get('header'))
        if header.get('enabled'):
            for index, item in enumerate(_list(header.get('navigation'))):
                item = _dict(item)
                target = _text(item.get('target'))
                if item.get('type', 'anchor') == 'url' and target and not is_valid_url(target):
                    invalid.append({'section': 'header', 'element': f"navigation[{index}]", 'url': target})

            action_target = _text(_dict(header.get('actionButton')).get('target'))
            if action_target and not is_anchor_or_valid_url(action_target):
                invalid.append({'section': 'header', 'element': 'actionButton', 'url': action_target})

        hero = _dict(sections.get('hero'))
        if hero.get('enabled'):
            for cta in ('ctaPrimary', 'ctaSecondary'):
                target = _text(_dict(hero.get(cta)).get('target'))
                if target and not is_anchor_or_valid_url(target):
                    invalid.append({'section': 'hero', 'element': cta, 'url': target})

        footer = _dict(sections.get('footer'))
        if footer.get('enabled'):
            privacy_url = _text(footer.get('privacyPolicyUrl'))
            if privacy_url and not is_valid_url(privacy_url):
                invalid.append({'section': 'footer', 'element': 'privacyPolicyUrl', 'url': privacy_url})

            for index, link in enumerate(_list(footer.get('socialLinks'))):
                url = _text(_dict(link).get('url'))
                if url and not is_valid_url(url):
                    invalid.append({'section': 'footer', 'element': f"socialLinks[{index}]", 'url': url})

        return invalid

    @classmethod
    def _find_low_contrast(cls, content):
        warnings = []
        sections = _dict(content.get('sections'))
        theme = _dict(content.get('theme'))

        header = _dict(sections.get('header'))
        if header.get('enabled'):
            background = _text(_dict(header.get('style')).get('backgroundColor')) or '#ffffff'
            warning = cls._evaluate_candidates('header', cls._header_candidates(header, theme), background)
            if warning:
                warnings.append(warning)

        footer = _dict(sections.get('footer'))
        if footer.get('enabled'):
            style = _dict(footer.get('style'))
            candidates = [{
                'label': 'Footer text',
                'color': _text(style.get('textColor')) or '#ffffff',
                'fontSize': None,
                'fontWeight': None,
            }]
            warning = cls._evaluate_candidates(
                'footer', candidates, _text(style.get('backgroundColor')) or '#333333'
            )
            if warning:
                warnings.append(warning)

        save_the_date = _dict(sections.get('saveTheDate'))
        if save_the_date.get('enabled'):
            background = cls._save_the_date_background(save_the_date, theme)
            warning = cls._evaluate_candidates(
                'saveTheDate', cls._save_the_date_candidates(save_the_date, theme), background
            )
            if warning:
                warnings.append(warning)

        return warnings

    @staticmethod
    def _evaluate_candidates(section, candidates, background):
        failing = []
        for candidate in candidates:
            ratio = contrast_ratio(candidate['color'], background)
            required = required_contrast_ratio(candidate.get('fontSize'), candidate.get('fontWeight'))
            if ratio < required:
                failing.append((ratio, required, candidate['label']))

        if not failing:
            return None

        failing.sort(key=lambda item: item[0])
        worst_ratio, worst_required, _label = failing[0]
        labels = []
        for _ratio, _required, label in failing:
            if label not in labels:
                labels.append(label)

        return {
            'type': 'low_contrast',
            'section': section,
            'ratio': round(worst_ratio, 2),
            'required': worst_required,
            'elements': labels,
            'message': (
                f"Insufficient contrast in {SECTION_LABELS.get(section, section)} "
                f"({worst_ratio:.2f}:1, minimum {worst_required:.1f}:1) in: {', '.join(labels)}"
            ),
        }

    @staticmethod
    def _header_candidates(header, theme):
        candidates = []
        primary = _text(theme.get('primaryColor')) or '#333333'

        logo = _dict(header.get('logo'))
        logo_text = _dict(logo.get('text'))
        initials = [_text(initial) for initial in _list(logo_text.get('initials'))]
        if logo.get('type', 'image') == 'text' and any(initials):
            typography = _dict(logo_text.get('typography'))
            candidates.append({
                'label': 'Logo',
                'color': _text(typography.get('fontColor')) or primary,
                'fontSize': typography.get('fontSize', 48),
                'fontWeight': typography.get('fontWeight', 700),
            })

        if _text(header.get('title')):
            typography = _dict(header.get('titleTypography'))
            candidates.append({
                'label': 'Title',
                'color': _text(typography.get('fontColor')) or primary,
                'fontSize': typography.get('fontSize', 20),
                'fontWeight': typography.get('fontWeight', 600),
            })

        if _text(header.get('subtitle')):
            typography = _dict(header.get('subtitleTypography'))
            candidates.append({
                'label': 'Subtitle',
                'color': _text(typography.get('fontColor')) or '#6b7280',
                'fontSize': typography.get('fontSize', 14),
                'fontWeight': typography.get('fontWeight', 400),
            })

        has_menu = any(
            _dict(item).get('showInMenu') and _text(_dict(item).get('label'))
            for item in _list(header.get('navigation'))
        )
        if has_menu:
            menu = _dict(header.get('menuTypography'))
            hover = _dict(header.get('menuHoverTypography'))
            candidates.append({
                'label': 'Menu',
                'color': _text(menu.get('fontColor')) or '#374151',
                'fontSize': menu.get('fontSize', 14),
                'fontWeight': menu.get('fontWeight', 400),
            })
            candidates.append({
                'label': 'Menu (hover)',
                'color': _text(hover.get('fontColor')) or primary,
                'fontSize': hover.get('fontSize', menu.get('fontSize', 14)),
                'fontWeight': hover.get('fontWeight', menu.get('fontWeight', 500)),
            })

        if not candidates:
            candidates.append({'label': 'Text', 'color': primary, 'fontSize': 14, 'fontWeight': 400})

        return candidates

    @staticmethod
    def _save_the_date_background(save_the_date, theme):
        style = _dict(save_the_date.get('style'))
        if _text(style.get('layout')).lower() != 'inline':
            # Card and modal layouts render text on a white box
            return '#ffffff'

        fallback = _text(theme.get('surfaceBackgroundColor')) or '#f8f6f4'
        background = _text(style.get('backgroundColor'))
        if not background or background.lower() in ('#f8f6f4', '#f5f5f5'):
            return fallback
        return background

    @staticmethod
    def _save_the_date_candidates(save_the_date, theme):
        primary = _text(theme.get('primaryColor')) or '#f97373'
        section = _dict(save_the_date.get('sectionTypography'))
        description = _dict(save_the_date.get('descriptionTypography'))
        numbers = _dict(save_the_date.get('countdownNumbersTypography'))
        labels = _dict(save_the_date.get('countdownLabelsTypography'))

        candidates = [
            {
                'label': 'Title',
                'color': _text(section.get('fontColor')) or primary,
                'fontSize': 30,
                'fontWeight': section.get('fontWeight', 700),
            },
            {
                'label': 'Date and venue',
                'color': _text(section.get('fontColor')) or primary,
                'fontSize': section.get('fontSize', 18),
                'fontWeight': section.get('fontWeight', 400),
            },
        ]

        if _text(save_the_date.get('description')):
            candidates.append({
                'label': 'Description',
                'color': _text(description.get('fontColor')) or '#666666',
                'fontSize': description.get('fontSize', 16),
                'fontWeight': description.get('fontWeight', 400),
            })

        if save_the_date.get('showCountdown', True):
            candidates.append({
                'label': 'Countdown (numbers)',
                'color': _text(numbers.get('fontColor')) or primary,
                'fontSize': numbers.get('fontSize', 48),
                'fontWeight': numbers.get('fontWeight', 700),
            })
            candidates.append({
                'label': 'Countdown (labels)',
                'color': _text(labels.get('fontColor')) or '#999999',
                'fontSize': labels.get('fontSize', 12),
                'fontWeight': labels.get('fontWeight', 400),
            })

        return candidates

    # Resource size

    @staticmethod
    def _gallery_items(album):
        album = _dict(album)
        items = album.get('items')
        if isinstance(items, list) and items:
            return items
        return _list(album.get('photos'))

    @staticmethod
    def _gallery_item_type(item):
        if not isinstance(item, dict):
            return 'image'
        item_type = _text(item.get('type') or 'image').lower()
        return item_type if item_type in ('image', 'video') else 'image'

    @classmethod
    def _gallery_item_url(cls, item):
        if isinstance(item, str):
            return item.strip()
        if not isinstance(item, dict):
            return ''
        if cls._gallery_item_type(item) == 'video':
            keys = ('displayUrl', 'display_url', 'url')
        else:
            keys = ('displayUrl', 'display_url', 'thumbnailUrl', 'thumbnail_url', 'url')
        for key in keys:
            if item.get(key):
                return _text(item[key])
        return ''

    @classmethod
    def collect_used_media_urls(cls, content):
        """URLs of media referenced by enabled sections."""
        urls = []
        sections = _dict(_dict(content).get('sections'))

        header = _dict(sections.get('header'))
        if header.get('enabled'):
            urls.append(_text(_dict(header.get('logo')).get('url')))

        hero = _dict(sections.get('hero'))
        if hero.get('enabled'):
            media = _dict(hero.get('media'))
            urls.append(_text(media.get('url')))
            urls.append(_text(media.get('fallback')))

        gallery = _dict(sections.get('photoGallery'))
        if gallery.get('enabled'):
            for album in _dict(gallery.get('albums')).values():
                for item in cls._gallery_items(album):
                    urls.append(cls._gallery_item_url(item))

        unique = []
        for url in urls:
            if url and url not in unique:
                unique.append(url)
        return unique

    @classmethod
    def calculate_resource_size(cls, site, content=None):
        """
        Sum the size of the wedding media referenced by the draft.

        Returns ``(total_bytes, top_files)`` where ``top_files`` holds the
        five heaviest files.
        """
        from apps.media.models import SiteMedia

        used_urls = cls.collect_used_media_urls(content if content is not None else site.draft_content)
        if not used_urls:
            return 0, []

        files = []
        media_items = SiteMedia.objects.filter(
            wedding_id=site.wedding_id,
            status=SiteMedia.STATUS_COMPLETED,
        ).only('id', 'original_name', 'path', 'size', 'variants')

        for media in media_items:
            candidates = [media.path] + [path for path in (media.variants or {}).values() if path]
            matched = next(
                (path for path in candidates if path and any(path in url for url in used_urls)),
                None,
            )
            if matched is None:
                continue

            if matched == media.path:
                size = media.size or 0
            else:
                size = media.get_variant_size(matched)
            files.append({'id': str(media.id), 'name': media.original_name, 'size': size})

        files.sort(key=lambda item: item['size'], reverse=True)
        return sum(item['size'] for item in files), files[:5]
