"""Sanitization of user provided site content."""

import logging
import re

from django.utils.html import escape

logger = logging.getLogger(__name__)


EVENT_HANDLERS = (
    'onclick', 'ondblclick', 'onmousedown', 'onmouseup', 'onmouseover',
    'onmousemove', 'onmouseout', 'onmouseenter', 'onmouseleave',
    'onkeydown', 'onkeypress', 'onkeyup',
    'onfocus', 'onblur', 'onchange', 'onsubmit', 'onreset', 'onselect',
    'onload', 'onunload', 'onerror', 'onabort', 'onresize', 'onscroll',
    'ondrag', 'ondragend', 'ondragenter', 'ondragleave', 'ondragover',
    'ondragstart', 'ondrop',
    'oncopy', 'oncut', 'onpaste',
    'onanimationstart', 'onanimationend', 'onanimationiteration',
    'ontransitionend',
    'oncontextmenu', 'oninput', 'oninvalid', 'onsearch', 'ontoggle',
    'onwheel', 'ontouchstart', 'ontouchmove', 'ontouchend', 'ontouchcancel',
    'onpointerdown', 'onpointerup', 'onpointermove', 'onpointerenter',
    'onpointerleave', 'onpointerover', 'onpointerout', 'onpointercancel',
    'onstart', 'onfinish', 'onbounce',
    'onbeforeprint', 'onafterprint', 'onbeforeunload', 'onhashchange',
    'onmessage', 'onoffline', 'ononline', 'onpagehide', 'onpageshow',
    'onpopstate', 'onstorage',
)

ALLOWED_TAGS = ('b', 'strong', 'i', 'em', 'a', 'br', 'p', 'span')
ALLOWED_ATTRIBUTES = ('href', 'class', 'style')
ALLOWED_STYLE_PROPERTIES = (
    'color', 'background-color', 'font-size', 'font-weight', 'font-style',
    'text-align', 'text-decoration', 'margin', 'padding', 'border',
    'margin-top', 'margin-bottom', 'margin-left', 'margin-right',
    'padding-top', 'padding-bottom', 'padding-left', 'padding-right',
)

FLAGS = re.IGNORECASE | re.DOTALL

SCRIPT_BLOCK_RE = re.compile(r'<script\b[^>]*>.*?</script>', FLAGS)
SCRIPT_OPEN_RE = re.compile(r'<script\b[^>]*>', FLAGS)

_HANDLER_ALTERNATION = '|'.join(sorted(EVENT_HANDLERS, key=len, reverse=True))
EVENT_HANDLER_PATTERNS = (
    re.compile(r'\s*\b(?:%s)\s*=\s*"[^"]*"' % _HANDLER_ALTERNATION, FLAGS),
    re.compile(r"\s*\b(?:%s)\s*=\s*'[^']*'" % _HANDLER_ALTERNATION, FLAGS),
    re.compile(r'\s*\b(?:%s)\s*=\s*[^\s>]*' % _HANDLER_ALTERNATION, FLAGS),
)

DANGEROUS_URL_PATTERNS = (
    re.compile(r'\s*href\s*=\s*"javascript:[^"]*"', FLAGS),
    re.compile(r"\s*href\s*=\s*'javascript:[^']*'", FLAGS),
    re.compile(r'\s*src\s*=\s*"javascript:[^"]*"', FLAGS),
    re.compile(r"\s*src\s*=\s*'javascript:[^']*'", FLAGS),
    re.compile(r'\s*href\s*=\s*"data:[^"]*"', FLAGS),
    re.compile(r"\s*href\s*=\s*'data:[^']*'", FLAGS),
    re.compile(r'\s*src\s*=\s*"data:text/html[^"]*"', FLAGS),
    re.compile(r"\s*src\s*=\s*'data:text/html[^']*'", FLAGS),
    re.compile(r'\s*href\s*=\s*"vbscript:[^"]*"', FLAGS),
    re.compile(r"\s*href\s*=\s*'vbscript:[^']*'", FLAGS),
)

ANY_TAG_RE = re.compile(r'</?([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>')
OPEN_TAG_RE = re.compile(r'<([a-zA-Z][a-zA-Z0-9]*)([^>]*)>')
DOUBLE_QUOTED_ATTR_RE = re.compile(r'(\w+)\s*=\s*"([^"]*)"')
SINGLE_QUOTED_ATTR_RE = re.compile(r"(\w+)\s*=\s*'([^']*)'")
SAFE_HREF_RE = re.compile(r'^(https?://|#|mailto:)', re.IGNORECASE)
DANGEROUS_STYLE_RE = re.compile(r'url\s*\(|expression\s*\(|javascript:|behavior:', re.IGNORECASE)


class ContentSanitizer:
    """Strip XSS vectors from strings before they are stored."""

    @classmethod
    def sanitize(cls, content):
        """
        Remove script tags, inline event handlers and dangerous URLs.

        Text without markup is returned unchanged.
        """
        original = content

        content = SCRIPT_BLOCK_RE.sub('', content)
        content = SCRIPT_OPEN_RE.sub('', content)

        for pattern in EVENT_HANDLER_PATTERNS:
            content = pattern.sub('', content)

        for pattern in DANGEROUS_URL_PATTERNS:
            content = pattern.sub('', content)

        if content != original:
            logger.warning(
                f"[SANITIZER] Potential injection removed "
                f"(original length {len(original)}, sanitized length {len(content)})"
            )

        return content

    @classmethod
    def sanitize_rich_text(cls, content):
        """Sanitize and keep only a small set of formatting tags and attributes."""
        content = cls.sanitize(content)
        content = cls._strip_disallowed_tags(content)
        return OPEN_TAG_RE.sub(cls._clean_tag, content)

    @classmethod
    def sanitize_data(cls, data):
        """Recursively sanitize every string inside dicts and lists."""
        if isinstance(data, str):
            return cls.sanitize(data)
        if isinstance(data, dict):
            return {key: cls.sanitize_data(value) for key, value in data.items()}
        if isinstance(data, list):
            return [cls.sanitize_data(value) for value in data]
        return data

    @staticmethod
    def _strip_disallowed_tags(content):
        def replace(match):
            return match.group(0) if match.group(1).lower() in ALLOWED_TAGS else ''
        return ANY_TAG_RE.sub(replace, content)

    @classmethod
    def _clean_tag(cls, match):
        tag = match.group(1).lower()
        if tag not in ALLOWED_TAGS:
            return match.group(0)
        return f"<{tag}{cls._filter_attributes(match.group(2))}>"

    @classmethod
    def _filter_attributes(cls, attributes):
        cleaned = []
        found = DOUBLE_QUOTED_ATTR_RE.findall(attributes) + SINGLE_QUOTED_ATTR_RE.findall(attributes)

        for name, value in found:
            name = name.lower()
            if name not in ALLOWED_ATTRIBUTES:
                continue

            if name == 'href':
                value = value.strip()
                if not SAFE_HREF_RE.match(value) or 'javascript:' in value.lower():
                    continue

            if name == 'style':
                value = cls._sanitize_style(value)
                if not value:
                    continue

            cleaned.append(f'{name}="{escape(value)}"')

        return ' ' + ' '.join(cleaned) if cleaned else ''

    @staticmethod
    def _sanitize_style(style):
        declarations = []
        for declaration in style.split(';'):
            declaration = declaration.strip()
            if not declaration or ':' not in declaration:
                continue

            prop, value = declaration.split(':', 1)
            prop = prop.strip().lower()
            value = value.strip()

            if prop not in ALLOWED_STYLE_PROPERTIES:
                continue
            if DANGEROUS_STYLE_RE.search(value):
                continue

            declarations.append(f"{prop}: {value}")

        return '; '.join(declarations)
