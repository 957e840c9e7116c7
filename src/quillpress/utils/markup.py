"""Helpers for the editor's rich-text (HTML) bodies."""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]*>")


def strip_markup(html: str | None) -> str:
    """Remove markup tags and surrounding whitespace from `html`.

    >>> strip_markup("<p> World </p>")
    'World'
    >>> strip_markup("<p><br></p>")
    ''
    """
    if not html:
        return ""
    return _TAG_RE.sub("", html).strip()


def has_text(html: str | None) -> bool:
    """Return True when `html` contains visible text once tags are removed."""
    return bool(strip_markup(html))


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Trim tags, drop empties and duplicates while keeping first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)
