"""Utility helpers for turning names into slugs and lookup keys."""

from __future__ import annotations

import re
import unicodedata

MAX_SLUG_LENGTH = 128

_WHITESPACE_RE = re.compile(r"\s+", flags=re.UNICODE)


def channel_slug(value: str) -> str:
    """Lowercase the name and collapse whitespace runs into single hyphens.

    Returns an empty string when nothing but whitespace was supplied.
    """

    normalized = unicodedata.normalize("NFKC", value or "").strip()
    if not normalized:
        return ""
    slug = _WHITESPACE_RE.sub("-", normalized.casefold())
    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug


def mention_key(value: str) -> str:
    """Case-insensitive comparison key for logins, display names and @tokens."""

    return unicodedata.normalize("NFKC", value or "").casefold()
