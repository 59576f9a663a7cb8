"""
Slug helpers for listing URLs.
"""

import re
import time
import unicodedata

_slug_pattern = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "anunt") -> str:
    """Lowercase ASCII slug; diacritics are folded (ș -> s, ă -> a)."""
    ascii_value = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    normalized = _slug_pattern.sub("-", ascii_value.lower()).strip("-")
    return normalized or fallback


def timestamp_suffix() -> str:
    return str(int(time.time() * 1000))


def with_timestamp(slug: str) -> str:
    """Suffix used when the plain slug is already taken."""
    return f"{slug}-{timestamp_suffix()}"


_filename_pattern = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Keep letters, digits, dot, dash and underscore; everything else becomes '_'."""
    base = (filename or "image").replace("\\", "/").rsplit("/", 1)[-1]
    return _filename_pattern.sub("_", base) or "image"
