"""Text helpers for turning Basecamp strings into Redmine field values.

All length arguments count Unicode code points, never bytes. Names are
truncated in the middle because Basecamp titles tend to differ only at
the end ("Project 1, Issue XYZ" vs "Project 1, Issue ABC").
"""

import math
import re
import unicodedata
from numbers import Integral

from b2r.models.migration_error import InvalidArgumentError

DEFAULT_ELLIPSIS = "..."
SIGNATURE_SEPARATOR = "\n\n-- \n"

_DASHES = re.compile("[-\u2010\u2012\u2013\u2014\u2015\u2043\u2212\u00ad]")
_DIV_OPEN = re.compile(r"<div[^>]*>")
_LINE_BREAK = re.compile(r"</div>|<br ?/?>")
_NON_SLUG = re.compile(r"[^a-z0-9 ]")
_SPACES = re.compile(r" +")

# Backslash sequences Redmine reads as control or hex escapes
_ESCAPED_TOKENS = (
    ("\\C", "\\\\C"),
    ("\\M", "\\\\M"),
    ("s\\x", "s\\\\x"),
)


def _check_length(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        msg = f"{name} must be an integer, got {type(value).__name__}"
        raise InvalidArgumentError(msg)
    if value < 0:
        msg = f"{name} must not be negative, got {value}"
        raise InvalidArgumentError(msg)
    return int(value)


def count_chars(text: str) -> int:
    """Number of Unicode characters in ``text``."""
    return len(text)


def left(text: str, chars: int) -> str:
    """First ``chars`` characters of ``text``."""
    return text[: _check_length(chars, "chars")]


def right(text: str, chars: int) -> str:
    """Last ``chars`` characters of ``text``."""
    chars = _check_length(chars, "chars")
    return text[-chars:] if chars else ""


def center_truncate(text: str, limit: int, ellipsis: str = DEFAULT_ELLIPSIS) -> str:
    """Shorten ``text`` to at most ``limit`` characters by cutting out its middle.

    The kept prefix and suffix are joined with ``ellipsis``. A limit
    no longer than the ellipsis itself falls back to a plain left cut so the
    bound still holds.

    Args:
        text: String to shorten
        limit: Maximum number of characters of the result
        ellipsis: Marker inserted where characters were removed

    Returns:
        ``text`` unchanged if it fits, otherwise the truncated string

    Raises:
        InvalidArgumentError: If ``limit`` is not a non-negative integer

    """
    limit = _check_length(limit, "limit")
    if count_chars(text) <= limit:
        return text

    marker = count_chars(ellipsis)
    if limit <= marker:
        return left(text, limit)

    head = math.ceil(limit / 2) - math.floor(marker / 2)
    tail = math.floor(limit / 2) - math.ceil(marker / 2)
    return left(text, head) + ellipsis + right(text, tail)


def cleanse_quotes(text: str) -> str:
    """Drop double quotes, escape troublesome backslash sequences and strip."""
    cleaned = text.replace('"', "")
    for token, replacement in _ESCAPED_TOKENS:
        cleaned = cleaned.replace(token, replacement)
    return cleaned.strip()


def cleanse_html(text: str) -> str:
    """Decode basic entities and turn Basecamp's div/br markup into newlines.

    Entities are decoded first, so encoded markup such as ``&lt;br&gt;``
    becomes a line break as well.
    """
    decoded = text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")
    decoded = _DIV_OPEN.sub("", decoded)
    decoded = _LINE_BREAK.sub("\n", decoded)
    return decoded.strip()


def transliterate(text: str) -> str:
    """Normalize dash variants and fold accented letters to ASCII."""
    text = _DASHES.sub("-", text)
    folded = unicodedata.normalize("NFKD", text)
    return "".join(char for char in folded if not unicodedata.combining(char))


def to_slug(text: str) -> str:
    """Lowercase, dash-separated identifier made of ``[a-z0-9-]``."""
    lowered = transliterate(text).lower()
    return _SPACES.sub("-", _NON_SLUG.sub(" ", lowered).strip())


def sign(body: str, author_name: str) -> str:
    """Append the ``-- author`` signature Basecamp content carries in Redmine."""
    return f"{body}{SIGNATURE_SEPARATOR}{author_name}"
