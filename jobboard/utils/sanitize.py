"""
Input sanitization boundary.

Applied to client-supplied values right before they are persisted:
string leaves are trimmed and HTML-escaped, everything else passes
through unchanged. Dicts and lists are walked recursively.

Values stored under URL_FIELDS are links, not text. HTML-escaping them
would turn query strings like `?a=1&b=2` into `&amp;` and break the link,
so their markup characters are percent-encoded instead and `&` is kept.
"""

from html import escape
from typing import Any, Optional

URL_FIELDS = frozenset({
    "website",
    "logo",
    "link",
    "linkedIn",
    "github",
    "twitter",
    "profileImage",
    "resume",
})

_URL_ESCAPES = str.maketrans({
    "<": "%3C",
    ">": "%3E",
    '"': "%22",
    "'": "%27",
    " ": "%20",
})


def sanitize_url(value: str) -> str:
    """Trim and percent-encode the characters that could break out of an attribute."""
    return value.strip().translate(_URL_ESCAPES)


def sanitize_input(value: Any, field: Optional[str] = None) -> Any:
    """Trim and escape every string leaf of `value`."""
    if isinstance(value, str):
        if field in URL_FIELDS:
            return sanitize_url(value)
        return escape(value.strip(), quote=True)
    if isinstance(value, dict):
        return {key: sanitize_input(item, key) for key, item in value.items()}
    if isinstance(value, list):
        # List items inherit the key of the list, e.g. resume: [url, ...]
        return [sanitize_input(item, field) for item in value]
    return value
