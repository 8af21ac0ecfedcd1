"""Named LogFormat strings shipped with the default Apache configuration."""
from __future__ import annotations

NAMED_FORMATS: dict[str, str] = {
    "common": '%h %l %u %t "%r" %>s %b',
    "vhost_common": '%v %h %l %u %t "%r" %>s %b',
    "combined": '%h %l %u %t "%r" %>s %b "%{Referer}i" "%{User-agent}i"',
    "referer": "%{Referer}i -> %U",
    "agent": "%{User-agent}i",
}


def resolve_format(name_or_format: str) -> str:
    """Return the directive string for a named format, else the argument itself."""
    return NAMED_FORMATS.get(name_or_format.lower(), name_or_format)
