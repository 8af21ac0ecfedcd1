"""Apply a compiled format to a single log line."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .compiler import CompiledPattern

FieldMap = dict[str, str]


def match_line(pattern: CompiledPattern, line: str) -> FieldMap | None:
    """Return the fields of ``line``, or None if it does not fit the format.

    Only line terminators are stripped; spaces and tabs are part of the
    line.  A format without directives yields ``{}`` on a match, so test
    the result against None, not for truthiness.
    """
    m = pattern.regex.match(line.strip("\r\n"))
    if m is None:
        return None
    return {c.field: m.group(c.group) for c in pattern.captures}
