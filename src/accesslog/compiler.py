"""Compile an Apache ``LogFormat`` string into one anchored regex.

The format is scanned once, left to right.  Plain text is escaped and
copied; each ``%`` starts one of these branches:

* ``%%``       literal percent sign
* ``%>s``      final status, matched like ``%s``
* ``%{name}X`` parameterized directive, resolved against the variant list
* ``%X``       fixed directive

Usage::

    compiled = compile_format('%h %l %u %t "%r" %>s %b')
    fields = compiled.match(line)
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .directives import ValuePattern, lookup_fixed, match_parameterized
from .matcher import FieldMap, match_line

logger = logging.getLogger(__name__)


class FormatError(ValueError):
    """A format string could not be compiled.

    ``offset`` is the index in ``format`` of the offending character.
    """

    def __init__(self, message: str, format: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset} of {format!r}")
        self.format = format
        self.offset = offset


@dataclass(frozen=True, slots=True)
class Capture:
    """One captured field of a compiled format."""

    field: str
    group: str
    directive: str
    offset: int


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled format: the regex plus the fields it captures, in order."""

    format: str
    regex: re.Pattern[str]
    captures: tuple[Capture, ...]

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def fields(self) -> list[str]:
        return [c.field for c in self.captures]

    def match(self, line: str) -> FieldMap | None:
        return match_line(self, line)


class _PatternBuilder:
    """Collects regex fragments while the format is scanned."""

    def __init__(self) -> None:
        self._fragments: list[str] = [r"\A"]
        self._literal: list[str] = []
        self._captures: list[Capture] = []
        self._seen: dict[str, str] = {}

    def literal(self, text: str) -> None:
        self._literal.append(text)

    def capture(self, value: ValuePattern, directive: str, offset: int) -> None:
        self._flush_literal()
        first = self._seen.get(value.field)
        if first is not None:
            # Repeated field: must still match, the first occurrence is kept.
            if first != directive and first.startswith("%{") and directive.startswith("%{"):
                logger.warning(
                    "%s at offset %d has the same field %s as %s; only the first value is kept",
                    directive, offset, value.field, first,
                )
            else:
                logger.debug("Field %s repeated by %s at offset %d", value.field, directive, offset)
            body = f"(?:{value.regex})"
        else:
            group = f"f{len(self._captures)}"
            self._captures.append(Capture(value.field, group, directive, offset))
            self._seen[value.field] = directive
            body = f"(?P<{group}>{value.regex})"
        self._fragments.append(value.prefix + body + value.suffix)

    def build(self, fmt: str) -> CompiledPattern:
        self._flush_literal()
        self._fragments.append(r"\Z")
        regex = re.compile("".join(self._fragments))
        return CompiledPattern(format=fmt, regex=regex, captures=tuple(self._captures))

    def _flush_literal(self) -> None:
        if self._literal:
            self._fragments.append(re.escape("".join(self._literal)))
            self._literal.clear()


def compile_format(fmt: str) -> CompiledPattern:
    """Compile a ``LogFormat`` directive string.

    Raises:
        FormatError: on a dangling ``%``, an unknown directive, ``%>`` not
            followed by ``s``, an unterminated or empty ``%{...}``, or a
            ``%{name}X`` that no parameterized directive accepts.
    """
    builder = _PatternBuilder()
    i = 0
    n = len(fmt)

    while i < n:
        ch = fmt[i]
        if ch != "%":
            builder.literal(ch)
            i += 1
            continue

        if i + 1 >= n:
            raise FormatError("Dangling '%' at end of format", fmt, i)
        code = fmt[i + 1]

        if code == "%":
            builder.literal("%")
            i += 2

        elif code == ">":
            if fmt[i + 2:i + 3] != "s":
                raise FormatError("Unknown directive '%>' (only '%>s' is supported)", fmt, i + 1)
            builder.capture(lookup_fixed(">s"), "%>s", i)
            i += 3

        elif code == "{":
            brace = i + 1
            close = fmt.find("}", brace)
            if close == -1:
                raise FormatError("Unterminated '{'", fmt, brace)
            if close == brace + 1:
                raise FormatError("Empty name in '%{}'", fmt, brace)
            token = fmt[brace:close + 2]
            value = match_parameterized(token)
            if value is None:
                raise FormatError(f"Unknown directive '%{token}'", fmt, brace)
            builder.capture(value, "%" + token, i)
            i = close + 2

        else:
            value = lookup_fixed(code)
            if value is None:
                raise FormatError(f"Unknown directive '%{code}'", fmt, i + 1)
            builder.capture(value, "%" + code, i)
            i += 2

    compiled = builder.build(fmt)
    logger.debug("Compiled %r -> %s (fields: %s)", fmt, compiled.pattern, ", ".join(compiled.fields))
    return compiled
