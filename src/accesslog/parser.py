"""Parse access logs written with an arbitrary Apache LogFormat.

Usage::

    parser = LogFormatParser('%h %l %u %t "%r" %>s %b')
    for entry in parser.parse_file("access.log"):
        print(entry["status"])
    print(parser.stats)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from .compiler import CompiledPattern, compile_format
from .formats import resolve_format
from .matcher import FieldMap, match_line

logger = logging.getLogger(__name__)


@dataclass
class ParseStats:
    """Line counts from the last ``parse_file`` run."""

    matched: int = 0
    unmatched: int = 0

    @property
    def total(self) -> int:
        return self.matched + self.unmatched


class LogFormatParser:
    """Parse lines of one LogFormat into field dicts.

    ``fmt`` is a directive string or one of the names in
    ``accesslog.formats.NAMED_FORMATS``.  It is compiled once, here, so a
    bad format raises ``FormatError`` from the constructor.
    """

    def __init__(self, fmt: str) -> None:
        self._compiled: CompiledPattern = compile_format(resolve_format(fmt))
        self.stats = ParseStats()

    @property
    def format(self) -> str:
        return self._compiled.format

    @property
    def pattern(self) -> str:
        return self._compiled.pattern

    @property
    def fields(self) -> list[str]:
        return self._compiled.fields

    def parse_line(self, line: str) -> FieldMap | None:
        return match_line(self._compiled, line)

    def parse_lines(self, lines: Iterable[str]) -> Iterator[FieldMap | None]:
        """Yield one result per input line, None for lines that do not match."""
        for line in lines:
            yield self.parse_line(line)

    def parse_file(self, path: str) -> Iterator[FieldMap]:
        """Stream the matching entries of a log file, skipping blank lines."""
        self.stats = ParseStats()
        with open(path, encoding="utf-8", errors="replace") as f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                entry = self.parse_line(line)
                if entry is None:
                    self.stats.unmatched += 1
                    logger.debug("%s:%d does not match format", path, line_no)
                    continue
                self.stats.matched += 1
                yield entry
        logger.info(
            "Parsed %s: %d matched, %d skipped", path, self.stats.matched, self.stats.unmatched
        )
