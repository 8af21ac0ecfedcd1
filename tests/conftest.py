"""Shared pytest fixtures for accesslog tests."""
from __future__ import annotations

from pathlib import Path

import pytest

COMBINED = '%h %l %u %t "%r" %>s %b "%{Referer}i" "%{User-agent}i"'


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "access.log") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def combined_format() -> str:
    return COMBINED


@pytest.fixture()
def combined_line() -> str:
    return (
        '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326 '
        '"http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"'
    )


@pytest.fixture()
def common_log_lines() -> list[str]:
    return [
        '192.168.1.1 - - [01/Aug/2025:10:00:00 +0000] "GET /api/v1/health HTTP/1.1" 200 512',
        '10.0.0.1 - bob [01/Aug/2025:10:00:01 +0000] "POST /api/v1/jobs HTTP/1.1" 201 1024',
        '192.168.1.2 - - [01/Aug/2025:10:00:02 +0000] "GET /missing HTTP/1.1" 404 -',
    ]
