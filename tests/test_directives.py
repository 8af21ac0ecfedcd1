"""Tests for the directive table."""
from __future__ import annotations

import pytest

from accesslog.directives import (
    FIXED,
    Parameterized,
    lookup_fixed,
    match_parameterized,
    sanitize_name,
)


# ---------------------------------------------------------------------------
# Fixed directives
# ---------------------------------------------------------------------------

class TestLookupFixed:
    @pytest.mark.parametrize("code,field", [
        ("a", "remoteIP"),
        ("b", "lengthCLF"),
        ("h", "host"),
        ("l", "logname"),
        ("r", "request"),
        ("s", "status"),
        (">s", "status"),
        ("t", "time"),
        ("u", "user"),
        ("X", "connectionStatus"),
        ("p", "port___canonical"),
        ("P", "pid___pid"),
    ])
    def test_known_codes(self, code: str, field: str) -> None:
        value = lookup_fixed(code)
        assert value is not None
        assert value.field == field

    @pytest.mark.parametrize("code", ["Q", "z", "{", ">", ""])
    def test_unknown_codes(self, code: str) -> None:
        assert lookup_fixed(code) is None

    def test_time_brackets_are_outside_the_capture(self) -> None:
        value = FIXED["t"]
        assert value.prefix == r"\["
        assert value.suffix == r"\]"
        assert value.regex.startswith(r"\d{2}/")

    def test_connection_status_is_a_character_class(self) -> None:
        assert FIXED["X"].regex == "[X+-]"


# ---------------------------------------------------------------------------
# Parameterized directives
# ---------------------------------------------------------------------------

class TestMatchParameterized:
    def test_variant_order(self) -> None:
        assert [kind.letter for kind in Parameterized] == ["C", "e", "i", "n", "o", "p", "P", "t"]

    @pytest.mark.parametrize("token,field", [
        ("{Referer}i", "reqHeader___referer"),
        ("{User-agent}i", "reqHeader___useragent"),
        ("{session-ID}C", "cookie___sessionid"),
        ("{UNIQUE_ID}e", "env___unique_id"),
        ("{mod-note}n", "note___modnote"),
        ("{Content-Type}o", "respHeader___contenttype"),
        ("{local}p", "port___local"),
        ("{remote}p", "port___remote"),
        ("{hextid}P", "pid___hextid"),
        ("{%Y-%m-%d}t", "locTime___%y%m%d"),
    ])
    def test_field_names(self, token: str, field: str) -> None:
        value = match_parameterized(token)
        assert value is not None
        assert value.field == field

    @pytest.mark.parametrize("token", [
        "{Referer}x",       # unknown letter
        "{Referer}",        # no letter
        "{bogus}p",         # not a port kind
        "{thread}P",        # not a pid kind
        "{Foo Bar}i",       # header names have no spaces
        "{a.b}e",
    ])
    def test_rejected_tokens(self, token: str) -> None:
        assert match_parameterized(token) is None

    def test_cookie_names_are_free_form(self) -> None:
        value = match_parameterized("{my.cookie}C")
        assert value is not None
        assert value.field == "cookie___my.cookie"

    def test_port_value_is_numeric(self) -> None:
        value = match_parameterized("{canonical}p")
        assert value is not None
        assert value.regex == r"\d+"


@pytest.mark.parametrize("raw,expected", [
    ("User-Agent", "useragent"),
    ("X-Forwarded-For", "xforwardedfor"),
    ("referer", "referer"),
    ("UNIQUE_ID", "unique_id"),
])
def test_sanitize_name(raw: str, expected: str) -> None:
    assert sanitize_name(raw) == expected
