"""Directive table for Apache ``LogFormat`` strings.

Two tables:

* ``FIXED`` maps a one-character code (plus the two-step ``>s``) to the
  pattern of the field it logs.
* ``Parameterized`` lists the ``%{name}X`` directives in the order they are
  tried.  Each variant knows which names it accepts and how to build the
  field key from the name.

See http://httpd.apache.org/docs/2.4/mod/mod_log_config.html#formats
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_METHODS = r"(?:GET|POST|HEAD|PUT|DELETE|OPTIONS|PATCH|TRACE|CONNECT)"
_MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"
_IPV4 = r"\d+\.\d+\.\d+\.\d+"
_LAZY = r".+?"


@dataclass(frozen=True, slots=True)
class ValuePattern:
    """How one directive appears in a log line.

    ``regex`` is captured under ``field``; ``prefix`` and ``suffix`` are
    matched around the capture but not kept (the brackets of ``%t``).
    """

    field: str
    regex: str
    prefix: str = ""
    suffix: str = ""


FIXED: dict[str, ValuePattern] = {
    # Remote IP-address
    "a": ValuePattern("remoteIP", _IPV4),
    # Local IP-address
    "A": ValuePattern("localIP", _IPV4),
    # Response size in CLF format: '-' rather than a 0 when no bytes are sent
    "b": ValuePattern("lengthCLF", r"-|\d+"),
    # Response size, excluding HTTP headers
    "B": ValuePattern("length", r"\d+"),
    # Time taken to serve the request, in microseconds
    "D": ValuePattern("requestTimeMicro", r"\d+"),
    "f": ValuePattern("filename", _LAZY),
    # Remote host; an address, or a name with HostnameLookups on
    "h": ValuePattern("host", r"\S+"),
    "H": ValuePattern("protocol", _LAZY),
    # Keepalive requests handled on this connection, 0 for the initial one
    "k": ValuePattern("keepalive", r"\d+"),
    # Remote logname from identd
    "l": ValuePattern("logname", r"-|\w+"),
    "m": ValuePattern("method", _METHODS),
    "p": ValuePattern("port___canonical", r"\d+"),
    "P": ValuePattern("pid___pid", r"[a-fA-F\d]+"),
    # Query string, '?'-prefixed when present, otherwise empty
    "q": ValuePattern("queryString", r"(?:\?.*?)?"),
    # First line of request
    "r": ValuePattern("request", _METHODS + r" .+? HTTP/\d(?:\.\d)?"),
    # Status of the original request; '>s' is the final one after redirects
    "s": ValuePattern("status", r"\d{3}"),
    ">s": ValuePattern("status", r"\d{3}"),
    # Time the request was received, CLF format
    "t": ValuePattern(
        "time",
        r"\d{2}/" + _MONTHS + r"/\d{4}:\d{2}:\d{2}:\d{2} [+-]\d{4}",
        prefix=r"\[",
        suffix=r"\]",
    ),
    # Time taken to serve the request, in seconds
    "T": ValuePattern("requestTime", r"\d+"),
    # Remote user from auth; may be bogus if the status is 401
    "u": ValuePattern("user", r"-|\S+"),
    "U": ValuePattern("URL", _LAZY),
    "v": ValuePattern("serverName", _LAZY),
    "V": ValuePattern("canonicalName", _LAZY),
    # Connection status: aborted (X), kept alive (+), closed (-)
    "X": ValuePattern("connectionStatus", r"[X+-]"),
    # Bytes received and sent, including headers
    "I": ValuePattern("recBytes", r"\d+"),
    "O": ValuePattern("sentBytes", r"\d+"),
}

_TOKEN_NAME = r"[A-Za-z0-9_-]+"


class Parameterized(Enum):
    """``%{name}X`` directives, in the order they are tried."""

    COOKIE = ("C", "cookie", _LAZY, _LAZY)
    ENV = ("e", "env", _TOKEN_NAME, _LAZY)
    REQ_HEADER = ("i", "reqHeader", _TOKEN_NAME, _LAZY)
    NOTE = ("n", "note", _TOKEN_NAME, _LAZY)
    RESP_HEADER = ("o", "respHeader", _TOKEN_NAME, _LAZY)
    PORT = ("p", "port", r"canonical|local|remote", r"\d+")
    PID = ("P", "pid", r"pid|tid|hextid|hexid", r"[a-fA-F\d]+")
    LOC_TIME = ("t", "locTime", _LAZY, _LAZY)

    def __init__(self, letter: str, category: str, names: str, regex: str) -> None:
        self.letter = letter
        self.category = category
        self.regex = regex
        self.token_re = re.compile(r"\{(?P<name>%s)\}%s" % (names, re.escape(letter)))

    def field_for(self, name: str) -> str:
        return f"{self.category}___{sanitize_name(name)}"


def sanitize_name(name: str) -> str:
    """Lower-case a bracketed directive name and drop its hyphens."""
    return name.replace("-", "").lower()


def lookup_fixed(code: str) -> ValuePattern | None:
    return FIXED.get(code)


def match_parameterized(token: str) -> ValuePattern | None:
    """Resolve a ``{name}X`` token to its value pattern.

    ``token`` runs from the opening brace through the directive letter.
    Returns None when no variant accepts it.
    """
    for kind in Parameterized:
        m = kind.token_re.fullmatch(token)
        if m:
            return ValuePattern(kind.field_for(m.group("name")), kind.regex)
    return None
