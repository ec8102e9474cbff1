"""Strict scalar conversion of query values.

``int()`` and ``float()`` accept surrounding whitespace, ``_`` digit
separators and non-ASCII digits. Query values must be plain ASCII numerals,
so candidates are checked against a pattern first.
"""

from __future__ import annotations

import re

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text!r}")
    return int(text)


def parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"invalid float literal: {text!r}")
    return float(text)
