"""Presence and numeric-shape checks for raw form input."""

from __future__ import annotations

import re
from typing import Any, Optional


INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Leading/trailing white space accepted by number parsing (tab, LF, VT, FF, CR, space).
NUMBER_WHITESPACE = "\t\n\v\f\r "

_FLOAT_RE = re.compile(
    r"^[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$",
    re.ASCII,
)
_INTEGER_RE = re.compile(r"^[+-]?\d+$", re.ASCII)
_FLOAT_SYMBOLS = {"nan", "infinity", "+infinity", "-infinity", "∞", "+∞", "-∞"}


def is_missing(value: Any) -> bool:
    """True for values that count as "not supplied": ``None`` and ``""``.

    White space is deliberately not stripped here; ``" "`` is a supplied value
    that later fails the number check.
    """
    return value is None or value == ""


def is_number(value: Optional[str]) -> bool:
    if value is None:
        return False
    text = value.strip(NUMBER_WHITESPACE)
    if not text:
        return False
    if text.lower() in _FLOAT_SYMBOLS:
        return True
    return _FLOAT_RE.match(text) is not None


def parse_int32(value: Optional[str]) -> Optional[int]:
    """Parse a base-10 32-bit signed integer, returning None when it does not fit."""
    if value is None:
        return None
    text = value.strip(NUMBER_WHITESPACE)
    if not _INTEGER_RE.match(text):
        return None
    number = int(text)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number
