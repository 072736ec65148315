from __future__ import annotations

import datetime
import re
from typing import Optional

from dateutil import parser as dateparser

from typtree.compat import lru_cache
from typtree.core.context import INVARIANT, Culture

__all__ = ("parse_date", "parse_datetime", "translate_format")


_TOKENS = {
    "yyyy": "%Y",
    "yyy": "%Y",
    "yy": "%y",
    "y": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "M": "%m",
    "dddd": "%A",
    "ddd": "%a",
    "dd": "%d",
    "d": "%d",
    "HH": "%H",
    "H": "%H",
    "hh": "%I",
    "h": "%I",
    "mm": "%M",
    "m": "%M",
    "ss": "%S",
    "s": "%S",
    "tt": "%p",
    "t": "%p",
    "zzz": "%z",
    "zz": "%z",
    "z": "%z",
    "K": "%z",
}
_TOKEN_PATTERN = re.compile(
    r"""
    (?P<quoted>'[^']*'|"[^"]*")
    |\\(?P<escaped>.)
    |(?P<fraction>[fF]{1,7})
    |(?P<token>yyyy|yyy|yy|y|MMMM|MMM|MM|M|dddd|ddd|dd|d|HH|H|hh|h|mm|m|ss|s|tt|t|zzz|zz|z|K)
    |(?P<literal>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def _literal(text: str) -> str:
    return text.replace("%", "%%")


@lru_cache(maxsize=256)
def translate_format(fmt: str) -> str:
    """Translate a custom date-time format pattern into ``strptime`` directives.

    Patterns which already contain a ``%`` directive are returned unchanged.

    Fractions of a second (``f`` through ``fffffff``) become ``%f``, which reads
    at most six digits, so text with seven fractional digits won't parse.

    Examples
    --------
    >>> from typtree.core.dates import translate_format
    >>> translate_format("dd yyyy MMM, hh:mm ss tt zzz")
    '%d %Y %b, %I:%M %S %p %z'
    >>> translate_format("yyyy-MM-dd'T'HH:mm:ss.fff")
    '%Y-%m-%dT%H:%M:%S.%f'
    >>> translate_format("%Y-%m-%d")
    '%Y-%m-%d'
    """
    if "%" in fmt:
        return fmt
    out = []
    for match in _TOKEN_PATTERN.finditer(fmt):
        kind = match.lastgroup
        value = match.group(kind)
        if kind == "quoted":
            out.append(_literal(value[1:-1]))
        elif kind in {"escaped", "literal"}:
            out.append(_literal(value))
        elif kind == "fraction":
            out.append("%f")
        else:
            out.append(_TOKENS[value])
    return "".join(out)


def parse_datetime(
    text: str, *, fmt: Optional[str] = None, culture: Culture = INVARIANT
) -> datetime.datetime:
    """Parse a date-time, strictly when a format is given.

    Without a format, parsing is lenient and honors the culture's day-first
    convention.

    Examples
    --------
    >>> from typtree.core.dates import parse_datetime
    >>> parse_datetime("2010-02-21 09:35:00")
    datetime.datetime(2010, 2, 21, 9, 35)
    >>> parse_datetime("21/02/2010 09:35", fmt="dd/MM/yyyy HH:mm")
    datetime.datetime(2010, 2, 21, 9, 35)
    """
    if fmt:
        return datetime.datetime.strptime(text, translate_format(fmt))
    return dateparser.parse(text, dayfirst=culture.dayfirst)


def parse_date(
    text: str, *, fmt: Optional[str] = None, culture: Culture = INVARIANT
) -> datetime.date:
    return parse_datetime(text, fmt=fmt, culture=culture).date()
