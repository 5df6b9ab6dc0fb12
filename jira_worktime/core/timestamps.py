"""Timestamp parsing against one fixed, Java-style date pattern."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

import pandas as pd
import pytz

from .config import DEFAULT_SOURCE_DATE_FORMAT, FALLBACK_TIMEZONE
from .errors import ParseError

# Pattern letter -> directive; a run of the same letter is one field ("ZZ", "SSS").
_LETTER_DIRECTIVES: dict[str, str] = {
    "d": "%d",
    "H": "%H",
    "h": "%I",
    "m": "%M",
    "s": "%S",
    "S": "%f",
    "Z": "%z",
    "X": "%z",
    "a": "%p",
}


def _run_directive(letter: str, width: int) -> str | None:
    if letter in ("y", "Y"):
        return "%y" if width == 2 else "%Y"
    if letter == "M":
        if width >= 4:
            return "%B"
        return "%b" if width == 3 else "%m"
    if letter == "E":
        return "%A" if width >= 4 else "%a"
    return _LETTER_DIRECTIVES.get(letter)


@lru_cache(maxsize=32)
def java_pattern_to_strptime(pattern: str) -> str:
    """Translate a Java/Joda date pattern into strptime directives.

    Text in single quotes is copied literally (``''`` is a quote). Patterns that
    already contain ``%`` directives are returned unchanged.

    Examples
    --------
    >>> java_pattern_to_strptime("yyyy-MM-dd'T'HH:mm:ss.SSSZ")
    '%Y-%m-%dT%H:%M:%S.%f%z'
    >>> java_pattern_to_strptime("d/M/yyyy H:mmZZ")
    '%d/%m/%Y %H:%M%z'
    """
    if "%" in pattern:
        return pattern
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "'":
            end = pattern.find("'", i + 1)
            if end == i + 1:
                out.append("'")
                i += 2
                continue
            if end < 0:
                raise ParseError(f"Unterminated quote in date format '{pattern}'", date_format=pattern)
            out.append(pattern[i + 1 : end])
            i = end + 1
            continue
        if not ch.isalpha():
            out.append(ch)
            i += 1
            continue
        run_end = i
        while run_end < len(pattern) and pattern[run_end] == ch:
            run_end += 1
        directive = _run_directive(ch, run_end - i)
        if directive is None:
            raise ParseError(
                f"Unsupported token '{pattern[i:run_end]}' in date format '{pattern}'",
                date_format=pattern,
            )
        out.append(directive)
        i = run_end
    return "".join(out)


def validate_date_format(date_format: str) -> str:
    """Check that ``date_format`` can parse a timestamp it formats itself.

    Returns the strptime directives; raises ``ParseError`` for patterns with
    unknown letters or fields pandas cannot parse (such as a repeated offset).
    """
    directives = java_pattern_to_strptime(date_format)
    sample = datetime(2015, 10, 6, 13, 42, 55, 837000, tzinfo=pytz.UTC).strftime(directives)
    try:
        pd.to_datetime(sample, format=directives, exact=True)
    except Exception as exc:
        raise ParseError(
            f"Date format '{date_format}' can't be used for parsing: {exc}", date_format=date_format
        ) from exc
    return directives

def parse_timestamp(
    text: object,
    date_format: str = DEFAULT_SOURCE_DATE_FORMAT,
    *,
    tz: str | None = None,
) -> datetime:
    """Parse ``text`` with ``date_format`` into a timezone-aware datetime.

    Parameters
    ----------
    text : object
        Raw field value; anything other than a non-empty string is rejected.
    date_format : str
        Java-style pattern (or strptime directives) every value must match.
    tz : str, optional
        pytz zone name applied when the format carries no offset. Defaults to UTC.

    Raises
    ------
    ParseError
        If the value is not a string, is empty, or does not match the format.
    """
    if not isinstance(text, str):
        raise ParseError(
            f"Value {text!r} is not a string, so can't be parsed to a date",
            value=text,
            date_format=date_format,
        )
    if not text.strip():
        raise ParseError("Empty value can't be parsed to a date", value=text, date_format=date_format)
    directives = java_pattern_to_strptime(date_format)
    try:
        ts = pd.to_datetime(text, format=directives, exact=True)
    except Exception as exc:
        raise ParseError(
            f"Value '{text}' could not be parsed using {date_format} format",
            value=text,
            date_format=date_format,
        ) from exc
    if ts is None or pd.isna(ts):
        raise ParseError(
            f"Value '{text}' could not be parsed using {date_format} format",
            value=text,
            date_format=date_format,
        )
    if ts.tzinfo is None:
        ts = ts.tz_localize(pytz.timezone(tz or FALLBACK_TIMEZONE))
    return ts.to_pydatetime()


@dataclass(frozen=True, slots=True)
class TimestampParser:
    """Immutable parser bound to one format; safe to share across threads."""

    date_format: str = DEFAULT_SOURCE_DATE_FORMAT
    timezone: str | None = None

    def parse(self, text: object) -> datetime:
        return parse_timestamp(text, self.date_format, tz=self.timezone)
