"""
Durations in configuration files and log messages.

A duration may be given as a number of seconds or as a string
using d, h, m and s units, e.g. "10m" = 600 seconds or "1h30m"
= 5400 seconds. The ISO 8601 form without years and months
("PT10M") is accepted too.
"""

from __future__ import annotations

from typing import overload
import re

from .tconst import SEC_PER_DAY, SEC_PER_HOUR, SEC_PER_MIN

__all__ = ['convert', 'time_period', 'timestr']

_NUM = r'(\d+(?:[.,]\d+)?)'   # a number with optional fractional part
_RE_DURATION = re.compile(rf"""
    \s*
    (?:{_NUM}\s*d)?  \s*  (?:{_NUM}\s*h)?  \s*
    (?:{_NUM}\s*m)?  \s*  (?:{_NUM}\s*s?)?  \s*
    """, flags = re.ASCII | re.IGNORECASE | re.VERBOSE)
_RE_ISO_DURATION = re.compile(rf"""
    \s*
    P (?:{_NUM}D)?
    (?:
        T  (?:{_NUM}H)?  (?:{_NUM}M)?  (?:{_NUM}S)?
     )?
     \s*
     """, flags = re.ASCII | re.VERBOSE)

# match groups from the smallest unit up
_SCALE = (1, SEC_PER_MIN, SEC_PER_HOUR, SEC_PER_DAY)


def _convert(tstr: str) -> float:
    match = _RE_DURATION.fullmatch(tstr) or _RE_ISO_DURATION.fullmatch(tstr)
    if match is None:
        raise ValueError("Invalid duration")

    parts = [(value, scale) for value, scale in zip(reversed(match.groups()), _SCALE)
             if value is not None]
    if not parts:
        raise ValueError("at least one element must be present")
    result = 0.0
    for i, (value, scale) in enumerate(parts):
        if ',' in value or '.' in value:
            if i > 0:
                raise ValueError("only the smallest unit may have a fractional part")
            value = value.replace(',', '.', 1)
        result += float(value) * scale
    return result


def convert(tstr: str) -> float:
    """Convert a duration string to a number of seconds."""
    try:
        return _convert(tstr)
    except ValueError as err:
        raise ValueError(f"{tstr!r}: {err}") from None


@overload
def time_period(period: None) -> None:
    ...
@overload
def time_period(period: float|str) -> float:
    ...
def time_period(period: None|float|str) -> None|float:
    """
    Return the duration in seconds as a float.

    Numbers are taken as seconds, negative values are
    replaced by zero. Strings are converted with convert().
    """
    if period is None:
        return None
    if isinstance(period, bool):
        raise TypeError(f"Invalid type for a duration: {period!r}")
    if isinstance(period, (int, float)):
        return max(0.0, float(period))
    if isinstance(period, str):
        return convert(period)
    raise TypeError(f"Invalid type for a duration: {period!r}")


def timestr(seconds: float) -> str:
    """
    Return seconds as a short human readable string, e.g. '10m3.5s'.

    Fractional seconds are rounded to one decimal place.
    """
    if seconds < 0:
        raise ValueError("Number of seconds cannot be negative")
    seconds = round(seconds, 1)
    d, s = divmod(seconds, SEC_PER_DAY)
    h, s = divmod(s, SEC_PER_HOUR)
    m, s = divmod(s, SEC_PER_MIN)
    parts = []
    if d:
        parts.append(f"{int(d)}d")
    if d or h:
        parts.append(f"{int(h)}h")
    if d or h or m:
        parts.append(f"{int(m)}m")
    parts.append(f"{s:g}s")
    return ''.join(parts)
