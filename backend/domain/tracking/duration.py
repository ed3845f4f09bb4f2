"""
Tracking Domain - Durations.

Subtask estimates and task remaining times are free text typed by people
("2d 3h", "3h30m", "1:30", "2.5"). The parser turns them into canonical
hours and never raises: a duration must never block a request, so anything
unreadable degrades to a best-effort number or 0.
"""

from __future__ import annotations
import math
import re
from typing import Iterable, Optional

from domain.shared.value_objects import round_half_up


# H:M or H:M:S, the whole string
_CLOCK_RE = re.compile(r'^(\d+):(\d{1,2})(?::(\d{1,2}))?$', re.ASCII)

# First occurrence of each unit; "m" must not be the start of "ms"
_DAYS_RE = re.compile(r'([\d.]+)\s*d', re.ASCII)
_HOURS_RE = re.compile(r'([\d.]+)\s*h', re.ASCII)
_MINUTES_RE = re.compile(r'([\d.]+)\s*m(?!s)', re.ASCII)
_SECONDS_RE = re.compile(r'([\d.]+)\s*s', re.ASCII)

_UNIT_TOKENS = (
    (_DAYS_RE, 24.0),
    (_HOURS_RE, 1.0),
    (_MINUTES_RE, 1.0 / 60),
    (_SECONDS_RE, 1.0 / 3600),
)

_LEADING_NUMBER_RE = re.compile(r'^\s*([\d.]+)', re.ASCII)
_ANY_NUMBER_RE = re.compile(r'([\d.]+)', re.ASCII)


def _number(token: str) -> float:
    """Numeric value of a digits-and-dots token; NaN for things like '.' or '1.2.3'."""
    try:
        return float(token)
    except ValueError:
        return math.nan


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def parse_duration(text: Optional[str]) -> float:
    """
    Convert free-text duration into hours.

    Forms are tried in order and the first that applies wins:
    1. "H:M" or "H:M:S"
    2. unit tokens "<n>d", "<n>h", "<n>m", "<n>s", summed, case-insensitive
    3. a leading plain number, taken as hours
    4. the first number anywhere in the text
    Anything else, and any non-finite result, is 0.
    """
    if not text:
        return 0.0
    s = text.strip()
    if not s:
        return 0.0

    clock = _CLOCK_RE.match(s)
    if clock:
        hours = float(clock.group(1)) + float(clock.group(2)) / 60
        if clock.group(3) is not None:
            hours += float(clock.group(3)) / 3600
        return _finite_or_zero(hours)

    lower = s.lower()
    total = 0.0
    matched = False
    for pattern, factor in _UNIT_TOKENS:
        token = pattern.search(lower)
        if token:
            matched = True
            total += _number(token.group(1)) * factor

    if matched:
        return _finite_or_zero(total)

    leading = _LEADING_NUMBER_RE.match(lower)
    if leading:
        return _finite_or_zero(_number(leading.group(1)))

    anywhere = _ANY_NUMBER_RE.search(lower)
    if anywhere:
        return _finite_or_zero(_number(anywhere.group(1)))

    return 0.0


def format_duration(hours: float) -> str:
    """
    Render hours as "Nh Mm", dropping a zero part.

    Minutes are rounded half-up; 60 rounded minutes roll over into the hour,
    so 1h 59.6m is "2h", never "1h 60m".
    """
    if hours is None or not math.isfinite(hours) or hours <= 0:
        return "0h"

    whole_hours = math.floor(hours)
    minutes = round_half_up((hours - whole_hours) * 60)
    if minutes >= 60:
        whole_hours += 1
        minutes -= 60

    if whole_hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{whole_hours}h"
    return f"{whole_hours}h {minutes}m"


def sum_durations(texts: Iterable[Optional[str]]) -> float:
    """Total hours of several duration texts."""
    return sum((parse_duration(t) for t in texts), 0.0)
