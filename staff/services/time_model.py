"""
time_model.py
-------------
Conversions between "HH:MM" wall-clock strings and minutes since midnight.

Nothing here raises: malformed input degrades to a safe default
(midnight / the supplied default), so a bad form field never breaks a save.
"""

import math
import re

MINUTES_PER_DAY = 1440
MIN_OPEN_WINDOW = 60

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{1,2})$")


def parse_clock_to_minutes(value) -> int:
    """
    "9:05" (or "9:5") -> 545. Hour is clamped to 0..23 and minute to 0..59
    ("25:99" -> 1439). Anything that is not H:M / HH:MM returns 0.
    """
    if value is None:
        return 0
    match = _CLOCK_RE.match(str(value).strip())
    if not match:
        return 0
    hour = min(23, max(0, int(match.group(1))))
    minute = min(59, max(0, int(match.group(2))))
    return hour * 60 + minute


def clamp_minutes(value, default=0) -> int:
    """
    Numeric input (int, float or numeric string) truncated and clamped to 0..1440.
    Missing, non-numeric or non-finite input returns `default`.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return max(0, min(MINUTES_PER_DAY, math.trunc(number)))


def minutes_to_clock(value) -> str:
    """545 -> "09:05"; 1440 -> "24:00". Out-of-range or non-numeric input -> "00:00"."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = 0
    if not math.isfinite(number) or number < 0 or number > MINUTES_PER_DAY:
        number = 0
    minutes = math.trunc(number)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_minutes_field(raw) -> int:
    """Form field that may hold either "HH:MM" or a plain minute count."""
    if isinstance(raw, str) and ":" in raw:
        return parse_clock_to_minutes(raw)
    return clamp_minutes(raw)


def is_whole_day(start_minutes, end_minutes) -> bool:
    return start_minutes == 0 and end_minutes == MINUTES_PER_DAY


def format_interval(start_minutes, end_minutes) -> str:
    if is_whole_day(start_minutes, end_minutes):
        return "whole day"
    return f"{minutes_to_clock(start_minutes)}–{minutes_to_clock(end_minutes)}"
