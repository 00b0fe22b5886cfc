"""PHP-style date format strings — parse a value, format it back.

The ``date`` rule accepts format strings written the way PHP's ``date()``
spells them (``d/m/Y``, ``Y-m-d H:i``, ``jS F Y``). A value is valid when
parsing it with the format and formatting the result with the same format
gives back the exact original text.

Supported format characters::

    d j D l N S w z    day
    W o                ISO-8601 week and week-numbering year
    m n M F t          month
    y Y L              year
    H G h g i s a A    time
    U                  seconds since the epoch (UTC)

PHP format characters outside that list (time zones, microseconds, ``c``,
``r`` and the like) are rejected with ``ValueError``. A backslash makes the
next character literal. Every other character is matched literally.
"""

import calendar
import re
from collections.abc import Callable
from datetime import UTC, date, datetime

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Format character -> regex for the parsed text
_PARSE_PATTERNS: dict[str, str] = {
    "d": r"(\d{2})",
    "j": r"(\d{1,2})",
    "D": r"([A-Za-z]{3})",
    "l": r"([A-Za-z]+)",
    "N": r"([1-7])",
    "S": r"(st|nd|rd|th)",
    "w": r"([0-6])",
    "z": r"(\d{1,3})",
    "W": r"(\d{2})",
    "o": r"(\d{4})",
    "m": r"(\d{2})",
    "n": r"(\d{1,2})",
    "M": r"([A-Za-z]{3})",
    "F": r"([A-Za-z]+)",
    "t": r"(\d{2})",
    "L": r"([01])",
    "y": r"(\d{2})",
    "Y": r"(\d{4})",
    "H": r"(\d{2})",
    "G": r"(\d{1,2})",
    "h": r"(\d{2})",
    "g": r"(\d{1,2})",
    "i": r"(\d{2})",
    "s": r"(\d{2})",
    "a": r"(am|pm)",
    "A": r"(AM|PM)",
    "U": r"(-?\d+)",
}

_FORMATTERS: dict[str, Callable[[datetime], str]] = {
    "d": lambda m: f"{m.day:02d}",
    "j": lambda m: str(m.day),
    "D": lambda m: _DAY_NAMES[m.weekday()][:3],
    "l": lambda m: _DAY_NAMES[m.weekday()],
    "N": lambda m: str(m.isoweekday()),
    "S": lambda m: _ordinal_suffix(m.day),
    "w": lambda m: str(m.isoweekday() % 7),
    "z": lambda m: str(m.timetuple().tm_yday - 1),
    "W": lambda m: f"{m.isocalendar().week:02d}",
    "o": lambda m: f"{m.isocalendar().year:04d}",
    "m": lambda m: f"{m.month:02d}",
    "n": lambda m: str(m.month),
    "M": lambda m: _MONTH_NAMES[m.month - 1][:3],
    "F": lambda m: _MONTH_NAMES[m.month - 1],
    "t": lambda m: str(calendar.monthrange(m.year, m.month)[1]),
    "L": lambda m: "1" if calendar.isleap(m.year) else "0",
    "y": lambda m: f"{m.year % 100:02d}",
    "Y": lambda m: f"{m.year:04d}",
    "H": lambda m: f"{m.hour:02d}",
    "G": lambda m: str(m.hour),
    "h": lambda m: f"{(m.hour % 12) or 12:02d}",
    "g": lambda m: str((m.hour % 12) or 12),
    "i": lambda m: f"{m.minute:02d}",
    "s": lambda m: f"{m.second:02d}",
    "a": lambda m: "pm" if m.hour >= 12 else "am",
    "A": lambda m: "PM" if m.hour >= 12 else "AM",
    "U": lambda m: str(calendar.timegm(m.timetuple())),
}

# PHP date() characters with no parser here
_UNSUPPORTED = frozenset("BIOPTZcepruvxX")

# Month fields; with any of these present an ISO week is only cross-checked
_MONTH_FIELDS = frozenset("mnMF")

# A day token directly followed by a slash and a month token
_DAY_FIRST_SLASH_RE = re.compile(r"[dj]/[mnMF]")


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _tokens(fmt: str) -> list[tuple[bool, str]]:
    """Split *fmt* into ``(is_format_char, text)`` pairs.

    Raises:
        ValueError: If *fmt* uses a PHP format character that is not supported.
    """
    tokens: list[tuple[bool, str]] = []
    escaped = False
    for char in fmt:
        if escaped:
            tokens.append((False, char))
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _UNSUPPORTED:
            msg = f"Unsupported format character {char!r} in {fmt!r}"
            raise ValueError(msg)
        else:
            tokens.append((char in _PARSE_PATTERNS, char))
    return tokens


def normalize_day_first(value: str, fmt: str) -> tuple[str, str]:
    """Swap ``/`` for ``.`` in *value* and *fmt* when *fmt* is day-before-month.

    Slash-separated dates read month-first in the usual parsers; dots mark
    them as day-first.
    """
    if _DAY_FIRST_SLASH_RE.search(fmt):
        return value.replace("/", "."), fmt.replace("/", ".")
    return value, fmt


def format_date(moment: datetime, fmt: str) -> str:
    """Render *moment* with a PHP-style format string."""
    parts: list[str] = []
    for is_format_char, char in _tokens(fmt):
        parts.append(_FORMATTERS[char](moment) if is_format_char else char)
    return "".join(parts)


def parse_date(value: str, fmt: str, *, today: date | None = None) -> datetime:
    """Parse *value* with a PHP-style format string.

    Fields the format does not carry are taken from *today* (the current
    date by default); time fields default to midnight. An ISO week
    (``W``, with ``o`` and ``N`` or ``w``) picks the date when no day or
    month is given. Other derived fields (weekday names, ``S``, ``t``,
    ``L``, ``z``) are read but not used, so the round trip through
    ``format_date`` is what catches a mismatch.

    Raises:
        ValueError: If *value* does not fit the format or names an
            impossible date, or *fmt* uses an unsupported character.
    """
    tokens = _tokens(fmt)
    pattern = "".join(_PARSE_PATTERNS[char] if is_fmt else re.escape(char) for is_fmt, char in tokens)
    match = re.fullmatch(pattern, value, re.IGNORECASE)
    if match is None:
        msg = f"{value!r} does not match format {fmt!r}"
        raise ValueError(msg)

    fields: dict[str, str] = {}
    captured = iter(match.groups())
    for is_format_char, char in tokens:
        if is_format_char:
            fields[char] = next(captured)

    if "U" in fields:
        try:
            return datetime.fromtimestamp(int(fields["U"]), UTC).replace(tzinfo=None)
        except (OverflowError, OSError) as exc:
            msg = f"Timestamp {fields['U']!r} out of range"
            raise ValueError(msg) from exc

    base = today or date.today()
    year = base.year
    if "Y" in fields:
        year = int(fields["Y"])
    elif "y" in fields:
        short = int(fields["y"])
        year = 2000 + short if short < 70 else 1900 + short

    month = base.month
    if "m" in fields or "n" in fields:
        month = int(fields.get("m") or fields["n"])
    elif "M" in fields or "F" in fields:
        month = _month_from_name(fields.get("M") or fields["F"])

    day = base.day
    if "d" in fields or "j" in fields:
        day = int(fields.get("d") or fields["j"])
    elif "W" in fields and not _MONTH_FIELDS & fields.keys():
        year, month, day = _from_iso_week(fields, year)

    hour = 0
    if "H" in fields or "G" in fields:
        hour = int(fields.get("H") or fields["G"])
    elif "h" in fields or "g" in fields:
        hour = int(fields.get("h") or fields["g"])
        if not 1 <= hour <= 12:
            msg = f"Hour {hour} out of range for a 12-hour clock"
            raise ValueError(msg)
        meridiem = (fields.get("a") or fields.get("A") or "am").lower()
        hour = hour % 12 + (12 if meridiem == "pm" else 0)

    minute = int(fields.get("i", 0))
    second = int(fields.get("s", 0))
    return datetime(year, month, day, hour, minute, second)


def _month_from_name(name: str) -> int:
    lowered = name.lower()
    for index, full in enumerate(_MONTH_NAMES, start=1):
        if lowered in (full.lower(), full[:3].lower()):
            return index
    msg = f"Unknown month name: {name!r}"
    raise ValueError(msg)


def _from_iso_week(fields: dict[str, str], year: int) -> tuple[int, int, int]:
    iso_year = int(fields.get("o") or year)
    if "N" in fields:
        weekday = int(fields["N"])
    elif "w" in fields:
        weekday = int(fields["w"]) or 7
    else:
        weekday = 1
    found = date.fromisocalendar(iso_year, int(fields["W"]), weekday)
    return found.year, found.month, found.day
