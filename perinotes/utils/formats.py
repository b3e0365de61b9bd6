#!/usr/bin/env python3
"""
formats.py
-------------------
Moment-style naming patterns for periodic note files.

Supported tokens:
    YYYY / YY        calendar year (4 / 2 digits)
    GGGG gggg / GG gg  ISO week-year (4 / 2 digits)
    MMMM / MMM       month name (full / short)
    MM / M           month number (padded / unpadded)
    DDDD / DDD       day of year (padded / unpadded)
    DD / D           day of month (padded / unpadded)
    dddd / ddd       weekday name (full / short)
    WW ww / W w      ISO week number (padded / unpadded)
    Q                quarter 1-4
    [text]           literal text

Everything else is copied verbatim. Patterns may contain folders
('YYYY/gggg-[W]ww'); only the part after the last '/' names the file.

Functions:
    format_date: Render a date with a pattern
    parse_date: Extract a date from a name (None when unparseable or ambiguous)
    parse_date_strict: Same, raising PeriodParseError
    filename_pattern: The file part of a pattern
    format_as_filename: Render only the file part

Usage:
    >>> format_date(date(2024, 12, 30), "gggg-[W]ww")
    '2025-W01'
    >>> parse_date("2024-Q2", "YYYY-[Q]Q")
    datetime.date(2024, 4, 1)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

# --- Local imports ---
from perinotes.core.exceptions import PeriodParseError

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|YYYY|YY|GGGG|gggg|GG|gg|MMMM|MMM|MM|M|DDDD|DDD|DD|D|dddd|ddd|WW|ww|W|w|Q"
)

# token -> (field, regex)
_PARSERS: Dict[str, Tuple[str, str]] = {
    "YYYY": ("year", r"\d{4}"),
    "YY": ("year2", r"\d{2}"),
    "GGGG": ("week_year", r"\d{4}"),
    "gggg": ("week_year", r"\d{4}"),
    "GG": ("week_year2", r"\d{2}"),
    "gg": ("week_year2", r"\d{2}"),
    "MMMM": ("month_name", "|".join(MONTH_NAMES)),
    "MMM": ("month_abbr", "|".join(m[:3] for m in MONTH_NAMES)),
    "MM": ("month", r"\d{2}"),
    "M": ("month", r"\d{1,2}"),
    "DDDD": ("day_of_year", r"\d{3}"),
    "DDD": ("day_of_year", r"\d{1,3}"),
    "DD": ("day", r"\d{2}"),
    "D": ("day", r"\d{1,2}"),
    "dddd": ("weekday_name", "|".join(DAY_NAMES)),
    "ddd": ("weekday_abbr", "|".join(d[:3] for d in DAY_NAMES)),
    "WW": ("week", r"\d{2}"),
    "ww": ("week", r"\d{2}"),
    "W": ("week", r"\d{1,2}"),
    "w": ("week", r"\d{1,2}"),
    "Q": ("quarter", r"[1-4]"),
}


def tokenize(pattern: str) -> List[Tuple[bool, str]]:
    """
    Split a pattern into (is_token, text) pieces.

    Literal brackets are unwrapped into plain text pieces.
    """
    pieces: List[Tuple[bool, str]] = []
    position = 0
    for match in _TOKEN_RE.finditer(pattern):
        if match.start() > position:
            pieces.append((False, pattern[position : match.start()]))
        token = match.group(0)
        if token.startswith("["):
            pieces.append((False, token[1:-1]))
        else:
            pieces.append((True, token))
        position = match.end()
    if position < len(pattern):
        pieces.append((False, pattern[position:]))
    return pieces


def _render_token(token: str, value: date) -> str:
    week_year, week, _ = value.isocalendar()
    day_of_year = value.timetuple().tm_yday
    renderers = {
        "YYYY": lambda: f"{value.year:04d}",
        "YY": lambda: f"{value.year % 100:02d}",
        "GGGG": lambda: f"{week_year:04d}",
        "gggg": lambda: f"{week_year:04d}",
        "GG": lambda: f"{week_year % 100:02d}",
        "gg": lambda: f"{week_year % 100:02d}",
        "MMMM": lambda: MONTH_NAMES[value.month - 1],
        "MMM": lambda: MONTH_NAMES[value.month - 1][:3],
        "MM": lambda: f"{value.month:02d}",
        "M": lambda: str(value.month),
        "DDDD": lambda: f"{day_of_year:03d}",
        "DDD": lambda: str(day_of_year),
        "DD": lambda: f"{value.day:02d}",
        "D": lambda: str(value.day),
        "dddd": lambda: DAY_NAMES[value.weekday()],
        "ddd": lambda: DAY_NAMES[value.weekday()][:3],
        "WW": lambda: f"{week:02d}",
        "ww": lambda: f"{week:02d}",
        "W": lambda: str(week),
        "w": lambda: str(week),
        "Q": lambda: str((value.month - 1) // 3 + 1),
    }
    return renderers[token]()


def format_date(value: date, pattern: str) -> str:
    """
    Render a date with a naming pattern.

    Args:
        value: Date to render
        pattern: Moment-style pattern, possibly containing folders

    Returns:
        Rendered name (folders included)
    """
    return "".join(
        _render_token(text, value) if is_token else text
        for is_token, text in tokenize(pattern)
    )


def filename_pattern(pattern: str) -> str:
    """
    The part of a pattern after its last '/'.

    Examples:
        >>> filename_pattern("YYYY/WW/YYYY-MM-DD")
        'YYYY-MM-DD'
        >>> filename_pattern("gggg-[W]ww")
        'gggg-[W]ww'
    """
    tail = pattern.rsplit("/", 1)[-1]
    return tail or pattern


def format_as_filename(value: date, pattern: str) -> str:
    """Render only the file part of a pattern (no folders)."""
    return format_date(value, filename_pattern(pattern))


def _compile(pattern: str) -> Tuple["re.Pattern[str]", List[Tuple[str, str]]]:
    parts: List[str] = []
    groups: List[Tuple[str, str]] = []
    for is_token, text in tokenize(pattern):
        if not is_token:
            parts.append(re.escape(text))
            continue
        field, regex = _PARSERS[text]
        group = f"g{len(groups)}"
        groups.append((group, field))
        parts.append(f"(?P<{group}>(?i:{regex}))")
    return re.compile("".join(parts)), groups


def _collect_fields(
    match: "re.Match[str]", groups: List[Tuple[str, str]]
) -> Optional[Dict[str, int]]:
    """Gather numeric field values; conflicting repeats yield None."""
    fields: Dict[str, int] = {}
    for group, field in groups:
        raw = match.group(group)
        if field in ("month_name", "month_abbr"):
            names = [m.lower()[: len(raw)] for m in MONTH_NAMES]
            field, number = "month", names.index(raw.lower()) + 1
        elif field in ("weekday_name", "weekday_abbr"):
            names = [d.lower()[: len(raw)] for d in DAY_NAMES]
            field, number = "weekday", names.index(raw.lower())
        elif field == "year2":
            field, number = "year", 2000 + int(raw)
        elif field == "week_year2":
            field, number = "week_year", 2000 + int(raw)
        else:
            number = int(raw)

        if fields.get(field, number) != number:
            return None
        fields[field] = number
    return fields


def _resolve(fields: Dict[str, int]) -> Optional[date]:
    year = fields.get("year")
    week = fields.get("week")

    if year is not None and "month" in fields and "day" in fields:
        result = date(year, fields["month"], fields["day"])
    elif year is not None and "day_of_year" in fields:
        day_of_year = fields["day_of_year"]
        if not 1 <= day_of_year <= 366:
            return None
        result = date(year, 1, 1) + timedelta(days=day_of_year - 1)
        if result.year != year:
            return None
    elif week is not None and (fields.get("week_year") or year) is not None:
        week_year = fields.get("week_year") or year
        result = date.fromisocalendar(week_year, week, fields.get("weekday", 0) + 1)
    elif year is not None and "month" in fields:
        result = date(year, fields["month"], 1)
    elif year is not None and "quarter" in fields:
        result = date(year, 3 * fields["quarter"] - 2, 1)
    elif year is not None:
        result = date(year, 1, 1)
    else:
        return None

    if "weekday" in fields and result.weekday() != fields["weekday"]:
        return None
    if "quarter" in fields and (result.month - 1) // 3 + 1 != fields["quarter"]:
        return None
    return result


def parse_date(text: str, pattern: str) -> Optional[date]:
    """
    Extract a date from a name using a naming pattern.

    The whole name must match. Returns None when the name does not match,
    names an impossible date, or carries conflicting fields (for example
    a weekday that disagrees with the day of month).

    Args:
        text: Name to parse (usually a file basename)
        pattern: Pattern the name was produced with

    Returns:
        Parsed date or None
    """
    regex, groups = _compile(pattern)
    match = regex.fullmatch(text)
    if match is None:
        return None

    fields = _collect_fields(match, groups)
    if fields is None:
        return None
    try:
        return _resolve(fields)
    except ValueError:
        return None


def parse_date_strict(text: str, pattern: str) -> date:
    """
    Like parse_date, raising instead of returning None.

    Raises:
        PeriodParseError: If no date can be extracted
    """
    result = parse_date(text, pattern)
    if result is None:
        raise PeriodParseError(f"Cannot parse '{text}' with pattern '{pattern}'")
    return result
