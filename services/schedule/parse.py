from __future__ import annotations

import re
from typing import Any, List, Optional, Pattern, Tuple

_DATE_RANGE_RE = re.compile(
    r"""
    (?P<sm>\d{1,2})/(?P<sd>\d{1,2})     # start month/day
    \s*-\s*
    (?P<em>\d{1,2})/(?P<ed>\d{1,2})     # end month/day
    """,
    re.VERBOSE,
)

_WEEKDAY_RE = re.compile(r"^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)", re.IGNORECASE)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

_ZIP_SPLIT_RE = re.compile(r"[,;\s]+")

CHECKMARK = "✅"


def cell_text(value: Any) -> str:
    """String form of a grid cell; None becomes ''. Booleans keep the sheet spelling (TRUE/FALSE)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def normalize_name(name: str) -> str:
    """
    Join key for people across sheets: 'O\'Brien, Jr. ' -> 'obrienjr'.
    """
    s = str(name or "").strip().lower().replace('"', "")
    return re.sub(r"[^a-z0-9]", "", s)


def slugify_name(name: str) -> str:
    return re.sub(r"\s+", "-", name)


def parse_date_range(title: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Find the first 'M/D - M/D' token in a sheet title.
    Returns (start_month, start_day, end_month, end_day) or None.
    """
    m = _DATE_RANGE_RE.search(title or "")
    if not m:
        return None
    return int(m.group("sm")), int(m.group("sd")), int(m.group("em")), int(m.group("ed"))


def match_weekday(text: str) -> Optional[str]:
    m = _WEEKDAY_RE.match(text.strip())
    return m.group(0) if m else None


def is_section_divider(text: str) -> bool:
    """ALL-CAPS labels such as 'NORTH TEAM' split the grid into sections."""
    return text.upper() == text and len(re.sub(r"[^A-Z\s]", "", text)) > 1


def time_slot_pattern(label: str) -> Pattern[str]:
    """
    Regex matching a slot label at the end of a column-A cell.
    The dash may be typed with or without surrounding spaces ('10am-1pm', '10am - 1pm').
    """
    parts = [re.escape(p.strip()) for p in label.strip().lower().split("-")]
    return re.compile(r"\s?-\s?".join(parts) + "$", re.IGNORECASE)


def strip_trailing_colon(text: str) -> str:
    return re.sub(r":$", "", text.strip()).strip()


def is_unavailable_mark(value: Any) -> bool:
    """
    Availability cells default to AVAILABLE.
    Empty, TRUE (bool or text) and a checkmark are available; FALSE and any other text are not.
    """
    if value is False:
        return True
    s = cell_text(value).strip()
    if s.upper() == "FALSE":
        return True
    return s != "" and s.upper() != "TRUE" and s != CHECKMARK


def parse_leading_int(value: Any) -> Optional[int]:
    """'4' -> 4, '3.5' -> 3, ' 2 stars' -> 2, 'n/a' -> None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    m = _LEADING_INT_RE.match(str(value))
    return int(m.group(1)) if m else None


def split_zip_codes(cell: Any) -> List[str]:
    text = cell_text(cell)
    if not text:
        return []
    return [z.strip() for z in _ZIP_SPLIT_RE.split(text) if z.strip()]
