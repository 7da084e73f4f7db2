from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional

from .parse import parse_date_range

logger = logging.getLogger(__name__)

# The viewed date's year first, then the neighbours, so a 12/30 - 1/5 tab is found
# from either side of New Year.
_YEAR_OFFSETS = (0, -1, 1)


def sheet_title(sheet: Mapping[str, Any]) -> str:
    """Title of a sheet descriptor, either Sheets metadata ({"properties": {"title"}}) or a plain {"title"}."""
    props = sheet.get("properties")
    if isinstance(props, Mapping) and props.get("title") is not None:
        return str(props["title"])
    return str(sheet.get("title") or "")


def _as_date(target: date | datetime) -> date:
    return target.date() if isinstance(target, datetime) else target


def calendar_day(year: int, month: int, day: int) -> date:
    """
    date(year, month, day), with an out-of-range month or day carried into the
    neighbouring month the way spreadsheet date arithmetic does: 9/31 is Oct 1,
    2/29 in a non-leap year is Mar 1, 13/1 is Jan 1 of the next year.
    """
    carry, month_index = divmod(month - 1, 12)
    return date(year + carry, month_index + 1, 1) + timedelta(days=day - 1)


def range_contains(target: date, start_month: int, start_day: int, end_month: int, end_day: int, year: int) -> bool:
    """
    True if ``target`` falls in the inclusive range starting in ``year``.
    A range whose start month is after its end month ends in the following year.
    """
    end_year = year + 1 if start_month > end_month else year
    start = calendar_day(year, start_month, start_day)
    end = calendar_day(end_year, end_month, end_day)
    return start <= target <= end


def title_matches_date(title: str, target: date | datetime) -> bool:
    rng = parse_date_range(title)
    if rng is None:
        return False
    day = _as_date(target)
    return any(range_contains(day, *rng, year=day.year + offset) for offset in _YEAR_OFFSETS)


def candidate_titles(sheets: Iterable[Mapping[str, Any]], prefix: str) -> List[str]:
    return [t for t in (sheet_title(s) for s in sheets) if t.startswith(prefix)]


def find_sheet_name_for_date(
    target: date | datetime,
    sheets: Iterable[Mapping[str, Any]],
    prefix: str,
) -> Optional[str]:
    """
    Pick the schedule tab whose 'M/D - M/D' title range covers ``target``.

    Falls back to the first tab with ``prefix`` (with a warning) when no range matches,
    and returns None when no tab has the prefix at all.
    """
    titles = candidate_titles(sheets, prefix)
    for title in titles:
        if title_matches_date(title, target):
            return title

    if titles:
        logger.warning(
            f"Could not find a sheet for the selected date ({_as_date(target).isoformat()}). "
            f"Falling back to the first sheet with the prefix: {titles[0]}"
        )
        return titles[0]
    return None
