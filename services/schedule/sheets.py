from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Pattern, Sequence, Tuple

from services.exceptions import LayoutError

from .model import AvailabilityGrid, DayColumn, RankMap, RepDraft, SkillRecord, TimeSlot
from .parse import (
    cell_text,
    is_section_divider,
    is_unavailable_mark,
    match_weekday,
    normalize_name,
    parse_leading_int,
    split_zip_codes,
    strip_trailing_colon,
    time_slot_pattern,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"
SALES_ORDER_HEADER = "sales order"


def _cell(row: Sequence[Any], idx: int) -> Any:
    return row[idx] if row is not None and idx < len(row) else None


# -----------------------------------------------------------
# Availability grid
# -----------------------------------------------------------

def parse_day_columns(header_row: Sequence[Any]) -> List[DayColumn]:
    """Columns after A whose header starts with a weekday ('Monday 10/27')."""
    days: List[DayColumn] = []
    for idx, cell in enumerate(header_row or []):
        if idx == 0:
            continue
        text = cell_text(cell)
        if not text:
            continue
        name = match_weekday(text)
        if name:
            days.append(DayColumn(name=name, col_index=idx))
    if not days:
        raise LayoutError("Could not find valid day headers in the header row (e.g., 'Monday 10/27').")
    return days


def _match_time_slot(text: str, patterns: List[Tuple[Pattern[str], str]]) -> Optional[Tuple[str, str]]:
    """Return (slot_id, text before the label) for the first slot label ending ``text``."""
    for pattern, slot_id in patterns:
        m = pattern.search(text)
        if m:
            return slot_id, text[:m.start()]
    return None


def parse_availability_grid(values: Sequence[Sequence[Any]], time_slots: Sequence[TimeSlot]) -> AvailabilityGrid:
    """
    Turn the availability tab into one RepDraft per person.

    Column A carries either a name ('Jane Doe'), a slot label ('10am - 1pm'),
    both ('Jane Doe: 10am - 1pm'), a blank, or an ALL-CAPS section title. A slot
    row without a name belongs to the last name seen in the same block; blanks
    and section titles end the block.
    """
    if not values:
        raise LayoutError("Availability sheet is empty.")
    days = parse_day_columns(values[0])
    patterns = [(time_slot_pattern(s.label), s.id) for s in time_slots]

    drafts: Dict[str, RepDraft] = {}
    current_rep: Optional[str] = None

    for row_index, row in enumerate(values[1:]):
        first_col = cell_text(_cell(row, 0)).strip()
        if not first_col:
            current_rep = None
            continue

        if is_section_divider(first_col):
            current_rep = None
            continue

        hit = _match_time_slot(first_col, patterns)
        if hit is None:
            # A bare name announcing the rows below it
            current_rep = strip_trailing_colon(first_col)
            continue

        slot_id, prefix = hit
        rep_name = strip_trailing_colon(prefix) or current_rep
        if not rep_name:
            # Stray slot label with nobody above it
            continue

        current_rep = rep_name
        draft = drafts.get(rep_name)
        if draft is None:
            draft = RepDraft(
                name=rep_name,
                unavailable_slots={d.name: set() for d in days},
                first_row_index=row_index + 2,  # 1-based, header sliced off
            )
            drafts[rep_name] = draft

        for day in days:
            if is_unavailable_mark(_cell(row, day.col_index)):
                draft.unavailable_slots[day.name].add(slot_id)

    return AvailabilityGrid(days=days, drafts=list(drafts.values()))


def availability_summary(draft: RepDraft, days: Sequence[DayColumn], slot_count: int) -> str:
    """'Mon, Wed' for days with at least one open slot, else 'Not available'."""
    open_days = [
        d.name[:3]
        for d in days
        if len(draft.unavailable_slots.get(d.name, ())) < slot_count
    ]
    return ", ".join(open_days) or NOT_AVAILABLE


# -----------------------------------------------------------
# Skills and sales order
# -----------------------------------------------------------

def parse_skills(values: Sequence[Sequence[Any]]) -> Dict[str, SkillRecord]:
    """
    Skills table: name in column A, one integer score per skill column, then a
    'Zip Codes' column. Everything between the name and the zip column is a skill.
    """
    out: Dict[str, SkillRecord] = {}
    if not values or len(values) < 2:
        logger.warning("Skills sheet is empty or has only a header.")
        return out

    headers = [cell_text(h).strip() for h in values[0]]
    zip_idx = next((i for i, h in enumerate(headers) if i > 0 and "zip" in h.lower()), None)
    skill_headers = headers[1:zip_idx] if zip_idx is not None else headers[1:]

    for row in values[1:]:
        rep_name = cell_text(_cell(row, 0))
        if not rep_name.strip():
            continue

        skills: Dict[str, int] = {}
        for offset, skill_name in enumerate(skill_headers, start=1):
            score = parse_leading_int(_cell(row, offset))
            if score is not None:
                skills[skill_name] = score

        zip_codes = split_zip_codes(_cell(row, zip_idx)) if zip_idx is not None else []
        out[normalize_name(rep_name)] = SkillRecord(skills=skills, zip_codes=zip_codes)
    return out


def parse_rankings(values: Sequence[Sequence[Any]]) -> RankMap:
    """
    Sales order list, best first. Rank is the position in the range (row 1 -> rank 1),
    so a stray header still uses up its row.
    """
    ranks: RankMap = {}
    for index, row in enumerate(values or []):
        name = cell_text(_cell(row, 0))
        if not name:
            continue
        if SALES_ORDER_HEADER in name.lower():
            continue
        key = normalize_name(name)
        if key not in ranks:
            ranks[key] = index + 1
    return ranks
