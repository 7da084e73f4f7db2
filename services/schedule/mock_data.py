from __future__ import annotations

from typing import List, Sequence

from .model import DayColumn, Rep, RepDraft, SheetData, TimeSlot
from .parse import slugify_name
from .sheets import availability_summary

MOCK_SHEET_NAME = "Mock Data"

_WEEK = tuple(DayColumn(name, col) for col, name in enumerate(
    ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"), start=1))

# (name, region, sales rank, skills, zip codes, {day: slot positions booked})
_MOCK_REPS = (
    ("Alex Morgan", "PHX", 1, {"Tile": 3, "Roofing": 2}, ["85004", "85006", "85008"], {"Monday": (0,), "Wednesday": (2, 3)}),
    ("Jordan Reyes", "PHX", 3, {"Tile": 1, "Roofing": 3}, ["85201", "85203"], {"Tuesday": (0, 1, 2, 3)}),
    ("Casey Nguyen", "NORTH", 2, {"Tile": 2, "Roofing": 2}, ["86001", "86004"], {"Friday": (1,)}),
    ("Riley Chen", "SOUTH", 4, {"Tile": 3}, ["85701", "85705", "85710"], {}),
)


def mock_reps(time_slots: Sequence[TimeSlot]) -> List[Rep]:
    """Synthetic reps for demos and outages; every one is flagged is_mock."""
    slot_ids = [s.id for s in time_slots]
    reps: List[Rep] = []
    for ordinal, (name, region, rank, skills, zips, booked) in enumerate(_MOCK_REPS, start=1):
        draft = RepDraft(
            name=name,
            unavailable_slots={
                day.name: {slot_ids[i] for i in booked.get(day.name, ()) if i < len(slot_ids)}
                for day in _WEEK
            },
            first_row_index=0,
        )
        reps.append(
            Rep(
                id=f"mock-{ordinal}-{slugify_name(name)}",
                name=name,
                availability=availability_summary(draft, _WEEK, len(slot_ids)),
                unavailable_slots={
                    day.name: [sid for sid in slot_ids if sid in draft.unavailable_slots[day.name]]
                    for day in _WEEK
                },
                region=region,
                skills=dict(skills),
                zip_codes=list(zips),
                sales_rank=rank,
                is_mock=True,
            )
        )
    return reps


def mock_sheet_data(time_slots: Sequence[TimeSlot]) -> SheetData:
    return SheetData(reps=mock_reps(time_slots), sheet_name=MOCK_SHEET_NAME)
