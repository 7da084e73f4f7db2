from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

from .model import DayColumn, RankMap, Rep, RepDraft, SkillRecord, TimeSlot
from .parse import normalize_name, slugify_name
from .sheets import availability_summary

UNKNOWN_REGION = "UNKNOWN"

# Inclusive sheet-row bands of the availability tab. These follow the physical
# layout of the current tab and have to be re-derived if the tab is restructured.
DEFAULT_REGION_BANDS: Dict[str, Tuple[int, int]] = {
    "PHX": (2, 118),
    "NORTH": (119, 135),
    "SOUTH": (136, 152),
}


def classify_region(first_row_index: int, bands: Mapping[str, Tuple[int, int]] = DEFAULT_REGION_BANDS) -> str:
    for region, (lo, hi) in bands.items():
        if lo <= first_row_index <= hi:
            return region
    return UNKNOWN_REGION


def _ordered_slots(slot_ids: set, time_slots: Sequence[TimeSlot]) -> List[str]:
    return [s.id for s in time_slots if s.id in slot_ids]


def assemble_reps(
    *,
    drafts: Sequence[RepDraft],
    days: Sequence[DayColumn],
    time_slots: Sequence[TimeSlot],
    skills: Mapping[str, SkillRecord],
    ranks: RankMap,
    region_bands: Mapping[str, Tuple[int, int]] = DEFAULT_REGION_BANDS,
) -> List[Rep]:
    """Finalize drafts in discovery order and join skills/zips/rank by normalized name."""
    reps: List[Rep] = []
    for ordinal, draft in enumerate(drafts, start=1):
        key = normalize_name(draft.name)
        info = skills.get(key)
        reps.append(
            Rep(
                id=f"rep-{ordinal}-{slugify_name(draft.name)}",
                name=draft.name,
                availability=availability_summary(draft, days, len(time_slots)),
                unavailable_slots={
                    d.name: _ordered_slots(draft.unavailable_slots.get(d.name, set()), time_slots)
                    for d in days
                },
                region=classify_region(draft.first_row_index, region_bands),
                skills=dict(info.skills) if info else None,
                zip_codes=list(info.zip_codes) if info else None,
                sales_rank=ranks.get(key),
            )
        )
    return reps
