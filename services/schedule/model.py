from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

REGIONS = ("PHX", "NORTH", "SOUTH", "UNKNOWN")

RankMap = Dict[str, int]                # normalized name -> 1-based sales rank


@dataclass(frozen=True)
class TimeSlot:
    id: str
    label: str                          # As written in column A of the grid, e.g. "10am - 1pm"


@dataclass(frozen=True)
class DayColumn:
    name: str                           # Full weekday, as matched in the header ("Monday")
    col_index: int                      # 0-based column in the grid


@dataclass
class RepDraft:
    name: str
    unavailable_slots: Dict[str, Set[str]]      # day name -> slot ids
    first_row_index: int                        # 1-based sheet row where the rep's block starts


@dataclass(frozen=True)
class SkillRecord:
    skills: Dict[str, int]
    zip_codes: List[str]


@dataclass(frozen=True)
class Rep:
    id: str
    name: str
    availability: str
    unavailable_slots: Dict[str, List[str]]
    region: str = "UNKNOWN"
    skills: Optional[Dict[str, int]] = None
    zip_codes: Optional[List[str]] = None
    sales_rank: Optional[int] = None
    is_mock: bool = False

    def to_dict(self) -> dict:
        """JSON shape used by the dispatch front end (camelCase, optional keys omitted)."""
        out = {
            "id": self.id,
            "name": self.name,
            "availability": self.availability,
            "unavailableSlots": {day: list(slots) for day, slots in self.unavailable_slots.items()},
            "region": self.region,
        }
        if self.skills is not None:
            out["skills"] = dict(self.skills)
        if self.zip_codes is not None:
            out["zipCodes"] = list(self.zip_codes)
        if self.sales_rank is not None:
            out["salesRank"] = self.sales_rank
        if self.is_mock:
            out["isMock"] = True
        return out


@dataclass
class AvailabilityGrid:
    days: List[DayColumn]
    drafts: List[RepDraft] = field(default_factory=list)


@dataclass
class SheetData:
    reps: List[Rep]
    sheet_name: str

    def to_dict(self) -> dict:
        return {"sheetName": self.sheet_name, "reps": [r.to_dict() for r in self.reps]}
