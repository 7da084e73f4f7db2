from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .model import Rep, SheetData, TimeSlot


def _skill_names(reps: Sequence[Rep]) -> List[str]:
    seen: List[str] = []
    for rep in reps:
        for name in (rep.skills or {}):
            if name not in seen:
                seen.append(name)
    return seen


def _autosize(ws) -> None:
    for idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        width = max((len(str(v)) for v in column if v is not None), default=8)
        ws.column_dimensions[get_column_letter(idx)].width = min(max(width + 2, 8), 60)


def write_reps_workbook(data: SheetData, time_slots: Sequence[TimeSlot], out_path: Path) -> Path:
    """
    Two tabs: 'Reps' (one row per rep, one column per skill) and
    'Unavailable' (one row per rep/day/slot that is booked out).
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    labels = {s.id: s.label for s in time_slots}
    skills = _skill_names(data.reps)

    wb = Workbook()
    ws = wb.active
    ws.title = "Reps"
    ws.append(["Sheet", data.sheet_name])
    ws.append([])
    header = ["ID", "Name", "Region", "Sales Rank", "Availability", "Zip Codes", *skills]
    ws.append(header)
    for cell in ws[3]:
        cell.font = Font(bold=True)
    for rep in data.reps:
        ws.append([
            rep.id,
            rep.name,
            rep.region,
            rep.sales_rank,
            rep.availability,
            ", ".join(rep.zip_codes or []),
            *[(rep.skills or {}).get(s) for s in skills],
        ])
    ws.freeze_panes = "C4"
    _autosize(ws)

    un = wb.create_sheet("Unavailable")
    un.append(["Name", "Day", "Slot"])
    for cell in un[1]:
        cell.font = Font(bold=True)
    for rep in data.reps:
        for day, slot_ids in rep.unavailable_slots.items():
            for slot_id in slot_ids:
                un.append([rep.name, day, labels.get(slot_id, slot_id)])
    _autosize(un)

    wb.save(out_path)
    return out_path
