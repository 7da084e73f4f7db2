from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from dotenv import load_dotenv

from services.config_bridge import get_cfg
from services.config_service import ConfigManager

from .assemble import DEFAULT_REGION_BANDS
from .model import TimeSlot

DEFAULT_TIME_SLOTS: Tuple[TimeSlot, ...] = (
    TimeSlot("ts-1", "7:30am - 10am"),
    TimeSlot("ts-2", "10am - 1pm"),
    TimeSlot("ts-3", "1pm - 4pm"),
    TimeSlot("ts-4", "4pm - 7pm"),
)


@dataclass(frozen=True)
class ScheduleSettings:
    spreadsheet_id: str
    api_key: str | None = None
    credentials_file: str | None = None
    sheet_title_prefix: str = "Appointment Availability"
    data_range: str = "A1:H160"
    skills_sheet_title: str = "Appointment Blocks"
    skills_data_range: str = "A1:Z40"
    sales_order_data_range: str = "B44:B80"
    use_mock_data_on_failure: bool = False
    time_slots: Tuple[TimeSlot, ...] = DEFAULT_TIME_SLOTS
    region_bands: Mapping[str, Tuple[int, int]] = field(default_factory=lambda: dict(DEFAULT_REGION_BANDS))
    retries: int = 3
    initial_delay: float = 1.0
    timeout: float = 30

    @classmethod
    def from_config(cls, manager: ConfigManager | None = None) -> "ScheduleSettings":
        """
        Build settings from the 'schedule' section of config.json.
        SPREADSHEET_ID, GOOGLE_API_KEY and GSHEETS_CREDENTIALS come from the environment (.env).
        A missing spreadsheet id is left empty; ScheduleService reports it when it first needs the sheet.
        """
        load_dotenv()
        section = get_cfg(manager=manager, default={}) or {}

        spreadsheet_id = os.getenv("SPREADSHEET_ID") or section.get("spreadsheet_id") or ""

        slots = section.get("time_slots")
        time_slots = tuple(TimeSlot(str(s["id"]), str(s["label"])) for s in slots) if slots else DEFAULT_TIME_SLOTS

        bands = section.get("region_bands")
        region_bands: Dict[str, Tuple[int, int]] = (
            {region: (int(lo), int(hi)) for region, (lo, hi) in bands.items()}
            if bands else dict(DEFAULT_REGION_BANDS)
        )

        defaults = cls(spreadsheet_id=spreadsheet_id)
        return cls(
            spreadsheet_id=spreadsheet_id,
            api_key=os.getenv("GOOGLE_API_KEY") or section.get("api_key") or None,
            credentials_file=os.getenv("GSHEETS_CREDENTIALS") or section.get("credentials_file") or None,
            sheet_title_prefix=section.get("sheet_title_prefix", defaults.sheet_title_prefix),
            data_range=section.get("data_range", defaults.data_range),
            skills_sheet_title=section.get("skills_sheet_title", defaults.skills_sheet_title),
            skills_data_range=section.get("skills_data_range", defaults.skills_data_range),
            sales_order_data_range=section.get("sales_order_data_range", defaults.sales_order_data_range),
            use_mock_data_on_failure=bool(section.get("use_mock_data_on_failure", False)),
            time_slots=time_slots,
            region_bands=region_bands,
            retries=int(section.get("retries", defaults.retries)),
            initial_delay=float(section.get("initial_delay", defaults.initial_delay)),
            timeout=float(section.get("timeout", defaults.timeout)),
        )
