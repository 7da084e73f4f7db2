from __future__ import annotations

import argparse
import json
import logging
from datetime import date, datetime
from pathlib import Path

from services.config_bridge import where_cfg
from services.config_service import ConfigManager
from services.exceptions import LayoutError, SheetFetchError

from .api import ScheduleService
from .excel_out import write_reps_workbook
from .settings import ScheduleSettings


def _parse_date(s: str) -> date:
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got {s!r}")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Rep availability from the schedule spreadsheet")
    ap.add_argument("--date", type=_parse_date, default=None, help="Target date (YYYY-MM-DD), default today")
    ap.add_argument("--config", default=None, help="Path to config.json")
    ap.add_argument("--json", dest="json_out", default=None, help="Write reps as JSON to this file")
    ap.add_argument("--xlsx", dest="xlsx_out", default=None, help="Write reps as an Excel workbook to this file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    manager = ConfigManager(args.config) if args.config else None
    if manager is None:
        logging.debug(where_cfg())

    settings = ScheduleSettings.from_config(manager)
    try:
        data = ScheduleService(settings).fetch_sheet_data(args.date)
    except (SheetFetchError, LayoutError) as e:
        logging.error(e.message)
        return 1

    print(f"Sheet: {data.sheet_name}  ({len(data.reps)} reps)")
    for rep in data.reps:
        rank = f"#{rep.sales_rank}" if rep.sales_rank is not None else "-"
        print(f"  {rep.name:<28} {rep.region:<8} {rank:>4}  {rep.availability}")

    if args.json_out:
        Path(args.json_out).write_text(json.dumps(data.to_dict(), indent=2), encoding="utf-8")
    if args.xlsx_out:
        write_reps_workbook(data, settings.time_slots, Path(args.xlsx_out))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
