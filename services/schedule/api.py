# services/schedule/api.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import date, datetime
from typing import Dict, List, Optional

from services.exceptions import ConfigurationError, LayoutError, RemoteRefusal, SheetFetchError
from services.google_sheets_service import FetchOutcome, GoogleSheetsService, Refused, Unreachable

from .assemble import assemble_reps
from .mock_data import mock_sheet_data
from .model import RankMap, SheetData, SkillRecord
from .parse import cell_text
from .selector import find_sheet_name_for_date
from .settings import ScheduleSettings
from .sheets import parse_availability_grid, parse_rankings, parse_skills

logger = logging.getLogger(__name__)

EMPTY_CELL = "(empty)"


def _describe(outcome: FetchOutcome) -> str:
    if isinstance(outcome, Refused):
        return f"Status {outcome.status}"
    if isinstance(outcome, Unreachable):
        return f"unreachable ({outcome.cause})"
    return "ok"


def _require_json(outcome: FetchOutcome, what: str) -> dict:
    """
    JSON body of a successful outcome.
    Raises RemoteRefusal / TransportError for failed outcomes and LayoutError for a body that is not a JSON object.
    """
    if isinstance(outcome, Refused):
        raise RemoteRefusal(f"Failed to fetch {what} (Status: {outcome.status}).", outcome.status)
    response = outcome.unwrap()
    try:
        data = response.json()
    except ValueError as e:
        raise LayoutError(f"{what} response is not valid JSON.") from e
    if not isinstance(data, dict):
        raise LayoutError(f"{what} response has an unexpected shape.")
    return data


def _list_of(data: dict, key: str, item_type: type, what: str) -> list:
    """``data[key]`` as a list of ``item_type``; missing is empty, anything else is a LayoutError."""
    items = data.get(key) or []
    if not isinstance(items, list) or not all(isinstance(i, item_type) for i in items):
        raise LayoutError(f"{what} response has an unexpected '{key}' field.")
    return items


class ScheduleService:
    """
    One query against the schedule spreadsheet: which reps are free on which
    days/slots for the week containing a given date, with their skills, zip
    coverage and sales rank joined in.
    """

    def __init__(
            self,
            settings: ScheduleSettings,
            sheets: GoogleSheetsService | None = None,
            executor: Executor | None = None,
    ):
        self.settings = settings
        self._sheets = sheets
        self._sheets_lock = threading.Lock()
        self._executor = executor

    @property
    def sheets(self) -> GoogleSheetsService:
        """
        Sheets client, built on first use so a missing spreadsheet id or missing
        credentials surface as a retrieval failure (and reach the mock fallback).
        """
        s = self.settings
        if not s.spreadsheet_id:
            raise ConfigurationError("No spreadsheet configured. Set SPREADSHEET_ID or schedule.spreadsheet_id.")
        with self._sheets_lock:
            if self._sheets is None:
                try:
                    self._sheets = GoogleSheetsService(
                        api_key=s.api_key,
                        json_file=s.credentials_file,
                        retries=s.retries,
                        initial_delay=s.initial_delay,
                        timeout=s.timeout,
                    )
                except (OSError, ValueError) as e:
                    raise ConfigurationError(f"Google Sheets credentials unavailable: {e}") from e
            return self._sheets

    # --- auxiliary tables (never fail the query) ---

    def load_skills(self) -> Dict[str, SkillRecord]:
        s = self.settings
        try:
            outcome = self.sheets.values(s.spreadsheet_id, s.skills_sheet_title, s.skills_data_range)
            if not outcome.ok:
                logger.error(f"Failed to fetch skills sheet: {_describe(outcome)}")
                return {}
            return parse_skills(_require_json(outcome, "skills sheet").get("values") or [])
        except Exception as e:
            logger.error(f"Error fetching or parsing rep skills: {e}")
            return {}

    def load_rankings(self) -> RankMap:
        s = self.settings
        try:
            outcome = self.sheets.values(s.spreadsheet_id, s.skills_sheet_title, s.sales_order_data_range)
            if not outcome.ok:
                logger.warning(f"Failed to fetch sales rankings: {_describe(outcome)}")
                return {}
            return parse_rankings(_require_json(outcome, "sales rankings").get("values") or [])
        except Exception as e:
            logger.error(f"Error fetching sales rankings: {e}")
            return {}

    # --- availability ---

    def resolve_sheet_name(self, target: date | datetime) -> str:
        s = self.settings
        meta = _require_json(self.sheets.spreadsheet_metadata(s.spreadsheet_id), "spreadsheet metadata")
        sheets = _list_of(meta, "sheets", dict, "spreadsheet metadata")
        sheet_name = find_sheet_name_for_date(target, sheets, s.sheet_title_prefix)
        if not sheet_name:
            raise LayoutError(f'No sheet found in the spreadsheet with the prefix "{s.sheet_title_prefix}".')
        return sheet_name

    def fetch_grid(self, sheet_name: str) -> List[list]:
        s = self.settings
        data = _require_json(self.sheets.values(s.spreadsheet_id, sheet_name, s.data_range), "sheet data")
        return _list_of(data, "values", list, "sheet data")

    def _fallback(self, reason: str) -> Optional[SheetData]:
        if not self.settings.use_mock_data_on_failure:
            return None
        logger.warning(f"{reason} Falling back to mock data.")
        return mock_sheet_data(self.settings.time_slots)

    def fetch_sheet_data(self, target: date | datetime | None = None) -> SheetData:
        """
        Reps available in the week containing ``target`` (today by default).

        Skills and rankings load in the background while the tab is resolved and
        read; their failures only leave those fields empty. Failures reading the
        availability tab raise, unless the mock-data fallback is switched on.
        """
        target = target or date.today()
        s = self.settings
        executor = self._executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="schedule-aux")
        try:
            skills_future = executor.submit(self.load_skills)
            ranks_future = executor.submit(self.load_rankings)

            try:
                sheet_name = self.resolve_sheet_name(target)
                values = self.fetch_grid(sheet_name)
                if len(values) < 2:
                    logger.warning("Sheet has no data or only a header row.")
                    return self._fallback("Empty availability sheet.") or SheetData(reps=[], sheet_name=sheet_name)
                grid = parse_availability_grid(values, s.time_slots)
            except (SheetFetchError, LayoutError) as e:
                logger.error(f"Error fetching from Google Sheets API: {e}")
                fallback = self._fallback("Google Sheets fetch failed.")
                if fallback is None:
                    raise
                return fallback

            reps = assemble_reps(
                drafts=grid.drafts,
                days=grid.days,
                time_slots=s.time_slots,
                skills=skills_future.result(),
                ranks=ranks_future.result(),
                region_bands=s.region_bands,
            )
        finally:
            if self._executor is None:
                executor.shutdown(wait=False, cancel_futures=True)

        if not reps:
            logger.warning(
                "Successfully connected and data was found, but no valid rep data could be parsed. "
                "Check the sheet format."
            )
            return self._fallback("No reps parsed.") or SheetData(reps=[], sheet_name=sheet_name)

        logger.info(f"Loaded {len(reps)} reps from '{sheet_name}'.")
        return SheetData(reps=reps, sheet_name=sheet_name)

    def fetch_sheet_cell(self, cell: str, sheet_name: str) -> str:
        """Formatted value of one cell ('A1') on ``sheet_name``; '(empty)' for a blank cell."""
        if not sheet_name:
            raise ValueError("Sheet name must be provided to fetch a cell.")
        s = self.settings
        try:
            data = _require_json(self.sheets.values(s.spreadsheet_id, sheet_name, cell), f"cell {cell}")
        except ConfigurationError:
            raise
        except (SheetFetchError, LayoutError) as e:
            logger.error(f"Error fetching cell data for {cell} from {sheet_name}: {e}")
            raise SheetFetchError(f"Could not retrieve data for cell {cell}.") from e

        values = data.get("values") or []
        value = values[0][0] if values and values[0] else None
        if value is None or value == "":
            return EMPTY_CELL
        return cell_text(value)


def fetch_sheet_data(target: date | datetime | None = None) -> SheetData:
    return ScheduleService(ScheduleSettings.from_config()).fetch_sheet_data(target)


def fetch_sheet_cell(cell: str, sheet_name: str) -> str:
    return ScheduleService(ScheduleSettings.from_config()).fetch_sheet_cell(cell, sheet_name)
