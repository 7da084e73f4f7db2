import threading
from dataclasses import replace
from unittest.mock import MagicMock
from urllib.parse import unquote

import pytest

from app import create_app
from services.google_sheets_service import GoogleSheetsService
from services.schedule.api import ScheduleService
from services.schedule.model import TimeSlot
from services.schedule.settings import ScheduleSettings

SPREADSHEET_ID = "sheet-123"


def make_response(status=200, payload=None):
    """Minimal stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload if payload is not None else {}
    return response


class FakeSheetsSession:
    """
    requests-style session for the Sheets REST API.

    `metadata` answers the spreadsheet metadata call; `values` maps the decoded
    A1 range ("'Tab'!A1:H160") to a response, an exception, or a list of those
    consumed one call at a time (the last one repeats).
    """

    def __init__(self, metadata=None, values=None):
        self.metadata = metadata
        self.values = dict(values or {})
        self.calls = []
        self._lock = threading.Lock()

    def _next(self, result):
        if isinstance(result, list):
            with self._lock:
                result = result.pop(0) if len(result) > 1 else result[0]
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, params=None, timeout=None):
        with self._lock:
            self.calls.append((unquote(url), dict(params or {})))
        if "/values/" not in url:
            if self.metadata is None:
                return make_response(404, {"error": {"code": 404}})
            return self._next(self.metadata)
        a1 = unquote(url.split("/values/", 1)[1])
        if a1 not in self.values:
            return make_response(400, {"error": {"code": 400, "message": f"Unable to parse range: {a1}"}})
        return self._next(self.values[a1])


def add_rep_block(values, name, slot_labels, marks_by_slot=None, day_count=2, inline_first=False):
    """
    Append a name row followed by one row per slot label.
    With `inline_first` the first slot row carries the name ("Name: label").
    """
    marks_by_slot = marks_by_slot or {}
    if not inline_first:
        values.append([name])
    for i, label in enumerate(slot_labels):
        first = f"{name}: {label}" if inline_first and i == 0 else label
        marks = list(marks_by_slot.get(label, [""] * day_count))
        values.append([first, *marks])
    return values


@pytest.fixture
def time_slots():
    return (
        TimeSlot("ts-1", "8am - 10am"),
        TimeSlot("ts-2", "10am - 12pm"),
        TimeSlot("ts-3", "1pm - 4pm"),
        TimeSlot("ts-4", "4pm - 7pm"),
    )


@pytest.fixture
def settings(time_slots):
    return ScheduleSettings(
        spreadsheet_id=SPREADSHEET_ID,
        api_key="test-key",
        sheet_title_prefix="Availability",
        data_range="A1:H160",
        skills_sheet_title="Appointment Blocks",
        skills_data_range="A1:Z40",
        sales_order_data_range="B44:B80",
        time_slots=time_slots,
    )


@pytest.fixture
def sleeps():
    """Delays requested by the retry loop, in order."""
    return []


@pytest.fixture
def make_service(settings, sleeps):
    def _make(session, **overrides):
        cfg = replace(settings, **overrides) if overrides else settings
        sheets = GoogleSheetsService(
            api_key=cfg.api_key,
            session=session,
            retries=cfg.retries,
            initial_delay=cfg.initial_delay,
            sleep=sleeps.append,
        )
        return ScheduleService(cfg, sheets=sheets)
    return _make


@pytest.fixture
def app():
    app = create_app('Testing', schedule_service=MagicMock(spec=ScheduleService))
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
