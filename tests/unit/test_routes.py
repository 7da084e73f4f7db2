import pytest

from app import create_app
from services.config_service import ConfigManager
from services.exceptions import ConfigurationError, LayoutError, SheetFetchError, TransportError
from services.schedule.model import Rep, SheetData
from services.schedule.settings import DEFAULT_TIME_SLOTS


class TestScheduleRoutes:
    """Class-based tests for the schedule API blueprint."""

    @pytest.fixture(autouse=True)
    def setup(self, app, client, settings):
        """Set up the test client and the stubbed ScheduleService."""
        self.client = client
        self.service = app.extensions["schedule_service"]
        self.service.settings = settings

    def test_reps_for_date(self):
        rep = Rep(
            id="rep-1-Sam-Lee",
            name="Sam Lee",
            availability="Mon",
            unavailable_slots={"Monday": []},
            region="PHX",
            sales_rank=3,
        )
        self.service.fetch_sheet_data.return_value = SheetData(reps=[rep], sheet_name="Availability 10/27 - 11/2")

        response = self.client.get("/api/schedule/reps?date=2025-10-29")

        assert response.status_code == 200
        body = response.get_json()
        assert body["sheetName"] == "Availability 10/27 - 11/2"
        assert body["reps"] == [{
            "id": "rep-1-Sam-Lee",
            "name": "Sam Lee",
            "availability": "Mon",
            "unavailableSlots": {"Monday": []},
            "region": "PHX",
            "salesRank": 3,
        }]
        (target,), _ = self.service.fetch_sheet_data.call_args
        assert target.isoformat() == "2025-10-29"

    def test_reps_without_date_defaults_to_today(self):
        self.service.fetch_sheet_data.return_value = SheetData(reps=[], sheet_name="Availability")
        response = self.client.get("/api/schedule/reps")
        assert response.status_code == 200
        self.service.fetch_sheet_data.assert_called_once_with(None)

    def test_reps_bad_date(self):
        response = self.client.get("/api/schedule/reps?date=10/29/2025")
        assert response.status_code == 400
        self.service.fetch_sheet_data.assert_not_called()

    @pytest.mark.parametrize("error", [
        TransportError("Service unreachable: timeout"),
        LayoutError("Could not find valid day headers"),
    ])
    def test_reps_upstream_failure(self, error):
        self.service.fetch_sheet_data.side_effect = error
        response = self.client.get("/api/schedule/reps?date=2025-10-29")
        assert response.status_code == 502
        assert response.get_json() == {"error": error.message}

    def test_cell(self):
        self.service.fetch_sheet_cell.return_value = "(empty)"
        response = self.client.get("/api/schedule/cell?cell=B7&sheet=Availability%2010/27%20-%2011/2")
        assert response.status_code == 200
        assert response.get_json() == {"cell": "B7", "sheet": "Availability 10/27 - 11/2", "value": "(empty)"}
        self.service.fetch_sheet_cell.assert_called_once_with("B7", "Availability 10/27 - 11/2")

    def test_cell_requires_both_params(self):
        assert self.client.get("/api/schedule/cell?cell=B7").status_code == 400
        assert self.client.get("/api/schedule/cell?sheet=X").status_code == 400

    def test_cell_failure(self):
        self.service.fetch_sheet_cell.side_effect = SheetFetchError("Could not retrieve data for cell B7.")
        response = self.client.get("/api/schedule/cell?cell=B7&sheet=X")
        assert response.status_code == 502
        assert response.get_json()["error"] == "Could not retrieve data for cell B7."

    def test_time_slots(self, time_slots):
        response = self.client.get("/api/schedule/time-slots")
        assert response.status_code == 200
        assert response.get_json() == [{"id": s.id, "label": s.label} for s in time_slots]

    def test_reps_not_configured(self):
        self.service.fetch_sheet_data.side_effect = ConfigurationError("No spreadsheet configured.")
        response = self.client.get("/api/schedule/reps")
        assert response.status_code == 503
        assert response.get_json() == {"error": "No spreadsheet configured."}

    def test_cell_not_configured(self):
        self.service.fetch_sheet_cell.side_effect = ConfigurationError("No spreadsheet configured.")
        response = self.client.get("/api/schedule/cell?cell=B7&sheet=X")
        assert response.status_code == 503


class TestRoutesWithoutSpreadsheet:
    """The app built from config alone, with no spreadsheet id and no Google credentials."""

    @pytest.fixture(autouse=True)
    def unconfigured(self, monkeypatch):
        for name in ("SPREADSHEET_ID", "GOOGLE_API_KEY", "SENTRY_DSN"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr("services.schedule.settings.load_dotenv", lambda *a, **k: False)
        missing = ConfigManager("no-such-config.json")
        monkeypatch.setattr("services.config_bridge._CM", missing)
        monkeypatch.setattr("app.ConfigManager", lambda: missing)

    def test_time_slots_still_served(self):
        client = create_app('Testing').test_client()
        response = client.get("/api/schedule/time-slots")
        assert response.status_code == 200
        assert response.get_json() == [{"id": s.id, "label": s.label} for s in DEFAULT_TIME_SLOTS]

    def test_reps_report_missing_configuration(self):
        client = create_app('Testing').test_client()
        response = client.get("/api/schedule/reps?date=2025-10-29")
        assert response.status_code == 503
        assert "No spreadsheet configured" in response.get_json()["error"]

    def test_development_app_serves_mock_data(self):
        client = create_app('Development').test_client()
        response = client.get("/api/schedule/reps?date=2025-10-29")
        assert response.status_code == 200
        body = response.get_json()
        assert body["sheetName"] == "Mock Data"
        assert body["reps"] and all(rep["isMock"] for rep in body["reps"])
