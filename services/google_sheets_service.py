from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union
from urllib.parse import quote

import requests
from google.auth.exceptions import TransportError as GoogleTransportError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2.service_account import Credentials

from services.exceptions import RemoteRefusal, TransportError

logger = logging.getLogger(__name__)

SHEETS_API_ROOT = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"


@dataclass(frozen=True)
class Fetched:
    """The service answered with a 2xx response."""
    response: requests.Response

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> requests.Response:
        return self.response


@dataclass(frozen=True)
class Refused:
    """The service answered, but with a client error or with a server error that outlived the retries."""
    status: int
    response: requests.Response

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> requests.Response:
        raise RemoteRefusal(f"Request refused (Status: {self.status})", self.status)


@dataclass(frozen=True)
class Unreachable:
    """The request never got an answer (connection error, timeout) after the retries."""
    cause: Exception

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> requests.Response:
        raise TransportError(f"Service unreachable: {self.cause}") from self.cause


FetchOutcome = Union[Fetched, Refused, Unreachable]


def _is_retryable(status: int) -> bool:
    return status >= 500 or status == 429


def fetch_with_retry(
        session,
        url: str,
        *,
        params: dict | None = None,
        retries: int = 3,
        initial_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        timeout: float = 30,
) -> FetchOutcome:
    """
    GET ``url`` with exponential backoff for server errors (5xx) and rate limits (429).

    Client errors other than 429 come back straight away as ``Refused``. A
    retryable status that survives every retry also comes back as ``Refused``
    (the last response is kept), while a transport failure that survives every
    retry comes back as ``Unreachable``.

    :param session: Anything with a ``requests``-style ``get`` (Session, AuthorizedSession).
    :param retries: Extra attempts after the first one.
    :param initial_delay: Seconds to wait before the first retry; doubled after each retry.
    :param sleep: Blocking sleep used between attempts (injected in tests).
    :rtype: Fetched | Refused | Unreachable
    """
    delay = initial_delay
    for attempt in range(retries + 1):
        try:
            response = session.get(url, params=params, timeout=timeout)
        except (requests.RequestException, GoogleTransportError) as e:
            if attempt < retries:
                logger.warning(
                    f"Sheets API network attempt {attempt + 1} failed ({e}). Retrying in {delay:g}s..."
                )
                sleep(delay)
                delay *= 2
                continue
            logger.error(f"Sheets API unreachable after {retries + 1} attempts: {e}")
            return Unreachable(e)

        status = response.status_code
        if 200 <= status < 300:
            return Fetched(response)
        if not _is_retryable(status):
            return Refused(status, response)

        if attempt < retries:
            logger.warning(
                f"Sheets API attempt {attempt + 1} failed (Status {status}). Retrying in {delay:g}s..."
            )
            sleep(delay)
            delay *= 2
            continue
        return Refused(status, response)

    raise RuntimeError("Fetch failed unexpectedly.")


class GoogleSheetsService:
    """
    Read-only access to the Sheets v4 REST API.
    Uses an API key when one is given (the spreadsheet must be shared as "anyone with the link"),
    otherwise a service account JSON found the same way the rest of the app finds it.
    """

    @staticmethod
    def _get_service_account_path():
        env = os.environ.get("GSHEETS_CREDENTIALS") or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        if env and os.path.isfile(env):
            return env

        candidates = [
            Path(__file__).resolve().parents[1] / "credentials" / "service_account.json",
            Path.cwd() / "credentials" / "service_account.json",
            Path.cwd() / "service_account.json",
        ]
        for p in candidates:
            if p.is_file():
                return str(p)

        raise FileNotFoundError(
            "No GOOGLE_API_KEY set and service_account.json not found. "
            "Set GOOGLE_API_KEY, GSHEETS_CREDENTIALS or GOOGLE_APPLICATION_CREDENTIALS.")

    @staticmethod
    def _authenticate_google_sheets(json_file: str) -> Credentials:
        """
        Build read-only service account credentials.

        :param json_file: JSON file containing service account credentials.
        :rtype: google.oauth2.service_account.Credentials
        """
        with open(json_file) as f:
            creds = json.load(f)
        return Credentials.from_service_account_info(creds, scopes=[SHEETS_READONLY_SCOPE])

    def __init__(
            self,
            api_key: str | None = None,
            json_file: str | None = None,
            session=None,
            *,
            retries: int = 3,
            initial_delay: float = 1.0,
            timeout: float = 30,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self._api_key = api_key
        if session is None:
            if api_key:
                session = requests.Session()
            else:
                creds = self._authenticate_google_sheets(json_file or self._get_service_account_path())
                session = AuthorizedSession(creds)
        self._session = session
        self._retries = retries
        self._initial_delay = initial_delay
        self._timeout = timeout
        self._sleep = sleep

    def _get(self, url: str, params: dict | None = None) -> FetchOutcome:
        query = dict(params or {})
        if self._api_key:
            query["key"] = self._api_key
        return fetch_with_retry(
            self._session,
            url,
            params=query,
            retries=self._retries,
            initial_delay=self._initial_delay,
            sleep=self._sleep,
            timeout=self._timeout,
        )

    def spreadsheet_metadata(self, spreadsheet_id: str) -> FetchOutcome:
        """Spreadsheet properties, including ``{"sheets": [{"properties": {"title": ...}}]}``."""
        return self._get(f"{SHEETS_API_ROOT}/{quote(spreadsheet_id, safe='')}")

    def values(self, spreadsheet_id: str, sheet_name: str, a1_range: str, *, formatted: bool = True) -> FetchOutcome:
        """A range of one tab, e.g. values(id, "Appointment Blocks", "A1:Z50") -> ``{"values": [[...]]}``."""
        a1 = f"{quote_sheet_name(sheet_name)}!{a1_range}"
        params = {"valueRenderOption": "FORMATTED_VALUE" if formatted else "UNFORMATTED_VALUE"}
        return self._get(
            f"{SHEETS_API_ROOT}/{quote(spreadsheet_id, safe='')}/values/{quote(a1, safe='')}",
            params,
        )


def quote_sheet_name(sheet_name: str) -> str:
    """Quote a tab name for A1 notation ("Bob's Week" -> "'Bob''s Week'")."""
    return "'" + sheet_name.replace("'", "''") + "'"
