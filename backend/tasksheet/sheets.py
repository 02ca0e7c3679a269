"""
Async gateway over the Google Sheets v4 and Drive v3 APIs.

The Google client library is blocking, so every request is executed in a
worker thread. Two credential flavours are used:
- the service account, for the Users/Projects store spreadsheet
- a user's OAuth access token, for that user's task spreadsheets
"""

import asyncio
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials as OAuthCredentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from tasksheet.config import Settings
from tasksheet.exceptions import UnauthenticatedError, UpstreamError
from tasksheet.logging_config import get_logger

logger = get_logger(__name__)

STORE_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
VALUE_INPUT_OPTION = "RAW"


def a1(sheet_name: str, cells: str) -> str:
    """Build an A1 range such as ``'Tasks'!E5``."""
    return "'{}'!{}".format(sheet_name.replace("'", "''"), cells)


def column_letter(index: int) -> str:
    """0-based column index -> letter(s): 0 -> A, 25 -> Z, 26 -> AA."""
    n = index + 1
    letters = ""
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def _service_account_key_paths(settings: Settings) -> list[Path]:
    # __file__ = backend/tasksheet/sheets.py -> .parent.parent = backend/
    backend_dir = Path(__file__).parent.parent
    paths = [
        backend_dir / "credentials.json",
        backend_dir / "serviceAccountKey.json",
        Path.cwd() / "credentials.json",
    ]
    if settings.google_application_credentials:
        paths.insert(0, Path(settings.google_application_credentials))
    return paths


@lru_cache
def _load_service_account(info_json: str, key_path: str) -> service_account.Credentials:
    if info_json:
        try:
            info = json.loads(info_json)
        except json.JSONDecodeError as exc:
            raise UpstreamError("Spreadsheet store is misconfigured", cause=exc) from exc
        return service_account.Credentials.from_service_account_info(info, scopes=STORE_SCOPES)
    return service_account.Credentials.from_service_account_file(key_path, scopes=STORE_SCOPES)


def service_account_credentials(settings: Settings) -> service_account.Credentials:
    """
    Resolve the store's service account credentials.

    GOOGLE_SERVICE_ACCOUNT_JSON wins; otherwise the first key file found.

    Raises:
        UpstreamError: If no credentials are configured.
    """
    if settings.google_service_account_json:
        return _load_service_account(settings.google_service_account_json, "")

    for key_path in _service_account_key_paths(settings):
        if key_path.exists() and key_path.is_file():
            logger.debug(f"Using service account key: {key_path.name}")
            return _load_service_account("", str(key_path))

    logger.error("No service account credentials found (set GOOGLE_SERVICE_ACCOUNT_JSON or add credentials.json)")
    raise UpstreamError("Spreadsheet store is not configured")


class SheetsClient:
    """Thin async wrapper over the spreadsheet and drive resources."""

    def __init__(self, credentials: Any):
        self._credentials = credentials
        self._sheets = None
        self._drive = None

    @classmethod
    def for_service_account(cls, settings: Settings) -> "SheetsClient":
        return cls(service_account_credentials(settings))

    @classmethod
    def for_access_token(cls, access_token: str) -> "SheetsClient":
        return cls(OAuthCredentials(token=access_token))

    def _spreadsheets(self):
        if self._sheets is None:
            self._sheets = build("sheets", "v4", credentials=self._credentials, cache_discovery=False)
        return self._sheets.spreadsheets()

    def _files(self):
        if self._drive is None:
            self._drive = build("drive", "v3", credentials=self._credentials, cache_discovery=False)
        return self._drive.files()

    async def _execute(self, make_request: Callable[[], Any], description: str) -> dict:
        """Run ``make_request().execute()`` in a thread, translating Google errors."""
        try:
            return await asyncio.to_thread(lambda: make_request().execute())
        except HttpError as exc:
            if exc.resp is not None and exc.resp.status == 401:
                logger.warning(f"Google rejected credentials while trying to {description}")
                raise UnauthenticatedError("Google access token is invalid or expired") from exc
            logger.error(f"Google API error while trying to {description}: {exc}")
            raise UpstreamError(f"Failed to {description}", cause=exc) from exc
        except GoogleAuthError as exc:
            logger.error(f"Google auth error while trying to {description}: {exc}")
            raise UpstreamError(f"Failed to {description}", cause=exc) from exc

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    async def get_values(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        result = await self._execute(
            lambda: self._spreadsheets().values().get(spreadsheetId=spreadsheet_id, range=range_),
            "read spreadsheet values",
        )
        return result.get("values", [])

    async def update_values(self, spreadsheet_id: str, range_: str, values: list[list[Any]]) -> None:
        await self._execute(
            lambda: self._spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=range_,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": values},
            ),
            "write spreadsheet values",
        )

    async def append_values(self, spreadsheet_id: str, range_: str, values: list[list[Any]]) -> None:
        await self._execute(
            lambda: self._spreadsheets().values().append(
                spreadsheetId=spreadsheet_id,
                range=range_,
                valueInputOption=VALUE_INPUT_OPTION,
                insertDataOption="INSERT_ROWS",
                body={"values": values},
            ),
            "append spreadsheet rows",
        )

    async def batch_update_values(self, spreadsheet_id: str, data: list[dict[str, Any]]) -> None:
        """Write several ranges in one request. ``data`` items are ``{"range", "values"}``."""
        await self._execute(
            lambda: self._spreadsheets().values().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={"valueInputOption": VALUE_INPUT_OPTION, "data": data},
            ),
            "write spreadsheet values",
        )

    # -------------------------------------------------------------------------
    # Spreadsheets and sheets
    # -------------------------------------------------------------------------

    async def sheet_titles(self, spreadsheet_id: str) -> list[str]:
        meta = await self._execute(
            lambda: self._spreadsheets().get(spreadsheetId=spreadsheet_id, fields="sheets.properties.title"),
            "read spreadsheet metadata",
        )
        return [sheet["properties"]["title"] for sheet in meta.get("sheets", [])]

    async def add_sheet(self, spreadsheet_id: str, title: str) -> None:
        await self._execute(
            lambda: self._spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body={"requests": [{"addSheet": {"properties": {"title": title}}}]},
            ),
            "add sheet",
        )

    async def create_spreadsheet(self, title: str, sheet_title: str) -> str:
        """Create a spreadsheet with a single named sheet, returning its ID."""
        created = await self._execute(
            lambda: self._spreadsheets().create(
                body={
                    "properties": {"title": title},
                    "sheets": [{"properties": {"title": sheet_title}}],
                },
                fields="spreadsheetId",
            ),
            "create spreadsheet",
        )
        return created["spreadsheetId"]

    # -------------------------------------------------------------------------
    # Drive
    # -------------------------------------------------------------------------

    async def list_spreadsheets(self) -> list[dict[str, Any]]:
        """Spreadsheets visible to the credentials, most recently modified first."""
        result = await self._execute(
            lambda: self._files().list(
                q=f"mimeType='{SPREADSHEET_MIME_TYPE}'",
                fields="files(id, name, createdTime)",
                orderBy="modifiedTime desc",
            ),
            "list spreadsheets",
        )
        return result.get("files", [])
