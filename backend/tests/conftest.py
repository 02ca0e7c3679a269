"""
Pytest configuration and fixtures for Tasksheet tests.

The Google Sheets gateway is replaced by ``FakeSheets``, an in-memory set of
spreadsheets that understands the A1 ranges the application uses.
"""

import re

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tasksheet.auth import create_session_token
from tasksheet.config import Settings, get_settings
from tasksheet.exceptions import UpstreamError
from tasksheet.main import app
from tasksheet.models import Role, User
from tasksheet.services.codec import PROJECT_HEADERS, TASK_HEADERS, USER_HEADERS
from tasksheet.services.users import hash_password
from tasksheet.sheets import a1, column_letter
from tasksheet.store import get_store_client, get_task_sheets

STORE_ID = "store-sheet"
TASKS_ID = "tasks-sheet"
PASSWORD = "correct horse"

_RANGE = re.compile(r"^(?:'(?P<quoted>(?:[^']|'')+)'|(?P<plain>[^!]+))!(?P<cells>.+)$")
_CELLS = re.compile(r"^([A-Z]*)(\d*)(?::([A-Z]*)(\d*))?$")


def _column_index(letters: str) -> int:
    index = 0
    for letter in letters:
        index = index * 26 + (ord(letter) - 64)
    return index - 1


def parse_range(range_: str):
    """'Tasks'!A2:H5 -> ("Tasks", col0, row0, col1, row1); None means unbounded. Rows are 1-based."""
    match = _RANGE.match(range_)
    title = match.group("quoted").replace("''", "'") if match.group("quoted") else match.group("plain")
    c0, r0, c1, r1 = _CELLS.match(match.group("cells")).groups()
    if c1 is None and r1 is None:
        c1, r1 = c0, r0
    return (
        title,
        _column_index(c0) if c0 else 0,
        int(r0) if r0 else 1,
        _column_index(c1) if c1 else None,
        int(r1) if r1 else None,
    )


def _trim(cells: list) -> list:
    cells = list(cells)
    while cells and cells[-1] in ("", None):
        cells.pop()
    return cells


class FakeSheets:
    """In-memory stand-in for tasksheet.sheets.SheetsClient."""

    def __init__(self):
        self.spreadsheets: dict[str, dict[str, list[list[str]]]] = {}
        self.files: list[dict] = []
        self.writes: list[tuple[str, str, list]] = []
        self.batch_calls = 0
        self.tokens: list[str] = []
        self.error: Exception | None = None

    def for_token(self, access_token: str) -> "FakeSheets":
        self.tokens.append(access_token)
        return self

    def _check(self):
        if self.error is not None:
            raise self.error

    def _grid(self, spreadsheet_id: str, title: str) -> list[list[str]]:
        try:
            return self.spreadsheets[spreadsheet_id][title]
        except KeyError:
            raise UpstreamError("Failed to read spreadsheet values")

    def _write(self, spreadsheet_id: str, range_: str, values: list) -> None:
        title, c0, r0, _, _ = parse_range(range_)
        grid = self._grid(spreadsheet_id, title)
        for i, row in enumerate(values):
            row_number = r0 + i
            while len(grid) < row_number:
                grid.append([])
            target = grid[row_number - 1]
            for j, value in enumerate(row):
                while len(target) <= c0 + j:
                    target.append("")
                target[c0 + j] = "" if value is None else str(value)
        self.writes.append((spreadsheet_id, range_, values))

    def rows(self, spreadsheet_id: str, title: str) -> list[list[str]]:
        return [_trim(row) for row in self.spreadsheets[spreadsheet_id][title]]

    async def get_values(self, spreadsheet_id, range_):
        self._check()
        title, c0, r0, c1, r1 = parse_range(range_)
        grid = self._grid(spreadsheet_id, title)
        last = len(grid) if r1 is None else min(r1, len(grid))
        selected = [
            _trim(row[c0:] if c1 is None else row[c0:c1 + 1])
            for row in grid[r0 - 1:last]
        ]
        while selected and not selected[-1]:
            selected.pop()
        return selected

    async def update_values(self, spreadsheet_id, range_, values):
        self._check()
        self._write(spreadsheet_id, range_, values)

    async def append_values(self, spreadsheet_id, range_, values):
        self._check()
        title, c0, _, _, _ = parse_range(range_)
        grid = self._grid(spreadsheet_id, title)
        while grid and not _trim(grid[-1]):
            grid.pop()
        self._write(spreadsheet_id, a1(title, f"{column_letter(c0)}{len(grid) + 1}"), values)

    async def batch_update_values(self, spreadsheet_id, data):
        self._check()
        self.batch_calls += 1
        for item in data:
            self._write(spreadsheet_id, item["range"], item["values"])

    async def sheet_titles(self, spreadsheet_id):
        self._check()
        return list(self.spreadsheets.get(spreadsheet_id, {}))

    async def add_sheet(self, spreadsheet_id, title):
        self._check()
        self.spreadsheets.setdefault(spreadsheet_id, {})[title] = []

    async def create_spreadsheet(self, title, sheet_title):
        self._check()
        spreadsheet_id = f"created-{len(self.spreadsheets) + 1}"
        self.spreadsheets[spreadsheet_id] = {sheet_title: []}
        self.files.insert(0, {"id": spreadsheet_id, "name": title, "createdTime": "2026-01-01T00:00:00Z"})
        return spreadsheet_id

    async def list_spreadsheets(self):
        self._check()
        return list(self.files)


TASK_ROWS = [
    ["T2", "Write outline", "First draft", "bob@x.com", "In Progress", "2026-01-10", "2026-01-01", "40"],
    ["T3", "Review outline", "", "", "Done", "2026-01-12", "2026-01-11", "100"],
    ["T4", "Short row"],
    ["T1", "Ship it", "Release notes", "alice@x.com", "To Do", "2026-02-01", "2026-01-20", "10"],
]

PROJECT_ROW = ["P1", "Launch", "Product launch", TASKS_ID, "alice@x.com", "2026-01-01T00:00:00.000Z"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        google_sheet_id=STORE_ID,
        google_client_id="client-id",
        google_client_secret="client-secret",
        google_redirect_uri="",
        session_secret="test-secret",
    )


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(PASSWORD)


@pytest.fixture
def sheets(password_hash) -> FakeSheets:
    """Store spreadsheet with three users and one project; one task spreadsheet."""
    fake = FakeSheets()
    fake.spreadsheets[STORE_ID] = {
        "Users": [
            list(USER_HEADERS),
            ["admin@x.com", password_hash, "Admin"],
            ["alice@x.com", password_hash, "Member"],
            ["bob@x.com", password_hash, "Member"],
        ],
        "Projects": [list(PROJECT_HEADERS), list(PROJECT_ROW)],
    }
    fake.spreadsheets[TASKS_ID] = {"Tasks": [list(TASK_HEADERS)] + [list(row) for row in TASK_ROWS]}
    fake.files = [{"id": TASKS_ID, "name": "Launch - Tasks", "createdTime": "2025-12-01T09:00:00Z"}]
    return fake


@pytest.fixture
def auth_headers(settings):
    """Build Authorization headers for a principal."""

    def make(email: str, role: Role = Role.MEMBER) -> dict:
        user = User(email=email, hashed_password="unused", role=role)
        return {"Authorization": f"Bearer {create_session_token(user, settings)}"}

    return make


@pytest_asyncio.fixture(scope="function")
async def client(settings, sheets):
    """Async test client with the in-memory spreadsheets."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store_client] = lambda: sheets
    app.dependency_overrides[get_task_sheets] = lambda: sheets.for_token

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
