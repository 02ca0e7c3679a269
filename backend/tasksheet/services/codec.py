"""
Row codec: positional spreadsheet rows <-> Task / Project / User records.

Rows come back from the Sheets API as lists of strings, with trailing empty
cells trimmed, so every decoder tolerates short rows. Task rows use:

    A ID | B TaskName | C Description | D AssigneeEmail | E Status |
    F DueDate | G StartDate | H Progress
"""

import hashlib
import json
import re
from typing import Any, Iterable, Mapping, Sequence

from tasksheet.models import DEFAULT_COLUMNS, DEFAULT_STATUS, Project, Role, Task, User
from tasksheet.sheets import a1, column_letter

TASK_FIELDS = (
    "id",
    "task_name",
    "description",
    "assignee_email",
    "status",
    "due_date",
    "start_date",
    "progress",
)
TASK_HEADERS = ["ID", "TaskName", "Description", "AssigneeEmail", "Status", "DueDate", "StartDate", "Progress"]
REQUIRED_TASK_HEADERS = TASK_HEADERS[:6]
WRITABLE_TASK_FIELDS = TASK_FIELDS[1:]  # ID is never rewritten

PROJECT_FIELDS = ("project_id", "project_name", "description", "linked_sheet_id", "created_by", "created_at")
PROJECT_HEADERS = ["ProjectID", "ProjectName", "Description", "LinkedSheetID", "CreatedBy", "CreatedAt"]

USER_HEADERS = ["Email", "HashedPassword", "Role"]

# Row 1 is the header, so data row n (0-based) lives on sheet row n + 2
FIRST_DATA_ROW = 2

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _cell(row: Sequence[Any], position: int) -> str:
    if position < len(row) and row[position] is not None:
        return str(row[position])
    return ""


def parse_progress(value: Any) -> int:
    """Leading integer of a cell ("75", "75%", "75.5" -> 75); anything else -> 0."""
    match = _LEADING_INT.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else 0


def row_fingerprint(row: Sequence[Any]) -> str:
    """Short, stable hash of a row's cells, ignoring trailing empty cells."""
    cells = [_cell(row, i) for i in range(len(row))]
    while cells and cells[-1] == "":
        cells.pop()
    return hashlib.sha1(json.dumps(cells).encode("utf-8")).hexdigest()[:12]


# =============================================================================
# Tasks
# =============================================================================

def decode_task(row: Sequence[Any], ordinal: int) -> Task:
    """
    Decode one data row.

    Args:
        row: Cell values, possibly shorter than eight
        ordinal: 0-based position of the row below the header
    """
    return Task(
        id=_cell(row, 0) or f"task-{ordinal + 1}",
        task_name=_cell(row, 1),
        description=_cell(row, 2),
        assignee_email=_cell(row, 3),
        status=_cell(row, 4) or DEFAULT_STATUS,
        due_date=_cell(row, 5),
        start_date=_cell(row, 6),
        progress=parse_progress(_cell(row, 7)),
        row_index=ordinal + FIRST_DATA_ROW,
        version=row_fingerprint(row),
    )


def decode_tasks(rows: Iterable[Sequence[Any]]) -> list[Task]:
    """Decode data rows (header already removed)."""
    return [decode_task(row, ordinal) for ordinal, row in enumerate(rows)]


def encode_task_changes(changes: Mapping[str, Any], row_index: int, sheet_name: str) -> list[dict[str, Any]]:
    """
    Sparse writes for a partial update: one single-cell range per changed field.

    >>> encode_task_changes({"status": "Done"}, 5, "Tasks")
    [{'range': "'Tasks'!E5", 'values': [['Done']]}]
    """
    unknown = set(changes) - set(WRITABLE_TASK_FIELDS)
    if unknown:
        raise ValueError(f"Not writable task fields: {sorted(unknown)}")

    data = []
    for field in WRITABLE_TASK_FIELDS:
        if field not in changes:
            continue
        cell = f"{column_letter(TASK_FIELDS.index(field))}{row_index}"
        data.append({"range": a1(sheet_name, cell), "values": [[changes[field]]]})
    return data


def discover_columns(tasks: Iterable[Task]) -> list[str]:
    """Distinct non-empty statuses in first-seen order, or the default board columns."""
    columns: list[str] = []
    for task in tasks:
        if task.status and task.status not in columns:
            columns.append(task.status)
    return columns or list(DEFAULT_COLUMNS)


# =============================================================================
# Projects
# =============================================================================

def decode_project(row: Sequence[Any]) -> Project:
    return Project(**{field: _cell(row, position) for position, field in enumerate(PROJECT_FIELDS)})


def encode_project(project: Project) -> list[str]:
    return [getattr(project, field) or "" for field in PROJECT_FIELDS]


# =============================================================================
# Users
# =============================================================================

def decode_user(row: Sequence[Any]) -> User | None:
    """Decode a Users row; rows without an email are skipped (``None``)."""
    email = _cell(row, 0).strip()
    if not email:
        return None
    try:
        role = Role(_cell(row, 2).strip())
    except ValueError:
        role = Role.MEMBER
    return User(email=email, hashed_password=_cell(row, 1), role=role)


def encode_user(user: User) -> list[str]:
    return [user.email, user.hashed_password, user.role.value]
