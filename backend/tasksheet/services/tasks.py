"""
Task repository: reads and partially updates the rows of a project's Tasks sheet.

Tasks are addressed by their ID column. The row a task lives on is resolved
from a fresh read at the moment of every write, never cached between requests.
The read-then-write is not atomic: concurrent writers race and the last write
wins, unless the caller supplies the version it last saw, in which case a
changed row is refused with a ConflictError.
"""

import re
from typing import Any, Mapping

from tasksheet.exceptions import ConflictError, InvalidInputError, NotFoundError, UpstreamError
from tasksheet.logging_config import get_logger
from tasksheet.models import DEFAULT_COLUMNS, Project, Task
from tasksheet.services.codec import (
    FIRST_DATA_ROW,
    REQUIRED_TASK_HEADERS,
    TASK_HEADERS,
    WRITABLE_TASK_FIELDS,
    decode_task,
    decode_tasks,
    discover_columns,
    encode_task_changes,
)
from tasksheet.sheets import SheetsClient, a1, column_letter

logger = get_logger(__name__)

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TEXT_FIELDS = ("task_name", "description", "assignee_email", "status")
DATE_FIELDS = {"due_date": "Due date", "start_date": "Start date"}

LAST_TASK_COLUMN = column_letter(len(TASK_HEADERS) - 1)  # H


def validate_changes(changes: Mapping[str, Any]) -> None:
    """
    Check a partial update before anything is read or written.

    Rules:
    - at least one writable field
    - progress is an integer in [0, 100]
    - due_date / start_date are YYYY-MM-DD (an empty string clears the date)

    Raises:
        InvalidInputError: On the first rule broken.
    """
    if not changes:
        raise InvalidInputError("At least one field to update must be provided")

    unknown = sorted(set(changes) - set(WRITABLE_TASK_FIELDS))
    if unknown:
        raise InvalidInputError(f"Unknown task fields: {', '.join(unknown)}", field=unknown[0])

    if "progress" in changes:
        progress = changes["progress"]
        if isinstance(progress, bool) or not isinstance(progress, int) or not 0 <= progress <= 100:
            raise InvalidInputError("Progress must be an integer between 0 and 100", field="progress")

    for field, label in DATE_FIELDS.items():
        if field not in changes:
            continue
        value = changes[field]
        if not isinstance(value, str) or (value and not DATE_PATTERN.fullmatch(value)):
            raise InvalidInputError(f"{label} must be in YYYY-MM-DD format", field=field)

    for field in TEXT_FIELDS:
        if field in changes and not isinstance(changes[field], str):
            raise InvalidInputError(f"{field} must be a string", field=field)


class TaskRepository:
    """Tasks of project spreadsheets, accessed with one user's credentials."""

    def __init__(self, client: SheetsClient, sheet_name: str = "Tasks"):
        self.client = client
        self.sheet_name = sheet_name

    async def _read_rows(self, project: Project) -> list[list[str]]:
        return await self.client.get_values(
            project.linked_sheet_id, a1(self.sheet_name, f"A:{LAST_TASK_COLUMN}")
        )

    async def list_tasks(self, project: Project) -> tuple[list[Task], list[str]]:
        """
        All tasks of a project and the board columns derived from their statuses.

        An empty sheet, or one holding only the header, yields no tasks and
        the default columns.
        """
        rows = await self._read_rows(project)
        if len(rows) <= 1:
            return [], list(DEFAULT_COLUMNS)

        tasks = decode_tasks(rows[1:])
        columns = discover_columns(tasks)

        logger.debug(f"Listed {len(tasks)} tasks for project={project.project_id} columns={columns}")
        return tasks, columns

    async def find_task(self, project: Project, task_id: str) -> Task:
        """Linear scan of a fresh snapshot for the task whose decoded ID matches."""
        rows = await self._read_rows(project)
        for task in decode_tasks(rows[1:]):
            if task.id == task_id:
                return task
        raise NotFoundError("Task", task_id)

    async def read_row(self, project: Project, row_index: int) -> Task:
        """Re-read a single sheet row and decode it."""
        rows = await self.client.get_values(
            project.linked_sheet_id,
            a1(self.sheet_name, f"A{row_index}:{LAST_TASK_COLUMN}{row_index}"),
        )
        return decode_task(rows[0] if rows else [], row_index - FIRST_DATA_ROW)

    async def update_task(
        self,
        project: Project,
        task_id: str,
        changes: Mapping[str, Any],
        expected_version: str | None = None,
    ) -> Task:
        """
        Apply a partial update to one task and return its state as stored.

        Only the cells of the fields in ``changes`` are written, in a single
        batch request; the row is then re-read so the caller gets what the
        sheet holds rather than an echo of the input.

        Raises:
            InvalidInputError: If ``changes`` is invalid (nothing is read or written).
            NotFoundError: If no row has that ID (nothing is written).
            ConflictError: If ``expected_version`` no longer matches the row.
        """
        validate_changes(changes)

        task = await self.find_task(project, task_id)
        if expected_version and expected_version != task.version:
            logger.info(f"Refusing stale update of task {task_id}: {expected_version} != {task.version}")
            raise ConflictError(task_id, expected_version, task.version)

        data = encode_task_changes(changes, task.row_index, self.sheet_name)

        logger.info(f"Updating task {task_id} (row {task.row_index}) in sheet {project.linked_sheet_id}: {dict(changes)}")
        await self.client.batch_update_values(project.linked_sheet_id, data)

        return await self.read_row(project, task.row_index)

    # -------------------------------------------------------------------------
    # Sheet templates
    # -------------------------------------------------------------------------

    async def validate_structure(self, spreadsheet_id: str) -> bool:
        """True when the Tasks sheet header holds every required header."""
        try:
            rows = await self.client.get_values(spreadsheet_id, a1(self.sheet_name, "1:1"))
        except UpstreamError:
            logger.warning(f"Could not read header of spreadsheet {spreadsheet_id}; treating as invalid")
            return False

        headers = {str(cell).strip() for cell in (rows[0] if rows else [])}
        return all(header in headers for header in REQUIRED_TASK_HEADERS)

    async def create_template(self, name: str) -> dict[str, str]:
        """Create ``"<name> - Tasks"`` with a Tasks sheet and the full header row."""
        title = f"{name} - Tasks"
        spreadsheet_id = await self.client.create_spreadsheet(title, self.sheet_name)
        await self.client.update_values(
            spreadsheet_id,
            a1(self.sheet_name, f"A1:{LAST_TASK_COLUMN}1"),
            [TASK_HEADERS],
        )

        logger.info(f"Created task sheet template: id={spreadsheet_id} name='{title}'")
        return {"id": spreadsheet_id, "name": title}
