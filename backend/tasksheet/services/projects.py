"""
Project registry backed by the Projects sheet of the store spreadsheet.
"""

import uuid
from datetime import datetime, timezone

from tasksheet.exceptions import NotFoundError
from tasksheet.logging_config import get_logger
from tasksheet.models import Project
from tasksheet.services.codec import PROJECT_HEADERS, decode_project, encode_project
from tasksheet.sheets import SheetsClient, a1, column_letter

logger = get_logger(__name__)

LAST_PROJECT_COLUMN = column_letter(len(PROJECT_HEADERS) - 1)  # F


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-01-02T03:04:05.678Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ProjectRegistry:
    """
    Lists and creates projects.

    The Projects sheet is created (with its header row) on first use. Two
    concurrent first uses may both try to create it; that race is tolerated.
    """

    def __init__(self, client: SheetsClient, spreadsheet_id: str, sheet_name: str = "Projects"):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    async def ensure_table(self) -> None:
        titles = await self.client.sheet_titles(self.spreadsheet_id)
        if self.sheet_name in titles:
            return

        logger.info(f"Creating missing '{self.sheet_name}' sheet in {self.spreadsheet_id}")
        await self.client.add_sheet(self.spreadsheet_id, self.sheet_name)
        await self.client.update_values(
            self.spreadsheet_id,
            a1(self.sheet_name, f"A1:{LAST_PROJECT_COLUMN}1"),
            [PROJECT_HEADERS],
        )

    async def list_all(self) -> list[Project]:
        await self.ensure_table()
        rows = await self.client.get_values(
            self.spreadsheet_id, a1(self.sheet_name, f"A1:{LAST_PROJECT_COLUMN}")
        )
        projects = [decode_project(row) for row in rows[1:] if row and row[0]]

        logger.debug(f"Listed {len(projects)} projects")
        return projects

    async def list_for_user(self, email: str) -> list[Project]:
        """Projects created by ``email``."""
        return [project for project in await self.list_all() if project.created_by == email]

    async def get(self, project_id: str) -> Project:
        for project in await self.list_all():
            if project.project_id == project_id:
                return project
        raise NotFoundError("Project", project_id)

    async def create(
        self,
        project_name: str,
        description: str | None,
        linked_sheet_id: str,
        created_by: str,
    ) -> Project:
        """
        Append a new project row.

        Performs no authorization; callers must have checked the Admin role.
        """
        await self.ensure_table()

        project = Project(
            project_id=str(uuid.uuid4()),
            project_name=project_name,
            description=description or "",
            linked_sheet_id=linked_sheet_id,
            created_by=created_by,
            created_at=utc_timestamp(),
        )
        await self.client.append_values(
            self.spreadsheet_id,
            a1(self.sheet_name, f"A1:{LAST_PROJECT_COLUMN}1"),
            [encode_project(project)],
        )

        logger.info(f"Created project: id={project.project_id} name='{project.project_name}' by={created_by}")
        return project
