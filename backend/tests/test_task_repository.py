"""
Task repository tests - validation before I/O, partial writes, re-read after write.
"""

import pytest

from conftest import TASKS_ID, FakeSheets
from tasksheet.exceptions import ConflictError, InvalidInputError, NotFoundError, UpstreamError
from tasksheet.models import Project
from tasksheet.services.codec import TASK_HEADERS
from tasksheet.services.tasks import TaskRepository, validate_changes

PROJECT = Project(project_id="P1", project_name="Launch", linked_sheet_id=TASKS_ID, created_by="alice@x.com")


@pytest.fixture
def repository(sheets) -> TaskRepository:
    return TaskRepository(sheets, "Tasks")


class TestValidateChanges:
    @pytest.mark.parametrize("progress", [-1, 101, 1000, 50.5, "50", True, None])
    def test_bad_progress(self, progress):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_changes({"progress": progress})
        assert exc_info.value.field == "progress"

    @pytest.mark.parametrize("progress", [0, 1, 99, 100])
    def test_good_progress(self, progress):
        validate_changes({"progress": progress})

    @pytest.mark.parametrize("field", ["due_date", "start_date"])
    @pytest.mark.parametrize("value", [
        "2026/01/01", "01-02-2026", "2026-1-1", "tomorrow", "2026-01-01T00:00", "2026-01-01\n", "٢٠٢٦-٠١-٠١",
    ])
    def test_bad_dates(self, field, value):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_changes({field: value})
        assert exc_info.value.field == field

    def test_empty_date_clears(self):
        validate_changes({"due_date": ""})

    def test_nothing_to_update(self):
        with pytest.raises(InvalidInputError):
            validate_changes({})

    def test_unknown_field(self):
        with pytest.raises(InvalidInputError):
            validate_changes({"id": "T7"})


class TestListTasks:
    @pytest.mark.asyncio
    async def test_lists_all_rows(self, repository):
        tasks, columns = await repository.list_tasks(PROJECT)

        assert [t.id for t in tasks] == ["T2", "T3", "T4", "T1"]
        assert [t.row_index for t in tasks] == [2, 3, 4, 5]
        assert columns == ["In Progress", "Done", "To Do"]

    @pytest.mark.asyncio
    async def test_header_only(self, sheets: FakeSheets, repository):
        sheets.spreadsheets[TASKS_ID]["Tasks"] = [list(TASK_HEADERS)]

        tasks, columns = await repository.list_tasks(PROJECT)

        assert tasks == []
        assert columns == ["To Do", "In Progress", "Done"]

    @pytest.mark.asyncio
    async def test_completely_empty_sheet(self, sheets: FakeSheets, repository):
        sheets.spreadsheets[TASKS_ID]["Tasks"] = []

        tasks, columns = await repository.list_tasks(PROJECT)

        assert tasks == []
        assert columns == ["To Do", "In Progress", "Done"]


class TestUpdateTask:
    @pytest.mark.asyncio
    async def test_partial_update_preserves_other_fields(self, sheets: FakeSheets, repository):
        before = await repository.find_task(PROJECT, "T1")

        updated = await repository.update_task(PROJECT, "T1", {"status": "Done"})

        assert updated.status == "Done"
        assert updated.model_dump(exclude={"status", "version"}) == before.model_dump(exclude={"status", "version"})
        assert sheets.writes == [(TASKS_ID, "'Tasks'!E5", [["Done"]])]

    @pytest.mark.asyncio
    async def test_returns_reread_row(self, sheets: FakeSheets, repository):
        updated = await repository.update_task(PROJECT, "T2", {"progress": 90, "due_date": "2026-03-01"})

        # Values come back as the sheet stores them
        assert updated.progress == 90
        assert updated.due_date == "2026-03-01"
        assert sheets.rows(TASKS_ID, "Tasks")[1][7] == "90"
        assert sheets.batch_calls == 1

    @pytest.mark.asyncio
    async def test_short_row_is_extended(self, sheets: FakeSheets, repository):
        updated = await repository.update_task(PROJECT, "T4", {"progress": 30})

        assert updated.task_name == "Short row"
        assert updated.progress == 30
        assert updated.status == "To Do"

    @pytest.mark.asyncio
    async def test_unknown_task_writes_nothing(self, sheets: FakeSheets, repository):
        with pytest.raises(NotFoundError):
            await repository.update_task(PROJECT, "T999", {"status": "Done"})
        assert sheets.writes == []

    @pytest.mark.asyncio
    async def test_invalid_changes_never_touch_the_sheet(self, sheets: FakeSheets, repository):
        sheets.error = AssertionError("the sheet must not be read")

        with pytest.raises(InvalidInputError):
            await repository.update_task(PROJECT, "T1", {"progress": 101})
        assert sheets.writes == []

    @pytest.mark.asyncio
    async def test_synthesized_ids_are_addressable(self, sheets: FakeSheets, repository):
        sheets.spreadsheets[TASKS_ID]["Tasks"].append(["", "No id yet"])

        updated = await repository.update_task(PROJECT, "task-5", {"status": "Done"})

        assert updated.id == "task-5"
        assert updated.row_index == 6
        assert updated.status == "Done"

    @pytest.mark.asyncio
    async def test_stale_version_is_refused(self, sheets: FakeSheets, repository):
        seen = await repository.find_task(PROJECT, "T1")
        await repository.update_task(PROJECT, "T1", {"description": "changed elsewhere"})
        writes = len(sheets.writes)

        with pytest.raises(ConflictError):
            await repository.update_task(PROJECT, "T1", {"status": "Done"}, expected_version=seen.version)
        assert len(sheets.writes) == writes

    @pytest.mark.asyncio
    async def test_current_version_is_accepted(self, repository):
        seen = await repository.find_task(PROJECT, "T1")

        updated = await repository.update_task(PROJECT, "T1", {"status": "Done"}, expected_version=seen.version)

        assert updated.status == "Done"
        assert updated.version != seen.version


class TestTemplates:
    @pytest.mark.asyncio
    async def test_valid_structure(self, repository):
        assert await repository.validate_structure(TASKS_ID) is True

    @pytest.mark.asyncio
    async def test_missing_header(self, sheets: FakeSheets, repository):
        sheets.spreadsheets[TASKS_ID]["Tasks"][0] = ["ID", "TaskName", "Status"]
        assert await repository.validate_structure(TASKS_ID) is False

    @pytest.mark.asyncio
    async def test_unreadable_sheet_is_invalid(self, repository):
        assert await repository.validate_structure("no-such-sheet") is False

    @pytest.mark.asyncio
    async def test_create_template(self, sheets: FakeSheets, repository):
        sheet = await repository.create_template("Launch")

        assert sheet["name"] == "Launch - Tasks"
        assert sheets.rows(sheet["id"], "Tasks") == [TASK_HEADERS]

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates(self, sheets: FakeSheets, repository):
        sheets.error = UpstreamError("Failed to create spreadsheet")
        with pytest.raises(UpstreamError):
            await repository.create_template("Launch")
