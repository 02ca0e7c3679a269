"""
Row codec tests - decoding short/odd rows and sparse encoding of partial updates.
"""

import pytest

from tasksheet.models import DEFAULT_COLUMNS, Project, Role, Task
from tasksheet.services.codec import (
    decode_project,
    decode_task,
    decode_tasks,
    decode_user,
    discover_columns,
    encode_project,
    encode_task_changes,
    parse_progress,
    row_fingerprint,
)


class TestDecodeTask:
    """Rows with fewer than eight cells must decode with defaults."""

    def test_full_row(self):
        row = ["T1", "Ship it", "Notes", "a@x.com", "Review", "2026-02-01", "2026-01-20", "55"]
        task = decode_task(row, 3)

        assert task.id == "T1"
        assert task.task_name == "Ship it"
        assert task.status == "Review"
        assert task.due_date == "2026-02-01"
        assert task.start_date == "2026-01-20"
        assert task.progress == 55
        # ordinal 3 below the header -> sheet row 5
        assert task.row_index == 5

    def test_short_row_defaults(self):
        task = decode_task(["T9", "Only a name"], 0)

        assert task.description == ""
        assert task.assignee_email == ""
        assert task.status == "To Do"
        assert task.due_date == ""
        assert task.progress == 0
        assert task.row_index == 2

    def test_missing_id_is_synthesized_per_position(self):
        tasks = decode_tasks([[], ["", "Nameless"], ["T3"]])

        assert [t.id for t in tasks] == ["task-1", "task-2", "T3"]
        assert len({t.id for t in tasks}) == 3

    @pytest.mark.parametrize("cell, expected", [
        ("abc", 0),
        ("", 0),
        ("75", 75),
        ("75%", 75),
        ("42.9", 42),
        (None, 0),
    ])
    def test_progress_tolerates_non_numeric(self, cell, expected):
        assert parse_progress(cell) == expected

    def test_blank_status_falls_back_to_default(self):
        task = decode_task(["T1", "x", "", "", ""], 0)
        assert task.status == "To Do"

    def test_camel_case_json(self):
        task = decode_task(["T1", "Ship it"], 0)
        data = task.model_dump(by_alias=True)

        assert data["taskName"] == "Ship it"
        assert data["rowIndex"] == 2
        assert "assigneeEmail" in data


class TestFingerprint:
    def test_ignores_trailing_empty_cells(self):
        assert row_fingerprint(["T1", "a", ""]) == row_fingerprint(["T1", "a"])

    def test_changes_with_content(self):
        assert row_fingerprint(["T1", "a"]) != row_fingerprint(["T1", "b"])


class TestEncodeTaskChanges:
    def test_single_field_writes_single_cell(self):
        data = encode_task_changes({"status": "Done"}, 5, "Tasks")
        assert data == [{"range": "'Tasks'!E5", "values": [["Done"]]}]

    def test_only_given_fields_are_written(self):
        data = encode_task_changes({"progress": 80, "task_name": "Renamed"}, 7, "Tasks")

        assert [d["range"] for d in data] == ["'Tasks'!B7", "'Tasks'!H7"]
        assert data[1]["values"] == [[80]]

    def test_id_is_not_writable(self):
        with pytest.raises(ValueError):
            encode_task_changes({"id": "T2"}, 2, "Tasks")


class TestDiscoverColumns:
    def _tasks(self, *statuses):
        return [Task(id=f"T{i}", status=s, row_index=i + 2) for i, s in enumerate(statuses)]

    def test_distinct_in_first_seen_order(self):
        tasks = self._tasks("Doing", "Backlog", "Doing", "Shipped")
        assert discover_columns(tasks) == ["Doing", "Backlog", "Shipped"]

    def test_defaults_when_no_tasks(self):
        columns = discover_columns([])
        assert columns == DEFAULT_COLUMNS
        # a copy, not the shared default list
        assert columns is not DEFAULT_COLUMNS


class TestProjectsAndUsers:
    def test_project_roundtrip_through_row(self):
        project = Project(
            project_id="P1",
            project_name="Launch",
            description="",
            linked_sheet_id="sheet",
            created_by="a@x.com",
            created_at="2026-01-01T00:00:00.000Z",
        )
        assert decode_project(encode_project(project)) == project

    def test_short_project_row(self):
        project = decode_project(["P2", "Name only"])
        assert project.linked_sheet_id == ""
        assert project.created_by == ""

    def test_user_roles(self):
        assert decode_user(["a@x.com", "hash", "Admin"]).role == Role.ADMIN
        assert decode_user(["a@x.com", "hash"]).role == Role.MEMBER
        assert decode_user(["a@x.com", "hash", "Owner"]).role == Role.MEMBER

    def test_user_without_email_is_skipped(self):
        assert decode_user(["", "hash", "Admin"]) is None
        assert decode_user([]) is None
