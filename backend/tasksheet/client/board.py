"""
Optimistic task editing with reconciliation or rollback.

Every edit is a small state machine:

    IDLE -> OPTIMISTIC -> RECONCILED   (server accepted; local task := server task)
                       -> ROLLED_BACK  (server refused; local task := pre-edit snapshot)

The edit is applied to local state synchronously, before any network I/O, so
a UI can close its input surface immediately. Edits of different tasks are
independent; a task accepts one pending edit at a time.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from tasksheet.client.api import EDITABLE_FIELDS, ApiError, TasksheetClient
from tasksheet.logging_config import get_logger
from tasksheet.models import Task

logger = get_logger(__name__)


class EditState(str, Enum):
    IDLE = "idle"
    OPTIMISTIC = "optimistic"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


class EditInProgressError(Exception):
    """The task already has an unresolved edit."""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} already has a pending edit")
        self.task_id = task_id


@dataclass
class Notification:
    """Transient toast: level is "success" or "error"."""
    level: str
    message: str


@dataclass
class PendingEdit:
    task_id: str
    changes: dict[str, Any]
    snapshot: Task
    state: EditState = EditState.IDLE
    result: Task | None = None
    error: str | None = None


@dataclass
class TaskBoard:
    """
    Local task state for one project, kept in step with the server.

    Inspectable without any UI: ``tasks``, ``columns``, ``notifications`` and
    ``pending`` expose everything a view needs.
    """

    client: TasksheetClient
    project_id: str
    access_token: str
    tasks: list[Task] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)
    on_notify: Callable[[Notification], None] | None = None
    pending: dict[str, PendingEdit] = field(default_factory=dict)

    async def load(self) -> None:
        self.tasks, self.columns = await self.client.get_tasks(self.project_id, self.access_token)

    def task(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(task_id)

    def lanes(self) -> dict[str, list[Task]]:
        """Kanban lanes: each column with its tasks, in board order."""
        lanes: dict[str, list[Task]] = {column: [] for column in self.columns}
        for task in self.tasks:
            lanes.setdefault(task.status, []).append(task)
        return lanes

    def _replace(self, task: Task) -> None:
        for position, current in enumerate(self.tasks):
            if current.id == task.id:
                self.tasks[position] = task
                return
        self.tasks.append(task)

    def _notify(self, level: str, message: str) -> None:
        notification = Notification(level, message)
        self.notifications.append(notification)
        if self.on_notify is not None:
            self.on_notify(notification)

    # -------------------------------------------------------------------------
    # Edit lifecycle
    # -------------------------------------------------------------------------

    def begin_edit(self, task_id: str, changes: Mapping[str, Any]) -> PendingEdit:
        """
        Apply ``changes`` to the local task right away.

        Raises:
            KeyError: Unknown task.
            ValueError: ``changes`` names a field that cannot be edited.
            EditInProgressError: The task already has a pending edit.
        """
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(unknown)}")
        if task_id in self.pending:
            raise EditInProgressError(task_id)

        current = self.task(task_id)
        edit = PendingEdit(task_id=task_id, changes=dict(changes), snapshot=current.model_copy(deep=True))

        self._replace(current.model_copy(update=edit.changes))
        edit.state = EditState.OPTIMISTIC
        self.pending[task_id] = edit
        return edit

    async def commit(self, edit: PendingEdit) -> PendingEdit:
        """Send an optimistic edit and settle it against the server's answer."""
        try:
            server_task = await self.client.update_task(
                self.project_id, edit.task_id, self.access_token, edit.changes
            )
        except ApiError as exc:
            self._rollback(edit, exc.message)
        except Exception:
            self._rollback(edit, "Failed to update task")
            raise
        else:
            self._replace(server_task)
            edit.state = EditState.RECONCILED
            edit.result = server_task
            self._notify("success", "Task updated")
        finally:
            self.pending.pop(edit.task_id, None)
        return edit

    def _rollback(self, edit: PendingEdit, message: str) -> None:
        self._replace(edit.snapshot)
        edit.state = EditState.ROLLED_BACK
        edit.error = message
        logger.warning(f"Rolled back edit of task {edit.task_id}: {message}")
        self._notify("error", message or "Failed to update task")

    async def edit_task(self, task_id: str, changes: Mapping[str, Any]) -> PendingEdit:
        """Modal edit: optimistic apply, then wait for reconciliation."""
        return await self.commit(self.begin_edit(task_id, changes))

    def submit_edit(self, task_id: str, changes: Mapping[str, Any]) -> "asyncio.Task[PendingEdit]":
        """Optimistic apply now; reconcile in the background."""
        edit = self.begin_edit(task_id, changes)
        return asyncio.create_task(self.commit(edit))

    async def move_task(self, task_id: str, new_status: str) -> PendingEdit | None:
        """Drag-and-drop to another column. Dropping on the same column is a no-op."""
        if self.task(task_id).status == new_status:
            return None
        return await self.edit_task(task_id, {"status": new_status})
