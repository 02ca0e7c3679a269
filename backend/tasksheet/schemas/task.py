from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from tasksheet.models import Task

# Request keys that address the update rather than change the task
_CONTROL_FIELDS = {"task_id", "access_token", "expected_version"}


class TaskListResponse(BaseModel):
    """Tasks of one project plus the Kanban columns derived from them."""
    tasks: list[Task]
    columns: list[str]


class TaskUpdateRequest(BaseModel):
    """
    Partial update of one task.

    Only fields present in the body are written; omitted (or null) fields
    keep their current value. ``newStatus`` is accepted as the status key.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: str = Field(min_length=1)
    access_token: str | None = None
    expected_version: str | None = None

    status: str | None = Field(
        default=None,
        validation_alias=AliasChoices("newStatus", "status"),
    )
    task_name: str | None = None
    description: str | None = None
    assignee_email: str | None = None
    due_date: str | None = None
    start_date: str | None = None
    progress: StrictInt | None = None

    def changes(self) -> dict[str, Any]:
        """Field -> new value for every task field the client supplied."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        return {field: value for field, value in data.items() if field not in _CONTROL_FIELDS}


class TaskUpdateResponse(BaseModel):
    success: bool = True
    task: Task
