from tasksheet.models.project import Project
from tasksheet.models.task import DEFAULT_COLUMNS, DEFAULT_STATUS, Task
from tasksheet.models.user import Role, User

__all__ = [
    "Project",
    "Task",
    "DEFAULT_COLUMNS",
    "DEFAULT_STATUS",
    "Role",
    "User",
]
