from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_STATUS = "To Do"
DEFAULT_COLUMNS = ["To Do", "In Progress", "Done"]


class Task(BaseModel):
    """
    One row of a project's Tasks sheet.

    Key fields:
    - id: value of the ID column, or ``task-<n>`` when that cell is empty
    - status: free text; every distinct value becomes a Kanban column
    - row_index: 1-based sheet row, re-derived on every read (header is row 1)
    - version: fingerprint of the raw row cells, changes whenever the row does
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    task_name: str = ""
    description: str = ""
    assignee_email: str = ""
    status: str = DEFAULT_STATUS
    due_date: str = ""
    start_date: str = ""
    progress: int = 0
    row_index: int
    version: str = ""
