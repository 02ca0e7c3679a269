from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Project(BaseModel):
    """Project record - one row of the Projects sheet, linked to one task spreadsheet."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: str
    project_name: str = ""
    description: str = ""
    linked_sheet_id: str = ""
    created_by: str = ""  # creator email, the ownership key
    created_at: str = ""  # ISO-8601, UTC
