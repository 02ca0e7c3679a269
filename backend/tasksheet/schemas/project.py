from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tasksheet.models import Project


class ProjectCreate(BaseModel):
    """Schema for creating a new project."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_name: str = Field(min_length=1)
    description: str | None = None
    linked_sheet_id: str = Field(min_length=1)


class ProjectListResponse(BaseModel):
    projects: list[Project]


class ProjectCreateResponse(BaseModel):
    success: bool = True
    project: Project
