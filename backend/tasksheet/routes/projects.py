"""
Project routes for the Tasksheet API.
"""

from fastapi import APIRouter, Depends

from tasksheet.auth import AuthenticatedUser, get_current_user, require_admin
from tasksheet.logging_config import get_logger
from tasksheet.schemas import ProjectCreate, ProjectCreateResponse, ProjectListResponse
from tasksheet.services.projects import ProjectRegistry
from tasksheet.store import get_project_registry

logger = get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
async def list_my_projects(
    user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectRegistry = Depends(get_project_registry),
) -> ProjectListResponse:
    """Projects created by the current user."""
    return ProjectListResponse(projects=await projects.list_for_user(user.email))


@router.post("", response_model=ProjectCreateResponse)
async def create_project(
    project_in: ProjectCreate,
    user: AuthenticatedUser = Depends(require_admin),
    projects: ProjectRegistry = Depends(get_project_registry),
) -> ProjectCreateResponse:
    """Create a project linked to a task spreadsheet. Admins only."""
    project = await projects.create(
        project_in.project_name,
        project_in.description,
        project_in.linked_sheet_id,
        user.email,
    )
    return ProjectCreateResponse(project=project)
