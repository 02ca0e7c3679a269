"""
Task routes for the Tasksheet API.

Tasks live in each project's linked spreadsheet, which is read and written
with the caller's own Google access token (``accessToken``), always passed
explicitly: as a query parameter on GET, in the body on PUT.
"""

from fastapi import APIRouter, Depends, Query

from tasksheet.auth import AuthenticatedUser, get_current_user
from tasksheet.exceptions import UnauthenticatedError
from tasksheet.logging_config import get_logger
from tasksheet.schemas import TaskListResponse, TaskUpdateRequest, TaskUpdateResponse
from tasksheet.services.access import require_project_access
from tasksheet.services.projects import ProjectRegistry
from tasksheet.services.tasks import validate_changes
from tasksheet.store import TaskRepositoryFactory, get_project_registry, get_task_repositories

logger = get_logger(__name__)

router = APIRouter()


@router.get("/{project_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    project_id: str,
    access_token: str | None = Query(default=None, alias="accessToken"),
    user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectRegistry = Depends(get_project_registry),
    repositories: TaskRepositoryFactory = Depends(get_task_repositories),
) -> TaskListResponse:
    """Tasks of a project plus the Kanban columns found in their statuses."""
    if not access_token:
        raise UnauthenticatedError("Google OAuth token is required. Please provide accessToken parameter.")

    project = await projects.get(project_id)
    require_project_access(user, project)

    tasks, columns = await repositories(access_token).list_tasks(project)
    return TaskListResponse(tasks=tasks, columns=columns)


@router.put("/{project_id}/tasks", response_model=TaskUpdateResponse)
async def update_task(
    project_id: str,
    task_in: TaskUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectRegistry = Depends(get_project_registry),
    repositories: TaskRepositoryFactory = Depends(get_task_repositories),
) -> TaskUpdateResponse:
    """
    Partially update one task.

    Everything is validated and authorized before the task sheet is touched;
    only the supplied fields are written.
    """
    if not task_in.access_token:
        raise UnauthenticatedError("Google OAuth token is required. Please provide accessToken in request body.")

    changes = task_in.changes()
    validate_changes(changes)

    project = await projects.get(project_id)
    require_project_access(user, project)

    task = await repositories(task_in.access_token).update_task(
        project,
        task_in.task_id,
        changes,
        expected_version=task_in.expected_version,
    )
    logger.info(f"{user.email} updated task {task.id} of project {project_id}")
    return TaskUpdateResponse(task=task)
