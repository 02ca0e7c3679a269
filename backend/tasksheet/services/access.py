"""
Access control for project tasks.

A principal may read and update a project's tasks when they are an Admin
or the project's creator.
"""

from tasksheet.auth import AuthenticatedUser
from tasksheet.exceptions import ForbiddenError
from tasksheet.models import Project, Role


def can_access(principal: AuthenticatedUser, project: Project) -> bool:
    return principal.role == Role.ADMIN or principal.email == project.created_by


def require_project_access(principal: AuthenticatedUser, project: Project) -> None:
    """Raise ForbiddenError unless ``can_access`` allows the principal."""
    if not can_access(principal, project):
        raise ForbiddenError("Access denied")
