"""
FastAPI dependencies wiring the spreadsheet store into request handlers.

Tests swap ``get_store_client``, ``get_task_sheets`` and ``get_oauth_http_client``
through ``app.dependency_overrides``.
"""

from typing import AsyncGenerator, Callable

import httpx
from fastapi import Depends

from tasksheet.config import Settings, get_settings
from tasksheet.services.projects import ProjectRegistry
from tasksheet.services.tasks import TaskRepository
from tasksheet.services.users import UserRegistry
from tasksheet.sheets import SheetsClient

TaskRepositoryFactory = Callable[[str], TaskRepository]


def get_store_client(settings: Settings = Depends(get_settings)) -> SheetsClient:
    """Service-account client for the Users/Projects spreadsheet."""
    return SheetsClient.for_service_account(settings)


def get_task_sheets() -> Callable[[str], SheetsClient]:
    """Factory turning a user's Google access token into a client."""
    return SheetsClient.for_access_token


def get_user_registry(
    client: SheetsClient = Depends(get_store_client),
    settings: Settings = Depends(get_settings),
) -> UserRegistry:
    return UserRegistry(client, settings.google_sheet_id, settings.google_sheet_name_users)


def get_project_registry(
    client: SheetsClient = Depends(get_store_client),
    settings: Settings = Depends(get_settings),
) -> ProjectRegistry:
    return ProjectRegistry(client, settings.google_sheet_id, settings.google_sheet_name_projects)


def get_task_repositories(
    task_sheets: Callable[[str], SheetsClient] = Depends(get_task_sheets),
    settings: Settings = Depends(get_settings),
) -> TaskRepositoryFactory:
    """Build a TaskRepository bound to one user's access token."""

    def factory(access_token: str) -> TaskRepository:
        return TaskRepository(task_sheets(access_token), settings.tasks_sheet_name)

    return factory


async def get_oauth_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client for the Google token endpoint."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        yield client
