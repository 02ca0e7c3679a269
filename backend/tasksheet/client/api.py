"""
Async HTTP client for the task endpoints.
"""

from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from tasksheet.models import Project, Task

# Task field -> request body key on PUT /projects/{id}/tasks
_BODY_KEYS = {
    "status": "newStatus",
    "task_name": "taskName",
    "description": "description",
    "assignee_email": "assigneeEmail",
    "due_date": "dueDate",
    "start_date": "startDate",
    "progress": "progress",
}
EDITABLE_FIELDS = frozenset(_BODY_KEYS)


class ApiError(Exception):
    """Any non-2xx response (or transport failure, with status_code 0)."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or fallback
    return fallback


class TasksheetClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    Usage:
        async with TasksheetClient("http://localhost:8000") as api:
            await api.login("alice@x.com", "secret")
            tasks, columns = await api.get_tasks(project_id, google_token)
    """

    def __init__(
        self,
        base_url: str = "",
        session_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session_token = session_token
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def __aenter__(self) -> "TasksheetClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, fallback: str, **kwargs: Any) -> dict:
        headers = {}
        if self.session_token:
            headers["Authorization"] = f"Bearer {self.session_token}"
        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(0, f"{fallback}: {exc}") from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response, fallback))
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, f"{fallback}: malformed response") from exc
        if not isinstance(body, dict):
            raise ApiError(response.status_code, f"{fallback}: malformed response")
        return body

    async def login(self, email: str, password: str) -> str:
        body = await self._request("POST", "/login", "Login failed", json={"email": email, "password": password})
        self.session_token = body["token"]
        return self.session_token

    async def list_projects(self) -> list[Project]:
        body = await self._request("GET", "/projects", "Failed to load projects")
        return [Project.model_validate(project) for project in body["projects"]]

    async def get_tasks(self, project_id: str, access_token: str) -> tuple[list[Task], list[str]]:
        body = await self._request(
            "GET",
            f"/projects/{project_id}/tasks",
            "Failed to load tasks",
            params={"accessToken": access_token},
        )
        return [Task.model_validate(task) for task in body["tasks"]], list(body["columns"])

    async def update_task(
        self,
        project_id: str,
        task_id: str,
        access_token: str,
        changes: Mapping[str, Any],
        expected_version: str | None = None,
    ) -> Task:
        """PUT the given task fields; returns the task as the server stored it."""
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown task fields: {', '.join(unknown)}")
        payload: dict[str, Any] = {"taskId": task_id, "accessToken": access_token}
        payload.update({_BODY_KEYS[field]: value for field, value in changes.items()})
        if expected_version:
            payload["expectedVersion"] = expected_version

        body = await self._request("PUT", f"/projects/{project_id}/tasks", "Failed to update task", json=payload)
        try:
            return Task.model_validate(body["task"])
        except (KeyError, ValidationError) as exc:
            raise ApiError(200, "Failed to update task: malformed response") from exc
