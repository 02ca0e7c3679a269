"""
Python client for the Tasksheet API, with optimistic task editing.
"""

from tasksheet.client.api import ApiError, TasksheetClient
from tasksheet.client.board import EditInProgressError, EditState, Notification, PendingEdit, TaskBoard

__all__ = [
    "ApiError",
    "EditInProgressError",
    "EditState",
    "Notification",
    "PendingEdit",
    "TaskBoard",
    "TasksheetClient",
]
