from tasksheet.schemas.google import (
    AuthUrlResponse,
    CreateTemplateRequest,
    CreateTemplateResponse,
    OAuthCallbackRequest,
    OAuthTokensResponse,
    SheetFile,
    SheetListRequest,
    SheetListResponse,
    SheetRef,
    ValidateSheetRequest,
    ValidateSheetResponse,
)
from tasksheet.schemas.project import ProjectCreate, ProjectCreateResponse, ProjectListResponse
from tasksheet.schemas.task import TaskListResponse, TaskUpdateRequest, TaskUpdateResponse
from tasksheet.schemas.user import Credentials, SignupResponse, TokenResponse

__all__ = [
    "AuthUrlResponse",
    "CreateTemplateRequest",
    "CreateTemplateResponse",
    "Credentials",
    "OAuthCallbackRequest",
    "OAuthTokensResponse",
    "ProjectCreate",
    "ProjectCreateResponse",
    "ProjectListResponse",
    "SheetFile",
    "SheetListRequest",
    "SheetListResponse",
    "SheetRef",
    "SignupResponse",
    "TaskListResponse",
    "TaskUpdateRequest",
    "TaskUpdateResponse",
    "TokenResponse",
    "ValidateSheetRequest",
    "ValidateSheetResponse",
]
