"""
Routes for discovering, validating and creating task spreadsheets.
"""

from fastapi import APIRouter, Depends

from tasksheet.auth import AuthenticatedUser, get_current_user
from tasksheet.schemas import (
    CreateTemplateRequest,
    CreateTemplateResponse,
    SheetFile,
    SheetListRequest,
    SheetListResponse,
    SheetRef,
    ValidateSheetRequest,
    ValidateSheetResponse,
)
from tasksheet.services.codec import REQUIRED_TASK_HEADERS
from tasksheet.store import TaskRepositoryFactory, get_task_repositories

router = APIRouter()


@router.post("/list", response_model=SheetListResponse)
async def list_sheets(
    body: SheetListRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    repositories: TaskRepositoryFactory = Depends(get_task_repositories),
) -> SheetListResponse:
    """Spreadsheets in the user's Drive, most recently modified first."""
    files = await repositories(body.access_token).client.list_spreadsheets()
    return SheetListResponse(
        sheets=[
            SheetFile(id=f["id"], name=f.get("name", ""), created_time=f.get("createdTime"))
            for f in files
        ]
    )


@router.post("/validate", response_model=ValidateSheetResponse)
async def validate_sheet(
    body: ValidateSheetRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    repositories: TaskRepositoryFactory = Depends(get_task_repositories),
) -> ValidateSheetResponse:
    """Whether the spreadsheet's Tasks sheet carries the required headers."""
    is_valid = await repositories(body.access_token).validate_structure(body.sheet_id)
    return ValidateSheetResponse(is_valid=is_valid, required_headers=list(REQUIRED_TASK_HEADERS))


@router.post("/create-template", response_model=CreateTemplateResponse)
async def create_template(
    body: CreateTemplateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    repositories: TaskRepositoryFactory = Depends(get_task_repositories),
) -> CreateTemplateResponse:
    """Create a new spreadsheet with an empty, correctly headed Tasks sheet."""
    sheet = await repositories(body.access_token).create_template(body.name)
    return CreateTemplateResponse(sheet=SheetRef(**sheet))
