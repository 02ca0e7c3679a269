from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthUrlResponse(_CamelModel):
    auth_url: str


class OAuthCallbackRequest(_CamelModel):
    code: str = Field(min_length=1)


class OAuthTokensResponse(_CamelModel):
    success: bool = True
    access_token: str
    refresh_token: str | None = None


class SheetListRequest(_CamelModel):
    access_token: str = Field(min_length=1)


class SheetFile(_CamelModel):
    id: str
    name: str
    created_time: str | None = None


class SheetListResponse(_CamelModel):
    sheets: list[SheetFile]


class ValidateSheetRequest(_CamelModel):
    sheet_id: str = Field(min_length=1)
    access_token: str = Field(min_length=1)


class ValidateSheetResponse(_CamelModel):
    is_valid: bool
    required_headers: list[str]


class CreateTemplateRequest(_CamelModel):
    name: str = Field(min_length=1)
    access_token: str = Field(min_length=1)


class SheetRef(_CamelModel):
    id: str
    name: str


class CreateTemplateResponse(_CamelModel):
    success: bool = True
    sheet: SheetRef
