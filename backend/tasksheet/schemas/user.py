from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tasksheet.models import Role


class Credentials(BaseModel):
    """Email/password pair used by both signup and login."""
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupResponse(BaseModel):
    success: bool = True


class TokenResponse(BaseModel):
    """Session token returned by /login."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    token_type: str = "bearer"
    email: str
    role: Role
