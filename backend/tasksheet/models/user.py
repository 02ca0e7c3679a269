from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "Admin"
    MEMBER = "Member"


class User(BaseModel):
    """User record - one row of the Users sheet. Email is the identifier."""

    email: str
    hashed_password: str
    role: Role = Role.MEMBER
