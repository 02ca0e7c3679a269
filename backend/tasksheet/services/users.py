"""
User registry backed by the Users sheet (Email | HashedPassword | Role).
"""

import asyncio

import bcrypt

from tasksheet.exceptions import InvalidInputError, NotFoundError
from tasksheet.logging_config import get_logger
from tasksheet.models import Role, User
from tasksheet.services.codec import FIRST_DATA_ROW, USER_HEADERS, decode_user, encode_user
from tasksheet.sheets import SheetsClient, a1, column_letter

logger = get_logger(__name__)

BCRYPT_ROUNDS = 10
LAST_USER_COLUMN = column_letter(len(USER_HEADERS) - 1)  # C
ROLE_COLUMN = column_letter(USER_HEADERS.index("Role"))


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash
        return False


class UserRegistry:
    def __init__(self, client: SheetsClient, spreadsheet_id: str, sheet_name: str = "Users"):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    async def _rows(self) -> list[list[str]]:
        return await self.client.get_values(
            self.spreadsheet_id, a1(self.sheet_name, f"A1:{LAST_USER_COLUMN}")
        )

    async def list_users(self) -> list[User]:
        users = [decode_user(row) for row in (await self._rows())[1:]]
        return [user for user in users if user is not None]

    async def find(self, email: str) -> User | None:
        for user in await self.list_users():
            if user.email == email:
                return user
        return None

    async def add(self, email: str, hashed_password: str, role: Role = Role.MEMBER) -> User:
        user = User(email=email, hashed_password=hashed_password, role=role)
        await self.client.append_values(
            self.spreadsheet_id,
            a1(self.sheet_name, f"A1:{LAST_USER_COLUMN}1"),
            [encode_user(user)],
        )
        logger.info(f"Added user {email} with role {role.value}")
        return user

    async def signup(self, email: str, password: str) -> User:
        """
        Register a new Member.

        Raises:
            InvalidInputError: If email or password is blank, or the user exists.
        """
        email = email.strip()
        if not email or not password:
            raise InvalidInputError("Email and password are required.")
        if await self.find(email) is not None:
            raise InvalidInputError("User already exists.", field="email")

        hashed = await asyncio.to_thread(hash_password, password)
        return await self.add(email, hashed, Role.MEMBER)

    async def authenticate(self, email: str, password: str) -> User | None:
        """The user when the password matches, else None."""
        user = await self.find(email.strip())
        if user is None:
            logger.info(f"Login attempt for unknown user {email}")
            return None
        if not await asyncio.to_thread(verify_password, password, user.hashed_password):
            logger.info(f"Wrong password for {email}")
            return None
        return user

    async def set_role(self, email: str, role: Role) -> User:
        """Rewrite the Role cell of an existing user."""
        rows = await self._rows()
        for ordinal, row in enumerate(rows[1:]):
            user = decode_user(row)
            if user is not None and user.email == email:
                row_index = ordinal + FIRST_DATA_ROW
                await self.client.update_values(
                    self.spreadsheet_id,
                    a1(self.sheet_name, f"{ROLE_COLUMN}{row_index}"),
                    [[role.value]],
                )
                logger.info(f"Set role of {email} to {role.value}")
                return user.model_copy(update={"role": role})
        raise NotFoundError("User", email)
