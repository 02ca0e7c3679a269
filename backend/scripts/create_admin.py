"""Create an Admin user, or promote an existing user to Admin.

Signup only ever creates Members, so this is how the first Admin is made.

Usage:
    python -m scripts.create_admin alice@example.com [--password SECRET]
"""

import argparse
import asyncio
import getpass

from tasksheet.config import get_settings
from tasksheet.models import Role
from tasksheet.services.users import UserRegistry, hash_password
from tasksheet.sheets import SheetsClient


async def create_admin(email: str, password: str | None) -> None:
    settings = get_settings()
    registry = UserRegistry(
        SheetsClient.for_service_account(settings),
        settings.google_sheet_id,
        settings.google_sheet_name_users,
    )

    existing = await registry.find(email)
    if existing is not None:
        if existing.role == Role.ADMIN:
            print(f'{email} is already an Admin')
            return
        await registry.set_role(email, Role.ADMIN)
        print(f'✓ Promoted {email} to Admin')
        return

    if not password:
        password = getpass.getpass(f"Password for {email}: ")
    await registry.add(email, hash_password(password), Role.ADMIN)
    print(f'✓ Created Admin {email}')


def main():
    parser = argparse.ArgumentParser(description="Create or promote an Admin user")
    parser.add_argument("email", help="Email of the user")
    parser.add_argument("--password", help="Password for a new user (prompted if omitted)")
    args = parser.parse_args()

    asyncio.run(create_admin(args.email, args.password))


if __name__ == "__main__":
    main()
