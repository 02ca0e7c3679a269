#!/usr/bin/env python3
"""
Seed script to fill a task spreadsheet with demo tasks.

Writes the Tasks header (if the sheet is empty) and appends generated rows
with a spread of statuses, assignees, dates and progress, so the Kanban and
Gantt views have something to show.

Usage:
    python -m scripts.seed --sheet-id SPREADSHEET_ID [--tasks 30] [--access-token TOKEN]

Options:
    --sheet-id       Spreadsheet to seed (must have a "Tasks" sheet)
    --tasks N        Number of tasks to append (default: 30)
    --access-token   Google OAuth token; the service account is used if omitted
    --seed           Random seed for reproducible data
"""

import argparse
import asyncio
import random
from datetime import date, timedelta

from tasksheet.config import get_settings
from tasksheet.services.codec import TASK_HEADERS
from tasksheet.services.tasks import LAST_TASK_COLUMN
from tasksheet.sheets import SheetsClient, a1

STATUSES = ["To Do", "In Progress", "Review", "Done"]
VERBS = ["Design", "Implement", "Test", "Document", "Review", "Deploy", "Refactor"]
SUBJECTS = ["login page", "task board", "Gantt view", "sheet import", "email digest", "settings screen"]
ASSIGNEES = ["alice@example.com", "bob@example.com", "carol@example.com", ""]


def generate_rows(count: int, first_number: int, rng: random.Random) -> list[list[str]]:
    """Build ``count`` task rows numbered from ``first_number``."""
    rows = []
    today = date.today()
    for number in range(first_number, first_number + count):
        status = rng.choice(STATUSES)
        start = today + timedelta(days=rng.randint(-20, 20))
        due = start + timedelta(days=rng.randint(1, 14))
        if status == "Done":
            progress = 100
        elif status == "To Do":
            progress = 0
        else:
            progress = rng.randrange(10, 100, 10)
        rows.append([
            f"T{number}",
            f"{rng.choice(VERBS)} {rng.choice(SUBJECTS)}",
            "Generated by the seed script",
            rng.choice(ASSIGNEES),
            status,
            due.isoformat(),
            start.isoformat(),
            str(progress),
        ])
    return rows


async def seed(sheet_id: str, count: int, access_token: str | None, rng: random.Random) -> None:
    settings = get_settings()
    client = (
        SheetsClient.for_access_token(access_token)
        if access_token
        else SheetsClient.for_service_account(settings)
    )
    sheet = settings.tasks_sheet_name

    existing = await client.get_values(sheet_id, a1(sheet, f"A:{LAST_TASK_COLUMN}"))
    if not existing:
        print("Sheet is empty, writing header row...")
        await client.update_values(sheet_id, a1(sheet, f"A1:{LAST_TASK_COLUMN}1"), [TASK_HEADERS])
        existing = [TASK_HEADERS]

    rows = generate_rows(count, first_number=len(existing), rng=rng)
    await client.append_values(sheet_id, a1(sheet, f"A1:{LAST_TASK_COLUMN}1"), rows)

    print(f"Appended {len(rows)} tasks ({rows[0][0]}..{rows[-1][0]})")


def main():
    parser = argparse.ArgumentParser(description="Seed a task spreadsheet with demo tasks")
    parser.add_argument("--sheet-id", required=True, help="Spreadsheet ID")
    parser.add_argument("--tasks", type=int, default=30, help="Number of tasks to append")
    parser.add_argument("--access-token", help="Google OAuth access token")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args()

    print("=== Tasksheet Seed Script ===")
    asyncio.run(seed(args.sheet_id, args.tasks, args.access_token, random.Random(args.seed)))
    print("=== Seeding Complete ===")


if __name__ == "__main__":
    main()
