"""Seed script — creates the tables and promotes phone numbers to employees.

Usage::

    python seed.py +919876543210 9123456789
"""

import asyncio
import sys

from site_bot.database.engine import async_session_factory, init_db
from site_bot.services.user_service import UserService

SAMPLE_EMPLOYEES = [
    ("+919876543210", "Ramesh Patel", "ramesh@example.com"),
    ("+919812345678", "Suresh Shah", "suresh@example.com"),
]


async def seed(phones: list[str]) -> None:
    """Promote *phones* (or the sample employees) to the employee role."""
    await init_db()
    users = UserService(async_session_factory)

    employees = [(phone, None, None) for phone in phones] or SAMPLE_EMPLOYEES
    for phone, name, email in employees:
        user = await users.promote_to_employee(phone, name=name, email=email)
        print(f"  • {user.phone} → employee (verification required)")
    print(f"✅ Seeded {len(employees)} employees into the database.")


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1:]))
