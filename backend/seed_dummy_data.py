"""
Seed Dummy Organization Data

Creates approved dummy accounts for every team (one leader, one reporter per
department, and members) plus a few dummy reports per member, so the board
and aggregation views have something to show.

Run with:
    python seed_dummy_data.py            # seed
    python seed_dummy_data.py clear      # delete all dummy users and reports
"""
import asyncio
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from sqlalchemy import select

from report_portal.core.database import AsyncSessionLocal, init_db
from report_portal.core.organization import ORG_STRUCTURE
from report_portal.models.user import User, UserLevel
from report_portal.services.dummy_service import DummyDataService

MEMBERS_PER_TEAM = 3
REPORTS_PER_MEMBER = 2


def print_progress(message: str, percent: int):
    print(f"  [{percent:3d}%] {message}")


async def seed_dummy_data():
    """Create dummy users for every team, then dummy reports for the members"""
    print("=" * 50)
    print("Seeding Dummy Organization...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        service = DummyDataService(db)
        created_users = 0

        for department, teams in ORG_STRUCTURE.items():
            print(f"\n{department}")
            for index, team_id in enumerate(teams):
                emails = await service.create_dummy_users(
                    department, team_id, UserLevel.MEMBER.value, MEMBERS_PER_TEAM, print_progress
                )
                created_users += len(emails)
                # First team of each department hosts its leader and reporter
                if index == 0:
                    for level in (UserLevel.LEADER, UserLevel.REPORTER):
                        emails = await service.create_dummy_users(
                            department, team_id, level.value, 1, print_progress
                        )
                        created_users += len(emails)

        result = await db.execute(
            select(User).where(User.is_dummy.is_(True), User.level == UserLevel.MEMBER.value)
        )
        members = list(result.scalars().all())
        report_ids = await service.create_dummy_reports(members, REPORTS_PER_MEMBER, print_progress)

        print("=" * 50)
        print("Dummy Data Seeded Successfully!")
        print(f"  Users:   {created_users}")
        print(f"  Reports: {len(report_ids)}")
        print("=" * 50)


async def clear_dummy_data():
    """Delete every dummy report and user"""
    await init_db()

    async with AsyncSessionLocal() as db:
        service = DummyDataService(db)
        reports = await service.delete_all_dummy_reports(print_progress)
        users = await service.delete_all_dummy_users(print_progress)

    print("=" * 50)
    print(f"Deleted {reports} dummy reports and {users} dummy users")
    print("=" * 50)


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_dummy_data())
    else:
        asyncio.run(seed_dummy_data())
