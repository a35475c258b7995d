"""
Dummy Data Service - seeds test accounts and reports

Handles:
- Dummy user creation for a given department / team / level
- Bulk dummy report creation (rich-text template + picsum image gallery)
- Removal of everything flagged as dummy

Progress is reported through an optional ``on_progress(message, percent)``
callback. A failure on one item is reported and skipped.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timedelta, timezone
from typing import Callable, List, NamedTuple, Optional, Sequence
import random
import uuid

from report_portal.core.logging_config import logger
from report_portal.core.organization import TEAM_KEYS
from report_portal.models.report import Report
from report_portal.models.user import User, UserLevel, UserStatus
from report_portal.schemas.report import BlockType

ProgressCallback = Callable[[str, int], None]


class AuthorSnapshot(NamedTuple):
    id: str
    name: str
    department: str
    team_id: str

    @classmethod
    def of(cls, user: User) -> "AuthorSnapshot":
        return cls(user.id, user.name, user.department, user.team_id)

_TABLE_STYLE = 'style="width: 100%; border-collapse: collapse; border: 1px solid #e5e7eb;"'
_CELL_STYLE = 'style="border: 1px solid #e5e7eb; padding: 12px;"'

REPORT_TEMPLATES = [
    {
        "title_prefix": "Weekly Results and Plans",
        "content": f"""
      <h2>1. Key Work in Progress</h2>
      <p>This week's <strong>key indicators</strong> are reported below. Overall progress is at 105% of target.</p>
      <ul>
        <li>Strategic plan drafted and agreed across departments</li>
        <li>Upgrade of the <em>site risk management system</em> started</li>
        <li>Partner contract renewals and unit price negotiation closed</li>
      </ul>
      <table {_TABLE_STYLE}>
        <thead>
          <tr><th {_CELL_STYLE}>Item</th><th {_CELL_STYLE}>Achieved</th><th {_CELL_STYLE}>Notes</th></tr>
        </thead>
        <tbody>
          <tr><td {_CELL_STYLE}>Operational efficiency</td><td {_CELL_STYLE}><span style="color: #4f46e5;"><strong>92%</strong></span></td><td {_CELL_STYLE}>On track</td></tr>
          <tr><td {_CELL_STYLE}>Customer feedback</td><td {_CELL_STYLE}><span style="color: #4f46e5;"><strong>100%</strong></span></td><td {_CELL_STYLE}>Done</td></tr>
          <tr><td {_CELL_STYLE}>Budget review</td><td {_CELL_STYLE}><span style="color: #ef4444;"><strong>75%</strong></span></td><td {_CELL_STYLE}>Focus next week</td></tr>
        </tbody>
      </table>
      <p>Figures are taken from the department's integrated database.</p>
    """,
    },
    {
        "title_prefix": "Site Safety Inspection and Facility Report",
        "content": f"""
      <h2>1. Routine Safety Inspection</h2>
      <p>Today's <strong>routine site inspection</strong> found most areas in good condition, with a few spots needing repair.</p>
      <ol>
        <li>Zone A fire equipment pressure check (normal)</li>
        <li>Zone B mooring deck <em>wood decay</em> check (repair needed)</li>
        <li>Sanitation and cleaning across all zones (good)</li>
      </ol>
      <h3>2. Maintenance Budget (Draft)</h3>
      <table {_TABLE_STYLE}>
        <thead>
          <tr><th {_CELL_STYLE}>Item</th><th {_CELL_STYLE}>Qty</th><th {_CELL_STYLE}>Estimated Cost</th></tr>
        </thead>
        <tbody>
          <tr><td {_CELL_STYLE}>Replacement deck timber</td><td {_CELL_STYLE}>20 EA</td><td {_CELL_STYLE}>$450</td></tr>
          <tr><td {_CELL_STYLE}>Waterproof coating</td><td {_CELL_STYLE}>5 CAN</td><td {_CELL_STYLE}>$120</td></tr>
        </tbody>
      </table>
    """,
    },
    {
        "title_prefix": "Market Trends and New Business Proposal",
        "content": f"""
      <h2>1. Competitor Analysis</h2>
      <p>Recent <strong>tourism trends</strong> show demand for hands-on content up more than 40% year over year.</p>
      <ul>
        <li>Competitor A: night opening and media art exhibitions</li>
        <li>Competitor B: loyalty through an <em>eco membership</em> card</li>
      </ul>
      <h3>2. Our Response (SWOT)</h3>
      <table {_TABLE_STYLE}>
        <tr><td {_CELL_STYLE}><strong>Strength</strong></td><td {_CELL_STYLE}>Outstanding natural scenery and brand awareness</td></tr>
        <tr><td {_CELL_STYLE}><strong>Weakness</strong></td><td {_CELL_STYLE}>Slow digital transition and weak online booking</td></tr>
        <tr><td {_CELL_STYLE}><strong>Opportunity</strong></td><td {_CELL_STYLE}>Return of global cruise tourism and new routes</td></tr>
      </table>
    """,
    },
]

DUMMY_CAPTIONS = [
    "Site inspection photo 1",
    "Main facility status",
    "Identified risk area detail",
    "Before / after comparison",
    "Key metrics visualized",
    "Cross-department meeting notes",
    "Market research reference",
]

DUMMY_REPORT_WINDOW = timedelta(days=10)


def _percent(done: int, total: int) -> int:
    return round(done / total * 100) if total else 100


class DummyDataService:
    """Creates and removes seeded test data"""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random()

    async def create_dummy_users(
        self,
        department: str,
        team_id: str,
        level: int,
        count: int,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[str]:
        """
        Create ``count`` approved dummy users.

        Returns:
            Emails of the users actually created
        """
        notify = on_progress or (lambda msg, pct: None)
        team_key = TEAM_KEYS.get(team_id, "staff")
        level = UserLevel(level).value
        created: List[str] = []

        notify(f"Creating {count} dummy users...", 0)

        for seq in range(1, count + 1):
            email = f"{team_key}_{seq:02d}_lv{level}@example.com"
            user = User(
                id=f"dum_{team_key}_{seq:02d}_{uuid.uuid4().hex[:8]}",
                email=email,
                name=f"Dummy_{team_id}_{seq:02d}",
                phone=f"010-{self.rng.randint(1000, 9999)}-{self.rng.randint(1000, 9999)}",
                department=department,
                team_id=team_id,
                level=level,
                status=UserStatus.APPROVED.value,
                is_dummy=True,
            )
            try:
                existing = await self.db.execute(select(User.id).where(User.email == email))
                if existing.scalar_one_or_none():
                    notify(f"[FAILED] {email} already exists", _percent(seq, count))
                    continue
                self.db.add(user)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.warning(f"[DummyData] Could not create {email}: {e}")
                notify(f"[FAILED] {email} could not be created", _percent(seq, count))
                continue

            created.append(email)
            notify(f"[OK] {email} (ID: {user.id})", _percent(seq, count))

        logger.info(f"[DummyData] Created {len(created)}/{count} dummy users for {team_id}")
        return created

    def build_dummy_report(self, user: AuthorSnapshot, seq: int, now: Optional[datetime] = None) -> Report:
        """Build (without persisting) one dummy report for ``user``"""
        now = now or datetime.now(timezone.utc)
        template = self.rng.choice(REPORT_TEMPLATES)
        report_id = f"rep_dum_{uuid.uuid4().hex[:12]}"

        image_count = self.rng.randint(1, 3)
        images = [f"https://picsum.photos/seed/{report_id}_img{idx}/800/600" for idx in range(image_count)]
        captions = [self.rng.choice(DUMMY_CAPTIONS) for _ in images]

        blocks = [
            {
                "id": f"block_text_{uuid.uuid4().hex[:8]}",
                "type": BlockType.TEXT.value,
                "content": template["content"],
            },
            {
                "id": f"block_gallery_{uuid.uuid4().hex[:8]}",
                "type": BlockType.IMAGE_GALLERY.value,
                "content": "",
                "images": images,
                "imageCaptions": captions,
            },
        ]

        created_at = now - DUMMY_REPORT_WINDOW * self.rng.random()
        return Report(
            report_id=report_id,
            author_id=user.id,
            author_name=user.name,
            department=user.department,
            team_id=user.team_id,
            title=f"{template['title_prefix']} (No. {seq})",
            content={"blocks": blocks},
            created_at=created_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            status="submitted",
            is_dummy=True,
        )

    async def create_dummy_reports(
        self,
        users: Sequence[User],
        count_per_user: int,
        on_progress: Optional[ProgressCallback] = None
    ) -> List[str]:
        """
        Create ``count_per_user`` dummy reports for each user.

        Returns:
            Ids of the reports actually created
        """
        notify = on_progress or (lambda msg, pct: None)
        total = len(users) * count_per_user
        completed = 0
        created: List[str] = []

        notify(f"Creating {total} reports for {len(users)} users.", 0)

        # Snapshot first: a rollback expires ORM instances
        authors = [AuthorSnapshot.of(u) for u in users]

        for user in authors:
            for seq in range(1, count_per_user + 1):
                report = self.build_dummy_report(user, seq)
                try:
                    self.db.add(report)
                    await self.db.commit()
                except SQLAlchemyError as e:
                    await self.db.rollback()
                    logger.warning(f"[DummyData] Report for {user.id} failed: {e}")
                    notify(f"[ERROR] Could not create a report for {user.name}", _percent(completed, total))
                    continue

                completed += 1
                created.append(report.report_id)
                notify(
                    f'[PROGRESS] {user.name} - "{report.title}" ({completed}/{total})',
                    _percent(completed, total)
                )

        logger.info(f"[DummyData] Created {len(created)}/{total} dummy reports")
        return created

    async def delete_all_dummy_users(self, on_progress: Optional[ProgressCallback] = None) -> int:
        """Delete every user flagged as dummy (or carrying a dum_ id)"""
        notify = on_progress or (lambda msg, pct: None)
        notify("Scanning users...", 0)

        result = await self.db.execute(
            select(User).where((User.is_dummy.is_(True)) | (User.id.like("dum\\_%", escape="\\")))
        )
        users = list(result.scalars().all())
        if not users:
            notify("No dummy users to delete.", 100)
            return 0

        notify(f"Deleting {len(users)} dummy users.", 5)
        deleted = 0
        for user, email in [(u, u.email) for u in users]:
            try:
                await self.db.delete(user)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.warning(f"[DummyData] Could not delete user {email}: {e}")
                notify(f"[DELETE FAILED] {email}", _percent(deleted, len(users)))
                continue
            deleted += 1
            notify(f"[DELETED] {email}", _percent(deleted, len(users)))

        logger.info(f"[DummyData] Deleted {deleted} dummy users")
        return deleted

    async def delete_all_dummy_reports(self, on_progress: Optional[ProgressCallback] = None) -> int:
        """Delete every report flagged as dummy (or carrying a rep_dum_ id)"""
        notify = on_progress or (lambda msg, pct: None)
        notify("Scanning reports...", 0)

        result = await self.db.execute(
            select(Report).where(
                (Report.is_dummy.is_(True)) | (Report.report_id.like("rep\\_dum\\_%", escape="\\"))
            )
        )
        reports = list(result.scalars().all())
        if not reports:
            notify("No dummy reports to delete.", 100)
            return 0

        notify(f"Deleting {len(reports)} dummy reports.", 5)
        deleted = 0
        for report, title, report_id in [(r, r.title, r.report_id) for r in reports]:
            try:
                await self.db.delete(report)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.warning(f"[DummyData] Could not delete report {report_id}: {e}")
                notify(f"[DELETE FAILED] {title}", _percent(deleted, len(reports)))
                continue
            deleted += 1
            notify(f"[DELETED] {title}", _percent(deleted, len(reports)))

        logger.info(f"[DummyData] Deleted {deleted} dummy reports")
        return deleted
