"""
Report Service - storage access for submitted reports

Handles:
- Report queries (all / by author / by team / by id list)
- Upsert with author-only editing and immutable createdAt
- Deletion by the author or an administrator
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime
from typing import List, Sequence

from report_portal.core.exceptions import AuthorizationError, ReportNotFoundError, ValidationError
from report_portal.core.logging_config import logger
from report_portal.core.types import utc_now_iso
from report_portal.models.report import Report
from report_portal.models.user import User
from report_portal.schemas.report import ReportRecord, ReportSave


def to_record(report: Report) -> ReportRecord:
    """ORM row -> wire/aggregation schema"""
    return ReportRecord.model_validate(report)


class ReportService:
    """Report collaborator backed by SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_reports(self) -> List[Report]:
        """All reports, newest first"""
        result = await self.db.execute(select(Report).order_by(Report.created_at.desc()))
        return list(result.scalars().all())

    async def get_reports_by_user(self, user_id: str) -> List[Report]:
        result = await self.db.execute(
            select(Report)
            .where(Report.author_id == user_id)
            .order_by(Report.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_reports_by_team(self, team_id: str) -> List[Report]:
        result = await self.db.execute(
            select(Report)
            .where(Report.team_id == team_id)
            .order_by(Report.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_report(self, report_id: str) -> Report:
        """Get a report or raise ReportNotFoundError"""
        report = await self.db.get(Report, report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    async def get_reports_by_ids(self, report_ids: Sequence[str]) -> List[Report]:
        """
        Fetch reports keeping the caller's order.

        Unknown ids are skipped; duplicates are returned once.
        """
        if not report_ids:
            return []
        result = await self.db.execute(select(Report).where(Report.report_id.in_(list(report_ids))))
        by_id = {r.report_id: r for r in result.scalars().all()}

        ordered = []
        seen = set()
        for report_id in report_ids:
            if report_id in by_id and report_id not in seen:
                ordered.append(by_id[report_id])
                seen.add(report_id)

        missing = len(set(report_ids)) - len(ordered)
        if missing:
            logger.warning(f"[ReportService] {missing} requested report(s) not found, skipped")
        return ordered

    async def save_report(self, payload: ReportSave, actor: User) -> Report:
        """
        Create or update a report.

        A new report snapshots the actor as author. An existing report may only
        be edited by its author and keeps its author snapshot and createdAt.
        """
        if not payload.title or not payload.title.strip():
            raise ValidationError("Enter a title.", field="title")
        if not payload.content.blocks:
            raise ValidationError("Write some content before saving.", field="content")

        content = payload.content.model_dump(by_alias=True, exclude_none=True)

        existing = None
        if payload.report_id:
            existing = await self.db.get(Report, payload.report_id)

        if existing is not None:
            if existing.author_id != actor.id:
                raise AuthorizationError("Only the author can edit this report")
            existing.title = payload.title.strip()
            existing.content = content
            existing.status = payload.status
            existing.updated_at = datetime.utcnow()
            await self.db.commit()
            await self.db.refresh(existing)
            logger.info(f"[ReportService] Updated report {existing.report_id}")
            return existing

        report_kwargs = {}
        if payload.report_id:
            report_kwargs["report_id"] = payload.report_id

        report = Report(
            author_id=actor.id,
            author_name=actor.name,
            department=actor.department,
            team_id=actor.team_id,
            title=payload.title.strip(),
            content=content,
            created_at=payload.created_at or utc_now_iso(),
            status=payload.status,
            **report_kwargs
        )
        self.db.add(report)
        await self.db.commit()
        await self.db.refresh(report)

        logger.info(f"[ReportService] Created report {report.report_id} by {actor.name}")
        return report

    async def delete_report(self, report_id: str, actor: User) -> None:
        """Delete a report (author or admin only)"""
        report = await self.get_report(report_id)
        if report.author_id != actor.id and not actor.is_admin:
            raise AuthorizationError("Only the author or an administrator can delete this report")

        await self.db.delete(report)
        await self.db.commit()
        logger.info(f"[ReportService] Deleted report {report_id} (by {actor.id})")
