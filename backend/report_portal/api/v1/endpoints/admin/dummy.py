"""
Admin endpoints for seeding and clearing test data.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from report_portal.core.database import get_db
from report_portal.core.exceptions import ValidationError
from report_portal.core.organization import is_valid_team
from report_portal.models.user import User
from report_portal.modules.auth.dependencies import get_current_admin
from report_portal.schemas.user import DummyReportsRequest, DummyResult, DummyUsersRequest
from report_portal.services.dummy_service import DummyDataService

router = APIRouter()


@router.post("/users", response_model=DummyResult)
async def create_dummy_users(
    request: DummyUsersRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    if not is_valid_team(request.department, request.team_id):
        raise ValidationError(f"'{request.team_id}' is not a team of '{request.department}'", field="team_id")

    log = []
    created = await DummyDataService(db).create_dummy_users(
        request.department, request.team_id, request.level, request.count,
        on_progress=lambda msg, pct: log.append(msg)
    )
    return DummyResult(created=created, log=log)


@router.post("/reports", response_model=DummyResult)
async def create_dummy_reports(
    request: DummyReportsRequest,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    result = await db.execute(select(User).where(User.id.in_(request.user_ids)))
    users = list(result.scalars().all())
    if not users:
        raise ValidationError("None of the selected users exist.", field="user_ids")

    log = []
    created = await DummyDataService(db).create_dummy_reports(
        users, request.count_per_user,
        on_progress=lambda msg, pct: log.append(msg)
    )
    return DummyResult(created=created, log=log)


@router.delete("/users", response_model=DummyResult)
async def delete_dummy_users(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    log = []
    deleted = await DummyDataService(db).delete_all_dummy_users(on_progress=lambda msg, pct: log.append(msg))
    return DummyResult(deleted=deleted, log=log)


@router.delete("/reports", response_model=DummyResult)
async def delete_dummy_reports(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    log = []
    deleted = await DummyDataService(db).delete_all_dummy_reports(on_progress=lambda msg, pct: log.append(msg))
    return DummyResult(deleted=deleted, log=log)
