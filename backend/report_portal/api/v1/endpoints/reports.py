"""
Report board endpoints: own reports, team reports, save, delete and export.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from report_portal.core.config import settings
from report_portal.core.database import get_db
from report_portal.core.exceptions import AuthorizationError
from report_portal.models.user import User, UserLevel
from report_portal.modules.auth.dependencies import get_current_user
from report_portal.modules.export import ppt_exporter, word_exporter
from report_portal.schemas.export import ExportRequest
from report_portal.schemas.report import ReportListResponse, ReportRecord, ReportSave
from report_portal.services.report_service import ReportService, to_record
from report_portal.utils.filenames import content_disposition, docx_filename, pptx_filename
from report_portal.utils.pagination import paginate_items
from report_portal.utils.report_filters import filter_reports

router = APIRouter(prefix="/reports", tags=["Reports"])

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def file_response(data: bytes, filename: str, media_type: str) -> Response:
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": content_disposition(filename)}
    )


@router.get("", response_model=ReportListResponse)
async def list_my_reports(
    title: Optional[str] = None,
    date: Optional[str] = Query(None, description="createdAt prefix, e.g. 2025-01-14"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.REPORT_BOARD_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current user's reports, newest first"""
    reports = await ReportService(db).get_reports_by_user(current_user.id)
    filtered = filter_reports(reports, title_query=title, date_prefix=date)
    return paginate_items([to_record(r) for r in filtered], page, page_size)


@router.get("/team/{team_id}", response_model=ReportListResponse)
async def list_team_reports(
    team_id: str,
    title: Optional[str] = None,
    date: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.REPORT_BOARD_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Reports of one team (own team, or any team for leaders and above)"""
    if team_id != current_user.team_id and current_user.level < UserLevel.LEADER.value:
        raise AuthorizationError("You can only view your own team's reports")

    reports = await ReportService(db).get_reports_by_team(team_id)
    filtered = filter_reports(reports, title_query=title, date_prefix=date)
    return paginate_items([to_record(r) for r in filtered], page, page_size)


@router.get("/{report_id}", response_model=ReportRecord)
async def get_report(
    report_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    report = await ReportService(db).get_report(report_id)
    return to_record(report)


@router.put("", response_model=ReportRecord)
async def save_report(
    payload: ReportSave,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a report, or edit one of your own"""
    report = await ReportService(db).save_report(payload, current_user)
    return to_record(report)


@router.delete("/{report_id}")
async def delete_report(
    report_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await ReportService(db).delete_report(report_id, current_user)
    return {"success": True, "report_id": report_id}


@router.post("/export/docx")
async def export_docx(
    request: ExportRequest,
    current_user: User = Depends(get_current_user)
):
    """Download the given blocks (or HTML) as a Word document"""
    data = await word_exporter.export(
        request.title, request.author, blocks=request.blocks, html_content=request.html_content
    )
    return file_response(data, docx_filename(request.file_name, request.title), DOCX_MEDIA_TYPE)


@router.post("/export/pptx")
async def export_pptx(
    request: ExportRequest,
    current_user: User = Depends(get_current_user)
):
    """Download the given blocks as a slide deck"""
    data = await ppt_exporter.export(request.title, request.author, request.blocks or [])
    return file_response(data, pptx_filename(request.title), PPTX_MEDIA_TYPE)
