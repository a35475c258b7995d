"""
Aggregation endpoints for leaders and reporters: pick reports, merge them
into one block sequence, then save or export the result.
"""
from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Literal, Optional

from report_portal.api.v1.endpoints.reports import (
    DOCX_MEDIA_TYPE,
    PPTX_MEDIA_TYPE,
    file_response,
)
from report_portal.core.config import settings
from report_portal.core.database import get_db
from report_portal.core.logging_config import logger
from report_portal.models.user import User
from report_portal.modules.auth.dependencies import get_current_manager
from report_portal.modules.export import ppt_exporter, word_exporter
from report_portal.schemas.export import (
    AggregatedBlocksResponse,
    AggregationExportRequest,
    AggregationRequest,
    AggregationSaveRequest,
)
from report_portal.schemas.report import BlockType, ReportBlock, ReportContent, ReportListResponse, ReportRecord, ReportSave
from report_portal.services.report_aggregator import report_aggregator
from report_portal.services.report_service import ReportService, to_record
from report_portal.utils.filenames import docx_filename, pptx_filename
from report_portal.utils.pagination import paginate_items, resolve_jump_page
from report_portal.utils.report_filters import SortKey, filter_reports, sort_reports

router = APIRouter(prefix="/aggregation", tags=["Aggregation"])


async def aggregate_blocks(db: AsyncSession, request: AggregationRequest) -> List[ReportBlock]:
    """Load the requested reports (caller order, or sorted) and merge them"""
    reports = await ReportService(db).get_reports_by_ids(request.report_ids)
    records = [to_record(r) for r in reports]
    if request.sort_by:
        records = sort_reports(records, request.sort_by)
    return report_aggregator.reports_to_blocks(records)


@router.get("/reports", response_model=ReportListResponse)
async def list_candidate_reports(
    department: Optional[str] = None,
    team_id: Optional[str] = None,
    date: Optional[str] = Query(None, description="createdAt prefix, e.g. 2025-01-14"),
    title: Optional[str] = None,
    sort_by: SortKey = SortKey.DATE,
    descending: Optional[bool] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    jump_to: Optional[str] = Query(None, description="Page number typed by the user"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_manager)
):
    """Reports available for aggregation (the caller's own reports excluded)"""
    reports = await ReportService(db).get_reports()
    filtered = filter_reports(
        [to_record(r) for r in reports],
        title_query=title,
        date_prefix=date,
        department=department,
        team_id=team_id,
        exclude_author_id=current_user.id
    )
    ordered = sort_reports(filtered, sort_by, descending)

    if jump_to is not None:
        total_pages = paginate_items(ordered, 1, page_size)["total_pages"]
        page = resolve_jump_page(jump_to, page, total_pages)

    return paginate_items(ordered, page, page_size)


@router.post("/blocks", response_model=AggregatedBlocksResponse)
async def build_aggregated_blocks(
    request: AggregationRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_manager)
):
    blocks = await aggregate_blocks(db, request)
    report_count = sum(1 for b in blocks if b.type == BlockType.INFO_HEADER.value)
    logger.info(f"[Aggregation] {current_user.id} merged {report_count} reports into {len(blocks)} blocks")
    return AggregatedBlocksResponse(blocks=blocks, report_count=report_count)


@router.post("/save", response_model=ReportRecord)
async def save_aggregated_report(
    request: AggregationSaveRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_manager)
):
    """Persist the merged sequence as a new report authored by the caller"""
    blocks = await aggregate_blocks(db, request)
    payload = ReportSave(title=request.title, content=ReportContent(blocks=blocks))
    report = await ReportService(db).save_report(payload, current_user)
    return to_record(report)


@router.post("/export/{file_format}")
async def export_aggregated_report(
    file_format: Literal["docx", "pptx"],
    request: AggregationExportRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_manager)
):
    blocks = await aggregate_blocks(db, request)
    title = request.title.strip() or f"Aggregated Report ({datetime.now().strftime('%Y-%m-%d')})"

    if file_format == "docx":
        data = await word_exporter.export(title, current_user.name, blocks=blocks)
        return file_response(data, docx_filename(request.file_name, title), DOCX_MEDIA_TYPE)

    data = await ppt_exporter.export(title, current_user.name, blocks)
    return file_response(data, pptx_filename(title), PPTX_MEDIA_TYPE)
