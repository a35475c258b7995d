from pydantic import Field
from typing import Optional, List

from report_portal.schemas.report import CamelModel, ReportBlock
from report_portal.utils.report_filters import SortKey


class ExportRequest(CamelModel):
    """Export an editor's block sequence (or a legacy HTML body) as a document"""
    title: str = ""
    author: str = ""
    blocks: Optional[List[ReportBlock]] = None
    html_content: Optional[str] = None
    file_name: Optional[str] = None


class AggregationRequest(CamelModel):
    """Reports to merge, in caller order unless sort_by is given"""
    report_ids: List[str] = Field(default_factory=list)
    sort_by: Optional[SortKey] = None


class AggregationExportRequest(AggregationRequest):
    title: str = ""
    file_name: Optional[str] = None


class AggregationSaveRequest(AggregationRequest):
    title: str


class AggregatedBlocksResponse(CamelModel):
    blocks: List[ReportBlock]
    report_count: int
