"""Checks shared by every export format, run before any document work starts"""
from typing import Optional, Sequence

from report_portal.core.exceptions import ExportValidationError
from report_portal.schemas.report import ReportBlock


def validate_export_input(
    title: Optional[str],
    author: Optional[str],
    blocks: Optional[Sequence[ReportBlock]] = None,
    html_content: Optional[str] = None
) -> None:
    if not title or not title.strip():
        raise ExportValidationError("Enter a title first.", field="title")
    if not author or not author.strip():
        raise ExportValidationError("Author information is missing.", field="author")
    if not blocks and not (html_content and html_content.strip()):
        raise ExportValidationError("There is no content to export.", field="blocks")
