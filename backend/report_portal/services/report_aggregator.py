"""
Report Aggregator
=================

Merges several submitted reports into one block sequence that can be edited,
saved as a new report, or exported.

For each report the output holds:
1. an ``info_header`` provenance block (writer / team / date as JSON)
2. a numbered, centered level-2 title heading
3. the report's own ``text`` and ``image_gallery`` blocks (fresh ids)
4. a dashed-rule spacer, except after the last report

Nested ``info_header`` blocks from previously aggregated reports are dropped,
so re-aggregating an aggregate never duplicates provenance.
"""
from datetime import datetime
from html import escape
from typing import List, Optional, Sequence
import json

from report_portal.core.logging_config import logger
from report_portal.core.types import short_uid
from report_portal.schemas.report import BlockType, ReportBlock, ReportRecord

CARRIED_BLOCK_TYPES = {BlockType.TEXT.value, BlockType.IMAGE_GALLERY.value}

SPACER_HTML = (
    '<p><br></p>'
    '<hr style="border: none; border-top: 1px dashed #cbd5e1; opacity: 0.3; margin: 40px 0;"/>'
    '<p><br></p>'
)


def format_report_date(created_at: Optional[str]) -> str:
    """
    Human-readable ``YYYY-MM-DD HH:MM`` for a createdAt value.

    Never raises: an empty value gives "Invalid Date" and an unparseable one is
    returned unchanged. The time is shown in the timestamp's own offset.
    """
    if not created_at:
        return "Invalid Date"

    raw = created_at.strip()
    candidate = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        logger.debug(f"[Aggregator] Unparseable createdAt '{raw}', using raw value")
        return raw
    return parsed.strftime("%Y-%m-%d %H:%M")


class ReportAggregator:
    """Pure transformation from reports to an aggregated block sequence"""

    def reports_to_blocks(self, reports: Sequence[ReportRecord]) -> List[ReportBlock]:
        """
        Build the aggregated block sequence in the given report order.

        Inputs are never mutated; every emitted block gets a new id.
        """
        blocks: List[ReportBlock] = []
        last_index = len(reports) - 1

        for index, report in enumerate(reports):
            blocks.append(self._info_header_block(report))
            blocks.append(self._title_block(report, index))

            for block in report.content.blocks:
                if block.type not in CARRIED_BLOCK_TYPES:
                    continue
                blocks.append(block.model_copy(
                    update={"id": f"aggregated-{report.report_id}-{block.id}-{short_uid()}"},
                    deep=True
                ))

            if index < last_index:
                blocks.append(ReportBlock(
                    id=f"spacer-{report.report_id}-{index}-{short_uid()}",
                    type=BlockType.TEXT.value,
                    content=SPACER_HTML
                ))

        logger.debug(f"[Aggregator] {len(reports)} reports -> {len(blocks)} blocks")
        return blocks

    def reports_to_html(self, reports: Sequence[ReportRecord], generated_on: Optional[datetime] = None) -> str:
        """Single-HTML rendition of the aggregate (text blocks only)"""
        if not reports:
            return ""

        date_str = (generated_on or datetime.now()).strftime("%Y-%m-%d")
        parts = [f'<h1 class="ql-as-heading-1">Report Aggregation ({date_str})</h1><hr>']
        last_index = len(reports) - 1

        for index, report in enumerate(reports):
            parts.append(
                f'<p class="ql-align-center"><strong>{escape(report.author_name)}</strong> | '
                f'{escape(report.team_id)} | {escape(format_report_date(report.created_at))}</p>'
            )
            parts.append(f'<h2 class="ql-as-heading-2">{index + 1}. {escape(report.title)}</h2>')
            for block in report.content.blocks:
                if block.type == BlockType.TEXT.value:
                    parts.append(block.content)
            if index < last_index:
                parts.append("<hr>")

        return "".join(parts)

    @staticmethod
    def _info_header_block(report: ReportRecord) -> ReportBlock:
        content = json.dumps({
            "writer": report.author_name,
            "team": report.team_id,
            "date": format_report_date(report.created_at),
        }, ensure_ascii=False)
        return ReportBlock(
            id=f"info-header-{report.report_id}-{short_uid()}",
            type=BlockType.INFO_HEADER.value,
            content=content
        )

    @staticmethod
    def _title_block(report: ReportRecord, index: int) -> ReportBlock:
        heading = (
            f'<h2 class="ql-as-heading-2 ql-align-center">'
            f'{index + 1}. {escape(report.title)}</h2>'
        )
        return ReportBlock(
            id=f"title-header-{report.report_id}-{short_uid()}",
            type=BlockType.TEXT.value,
            content=heading
        )


# Singleton instance
report_aggregator = ReportAggregator()
