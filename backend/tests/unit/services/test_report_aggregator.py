"""
Unit Tests for ReportAggregator

Covers block layout per report, id freshness, spacer placement and the
re-aggregation / caption edge cases.
"""
import json
import pytest

from report_portal.schemas.report import ReportBlock, ReportRecord, ReportContent
from report_portal.services.report_aggregator import (
    ReportAggregator,
    format_report_date,
    report_aggregator,
)
from report_portal.utils.report_filters import SortKey, sort_reports


def make_record(report_id, author, team, title="Weekly", blocks=None, created_at="2025-01-14T09:30:00.000Z"):
    if blocks is None:
        blocks = [
            ReportBlock(id=f"{report_id}-t", type="text", content="<p>Body</p>"),
            ReportBlock(id=f"{report_id}-g", type="image_gallery", images=["https://img.test/ok.png"],
                        image_captions=["Site"]),
        ]
    return ReportRecord(
        report_id=report_id,
        author_id=f"uid-{author}",
        author_name=author,
        department="Marketing",
        team_id=team,
        title=title,
        content=ReportContent(blocks=blocks),
        created_at=created_at,
    )


def is_spacer(block):
    return block.type == "text" and "<hr" in block.content and "ql-as-heading" not in block.content


class TestReportsToBlocks:
    """Test block sequence layout"""

    def test_empty_input_gives_empty_output(self):
        """Test no reports produce no blocks"""
        assert report_aggregator.reports_to_blocks([]) == []

    def test_single_report_layout(self):
        """Test header, title, carried blocks and no trailing spacer"""
        blocks = report_aggregator.reports_to_blocks([make_record("r1", "Kim", "T1", title="Plan")])

        assert [b.type for b in blocks] == ["info_header", "text", "text", "image_gallery"]
        assert "1. Plan" in blocks[1].content
        assert 'class="ql-as-heading-2 ql-align-center"' in blocks[1].content
        assert not any(is_spacer(b) for b in blocks)

    def test_info_header_content(self):
        """Test provenance header JSON"""
        blocks = report_aggregator.reports_to_blocks([make_record("r1", "Kim", "T1")])
        header = json.loads(blocks[0].content)

        assert header == {"writer": "Kim", "team": "T1", "date": "2025-01-14 09:30"}

    def test_output_length_at_least_report_count(self):
        """Test every report contributes blocks"""
        reports = [make_record(f"r{i}", "Kim", "T1", blocks=[]) for i in range(4)]
        blocks = report_aggregator.reports_to_blocks(reports)

        assert len(blocks) >= len(reports)

    def test_ids_unique_and_fresh(self):
        """Test output ids are unique and never reuse a source id"""
        reports = [make_record(f"r{i}", "Kim", "T1") for i in range(3)]
        source_ids = {b.id for r in reports for b in r.content.blocks}

        blocks = report_aggregator.reports_to_blocks(reports)
        output_ids = [b.id for b in blocks]

        assert len(output_ids) == len(set(output_ids))
        assert not source_ids & set(output_ids)

    def test_spacers_between_reports_only(self):
        """Test exactly one spacer between consecutive reports and none after the last"""
        reports = [make_record(f"r{i}", "Kim", "T1") for i in range(3)]
        blocks = report_aggregator.reports_to_blocks(reports)

        spacer_positions = [i for i, b in enumerate(blocks) if is_spacer(b)]
        assert len(spacer_positions) == 2
        assert not is_spacer(blocks[-1])
        for pos in spacer_positions:
            assert blocks[pos + 1].type == "info_header"

    def test_nested_info_headers_dropped(self):
        """Test re-aggregating an aggregate keeps one header per top-level report"""
        first = report_aggregator.reports_to_blocks([make_record("a", "Kim", "T1"), make_record("b", "Lee", "T2")])
        synthetic = make_record("agg", "Park", "T1", blocks=first)

        blocks = report_aggregator.reports_to_blocks([synthetic, make_record("c", "Choi", "T3")])

        assert sum(1 for b in blocks if b.type == "info_header") == 2

    def test_unknown_block_types_dropped(self):
        """Test only text and image_gallery blocks are carried"""
        record = make_record("r1", "Kim", "T1", blocks=[
            ReportBlock(id="x", type="video", content="<video></video>"),
            ReportBlock(id="y", type="text", content="<p>kept</p>"),
        ])
        blocks = report_aggregator.reports_to_blocks([record])

        assert [b.content for b in blocks[2:]] == ["<p>kept</p>"]

    def test_title_is_escaped(self):
        """Test titles cannot inject markup"""
        blocks = report_aggregator.reports_to_blocks([make_record("r1", "Kim", "T1", title="<b>R&D</b>")])

        assert "1. &lt;b&gt;R&amp;D&lt;/b&gt;" in blocks[1].content

    def test_inputs_not_mutated(self):
        """Test source blocks keep their ids and captions"""
        record = make_record("r1", "Kim", "T1")
        before = record.model_dump()

        blocks = report_aggregator.reports_to_blocks([record])
        blocks[3].image_captions.append("changed")

        assert record.model_dump() == before

    def test_captions_shorter_than_images(self):
        """Test a gallery with fewer captions than images is carried intact"""
        gallery = ReportBlock(id="g", type="image_gallery", images=["a", "b", "c"], image_captions=["only"])
        blocks = report_aggregator.reports_to_blocks([make_record("r1", "Kim", "T1", blocks=[gallery])])

        carried = blocks[2]
        assert carried.caption_at(0) == "only"
        assert carried.caption_at(2) == ""
        assert carried.caption_at(99) == ""


class TestRoundTripScenario:
    """Kim / Lee / Park sorted by team then name"""

    def test_team_then_name_order(self):
        """Test headers follow team-then-name order with numbered titles and two spacers"""
        reports = [
            make_record("r-kim", "Kim", "T1", title="Kim report"),
            make_record("r-lee", "Lee", "T2", title="Lee report"),
            make_record("r-park", "Park", "T1", title="Park report"),
        ]
        ordered = sort_reports(reports, SortKey.TEAM)
        blocks = ReportAggregator().reports_to_blocks(ordered)

        headers = [(i, json.loads(b.content)) for i, b in enumerate(blocks) if b.type == "info_header"]
        assert [h["writer"] for _, h in headers] == ["Kim", "Park", "Lee"]

        for number, (index, _) in enumerate(headers, start=1):
            assert f"{number}. " in blocks[index + 1].content

        assert sum(1 for b in blocks if is_spacer(b)) == 2


class TestFormatReportDate:
    """Test human-readable createdAt"""

    def test_iso_with_z(self):
        assert format_report_date("2025-01-14T09:30:00.000Z") == "2025-01-14 09:30"

    def test_iso_with_offset(self):
        assert format_report_date("2025-01-14T18:05:00+09:00") == "2025-01-14 18:05"

    def test_unparseable_returns_raw(self):
        assert format_report_date("last tuesday") == "last tuesday"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_is_invalid_date(self, value):
        assert format_report_date(value) == "Invalid Date"


class TestReportsToHtml:
    """Test single-HTML rendition"""

    def test_empty(self):
        assert report_aggregator.reports_to_html([]) == ""

    def test_contains_banner_titles_and_rules(self):
        """Test banner, numbered titles and a rule between reports"""
        reports = [make_record("a", "Kim", "T1", title="First"), make_record("b", "Lee", "T2", title="Second")]
        html = report_aggregator.reports_to_html(reports)

        assert "<strong>Kim</strong> | T1" in html
        assert "1. First" in html and "2. Second" in html
        assert "<p>Body</p>" in html
        assert html.count("<hr>") == 2  # after the page title and between the two reports
