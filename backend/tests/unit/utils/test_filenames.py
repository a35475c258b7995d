"""
Unit Tests for export file names
"""
from datetime import datetime

from report_portal.utils.filenames import content_disposition, docx_filename, pptx_filename


class TestDocxFilename:

    def test_uses_file_name_over_title(self):
        assert docx_filename("summary", "Weekly") == "summary.docx"

    def test_falls_back_to_title(self):
        assert docx_filename(None, "Weekly") == "Weekly.docx"

    def test_forbidden_characters_removed(self):
        assert docx_filename('a<b>:c"d/e\\f|g?h*.docx', "") == "abcdefgh.docx"

    def test_empty_becomes_report(self):
        assert docx_filename("???", "") == "report.docx"


class TestPptxFilename:

    def test_date_suffix_and_replacement(self):
        today = datetime(2025, 1, 14)

        assert pptx_filename("Q1/Q2 plan", today) == "Q1_Q2 plan_2025-01-14.pptx"


class TestContentDisposition:

    def test_ascii(self):
        assert content_disposition("weekly.docx") == (
            "attachment; filename=\"weekly.docx\"; filename*=UTF-8''weekly.docx"
        )

    def test_non_ascii_encoded(self):
        header = content_disposition("주간보고.docx")

        assert 'filename="____.docx"' in header
        assert "filename*=UTF-8''%EC%A3%BC" in header


class TestControlCharacters:
    """Test control characters never reach the response header"""

    def test_disposition_strips_newlines(self):
        header = content_disposition("Weekly\nreport\r\t.docx")

        assert 'filename="Weeklyreport.docx"' in header
        assert not any(ord(c) < 0x20 or ord(c) == 0x7F for c in header)

    def test_docx_name_drops_control_characters(self):
        assert docx_filename(None, "Weekly\nreport\x7f") == "Weeklyreport.docx"

    def test_pptx_name_replaces_control_characters(self):
        assert pptx_filename("Q1\nplan", datetime(2025, 1, 14)) == "Q1_plan_2025-01-14.pptx"
