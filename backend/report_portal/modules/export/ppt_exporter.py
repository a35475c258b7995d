"""
REPORT POWERPOINT EXPORTER
==========================
Serializes a report's block sequence into a 16:9 slide deck.

Layout is a fixed-geometry flow: a running vertical cursor (inches) places
content top to bottom and a new slide starts whenever the next item would
cross the usable bottom. Nothing is measured; heights are estimates.

- Title slide: title, "author | date", footer branding
- Text blocks: one or more slides; tables split across slides with the
  header row repeated
- Image galleries: one slide per image, caption underneath
- Provenance headers are not rendered in slides

A broken image is logged and skipped. Anything else aborts the export with
PPTExportError.
"""

from datetime import datetime
from io import BytesIO
from math import ceil
from typing import List, Optional, Sequence, Tuple
import time

from bs4 import NavigableString
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from report_portal.core.config import settings
from report_portal.core.exceptions import PPTExportError
from report_portal.core.logging_config import logger
from report_portal.modules.export.html_fragments import (
    alignment,
    element_text,
    heading_level,
    normalize_text,
    parse_fragment,
    table_rows,
    top_level_nodes,
)
from report_portal.modules.export.images import ImageLoader, LoadedImage
from report_portal.modules.export.validation import validate_export_input
from report_portal.schemas.report import BlockType, ReportBlock

# Slide geometry (inches)
SLIDE_WIDTH = 10.0
SLIDE_HEIGHT = 5.625
MARGIN = 0.5
CONTENT_WIDTH = SLIDE_WIDTH - MARGIN * 2
USABLE_BOTTOM = SLIDE_HEIGHT - 1.0

TEXT_LINE_HEIGHT = 0.4
TABLE_ROW_HEIGHT = 0.35
TABLE_GAP = 0.3
IMAGE_MAX_HEIGHT = SLIDE_HEIGHT - 1.8
IMAGE_DEFAULT_SIZE = (4.0, 3.0)
CAPTION_RESERVE = 0.5

HEADING_FONT_SIZES = {1: 24, 2: 20, 3: 18}
BODY_FONT_SIZE = 14

BLANK_LAYOUT = 6

ALIGNMENT_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
}


def scaled_image_size(image: LoadedImage) -> Tuple[float, float]:
    """
    Fit the content width at the image's aspect ratio, capped at
    IMAGE_MAX_HEIGHT; 4 x 3 in when the pixel size is unknown.
    """
    if not image.has_size:
        return IMAGE_DEFAULT_SIZE
    ratio = image.aspect_ratio or 1
    width = CONTENT_WIDTH
    height = width / ratio
    if height > IMAGE_MAX_HEIGHT:
        height = IMAGE_MAX_HEIGHT
        width = height * ratio
    return width, height


def estimate_text_height(text: str, font_size: int) -> float:
    """Rough wrapped height of ``text`` across the content width"""
    char_width = font_size / 72 * 0.55
    chars_per_line = max(1, int(CONTENT_WIDTH / char_width))
    lines = sum(max(1, ceil(len(line) / chars_per_line)) for line in text.split("\n"))
    minimum = font_size / 72 * 2 + 0.2
    return max(minimum, lines * font_size / 72 * 1.2 + 0.2)


class _Deck:
    """Per-export presentation state: the current slide and the y cursor"""

    # Color scheme
    TITLE_BG = RGBColor(0xF8, 0xFA, 0xFC)
    HEADING_COLOR = RGBColor(0x1E, 0x29, 0x3B)
    BODY_COLOR = RGBColor(0x33, 0x33, 0x33)
    MUTED_COLOR = RGBColor(0x64, 0x74, 0x8B)
    FOOTER_COLOR = RGBColor(0x94, 0xA3, 0xB8)
    TABLE_HEADER_FILL = RGBColor(0xF3, 0xF4, 0xF6)
    WHITE = RGBColor(0xFF, 0xFF, 0xFF)
    TABLE_BORDER_HEX = "E2E8F0"

    def __init__(self, title: str, author: str):
        self.prs = Presentation()
        self.prs.slide_width = Inches(SLIDE_WIDTH)
        self.prs.slide_height = Inches(SLIDE_HEIGHT)
        self.prs.core_properties.title = title
        self.prs.core_properties.author = author
        self.slide = None
        self.y = MARGIN

    # ==================== SLIDES ====================

    def _blank_slide(self):
        return self.prs.slides.add_slide(self.prs.slide_layouts[BLANK_LAYOUT])

    def new_content_slide(self):
        self.slide = self._blank_slide()
        self.add_text(
            self.slide, settings.EXPORT_FOOTER_TEXT,
            MARGIN, 5.3, CONTENT_WIDTH, 0.3,
            size=9, color=self.FOOTER_COLOR
        )
        self.y = MARGIN
        return self.slide

    def ensure_room(self, height: float):
        """Start a new slide when ``height`` no longer fits below the cursor"""
        if self.slide is None or self.y + height > USABLE_BOTTOM:
            self.new_content_slide()

    def discard_last_slide(self):
        slide_ids = self.prs.slides._sldIdLst
        last = slide_ids[-1]
        self.prs.part.drop_rel(last.rId)
        slide_ids.remove(last)
        self.slide = None

    def add_title_slide(self, title: str, author: str):
        slide = self._blank_slide()
        slide.background.fill.solid()
        slide.background.fill.fore_color.rgb = self.TITLE_BG

        self.add_text(
            slide, title, 0, SLIDE_HEIGHT * 0.35, SLIDE_WIDTH, 1.0,
            size=44, bold=True, color=self.HEADING_COLOR, align=PP_ALIGN.CENTER
        )
        self.add_text(
            slide, f"{author} | {datetime.now().strftime('%Y-%m-%d')}",
            0, SLIDE_HEIGHT * 0.55, SLIDE_WIDTH, 0.5,
            size=18, color=self.MUTED_COLOR, align=PP_ALIGN.CENTER
        )
        self.add_text(
            slide, settings.EXPORT_FOOTER_TEXT, 0, SLIDE_HEIGHT * 0.9, SLIDE_WIDTH, 0.4,
            size=10, color=self.FOOTER_COLOR, align=PP_ALIGN.CENTER
        )

    # ==================== SHAPES ====================

    def add_text(
        self, slide, text: str, left: float, top: float, width: float, height: float,
        size: int = BODY_FONT_SIZE, bold: bool = False, italic: bool = False,
        color: Optional[RGBColor] = None, align=PP_ALIGN.LEFT, shrink_to_fit: bool = False
    ):
        box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
        tf = box.text_frame
        tf.word_wrap = True
        tf.text = text
        if shrink_to_fit:
            tf.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE
        for paragraph in tf.paragraphs:
            paragraph.alignment = align
            for run in paragraph.runs:
                run.font.size = Pt(size)
                run.font.bold = bold
                run.font.italic = italic
                run.font.name = settings.EXPORT_FONT_FACE
                run.font.color.rgb = color or self.BODY_COLOR
        return box

    def add_table(self, rows: List[List[str]], top: float):
        col_count = max(len(r) for r in rows)
        shape = self.slide.shapes.add_table(
            len(rows), col_count,
            Inches(MARGIN), Inches(top), Inches(CONTENT_WIDTH), Inches(len(rows) * TABLE_ROW_HEIGHT)
        )
        table = shape.table
        for col in table.columns:
            col.width = Inches(CONTENT_WIDTH / col_count)

        for row_idx, values in enumerate(rows):
            is_header = row_idx == 0
            for col_idx in range(col_count):
                cell = table.cell(row_idx, col_idx)
                cell.text = values[col_idx] if col_idx < len(values) else ""
                cell.vertical_anchor = MSO_ANCHOR.MIDDLE
                cell.fill.solid()
                cell.fill.fore_color.rgb = self.TABLE_HEADER_FILL if is_header else self.WHITE
                for paragraph in cell.text_frame.paragraphs:
                    paragraph.alignment = PP_ALIGN.CENTER
                    for run in paragraph.runs:
                        run.font.size = Pt(10)
                        run.font.bold = is_header
                        run.font.name = settings.EXPORT_FONT_FACE
                        run.font.color.rgb = self.BODY_COLOR
                self._set_cell_border(cell, self.TABLE_BORDER_HEX)
        return shape

    @staticmethod
    def _set_cell_border(cell, color_hex: str):
        # a:lnL/R/T/B must precede the cell fill inside a:tcPr
        tc_pr = cell._tc.get_or_add_tcPr()
        for index, edge in enumerate(("a:lnL", "a:lnR", "a:lnT", "a:lnB")):
            line = OxmlElement(edge)
            line.set("w", "12700")
            fill = OxmlElement("a:solidFill")
            color = OxmlElement("a:srgbClr")
            color.set("val", color_hex)
            fill.append(color)
            line.append(fill)
            existing = tc_pr.find(qn(edge))
            if existing is not None:
                tc_pr.remove(existing)
            tc_pr.insert(index, line)

    def to_bytes(self) -> bytes:
        buffer = BytesIO()
        self.prs.save(buffer)
        return buffer.getvalue()


class ReportPPTExporter:
    """
    PowerPoint exporter for reports and aggregated reports

    Stateless between calls: every export builds its own deck.
    """

    def __init__(self, image_loader: Optional[ImageLoader] = None):
        self.image_loader = image_loader or ImageLoader()

    async def export(self, title: str, author: str, blocks: Sequence[ReportBlock]) -> bytes:
        """
        Build the .pptx and return its bytes.

        Raises:
            ExportValidationError: missing title / author / content
            PPTExportError: anything failed while building the deck
        """
        validate_export_input(title, author, blocks)

        started = time.perf_counter()
        logger.log_export_event("pptx", "started", title=title, block_count=len(blocks))

        try:
            deck = _Deck(title.strip(), author.strip())
            deck.add_title_slide(title.strip(), author.strip())

            for block in blocks:
                if block.type == BlockType.INFO_HEADER.value:
                    continue
                if block.type == BlockType.TEXT.value:
                    self._add_text_block(deck, block)
                elif block.type == BlockType.IMAGE_GALLERY.value:
                    await self._add_gallery(deck, block)
                else:
                    logger.debug(f"[PPTExporter] Skipping block {block.id} of unknown type '{block.type}'")

            data = deck.to_bytes()
        except Exception as e:
            logger.error(f"[PPTExporter] Export failed: {e}", exc_info=True)
            raise PPTExportError(str(e) or type(e).__name__) from e

        logger.log_export_event(
            "pptx", "completed",
            size_bytes=len(data),
            slide_count=len(deck.prs.slides),
            duration_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        return data

    # ==================== TEXT ====================

    def _add_text_block(self, deck: _Deck, block: ReportBlock):
        soup = parse_fragment(block.content)
        deck.new_content_slide()

        for node in top_level_nodes(soup):
            if isinstance(node, NavigableString):
                text = normalize_text(str(node)).strip()
                if not text:
                    continue
                deck.ensure_room(TEXT_LINE_HEIGHT)
                deck.add_text(deck.slide, text, MARGIN, deck.y, CONTENT_WIDTH, TEXT_LINE_HEIGHT)
                deck.y += TEXT_LINE_HEIGHT
            elif node.name == "table":
                self._add_table(deck, node)
            else:
                text = element_text(node)
                if not text:
                    continue
                level = heading_level(node)
                font_size = HEADING_FONT_SIZES.get(level, BODY_FONT_SIZE)
                height = estimate_text_height(text, font_size)

                deck.ensure_room(min(height, USABLE_BOTTOM - MARGIN))
                # Taller than a whole slide: clamp the box and let the text shrink to fit
                overflow = deck.y + height > USABLE_BOTTOM
                if overflow:
                    height = USABLE_BOTTOM - deck.y
                deck.add_text(
                    deck.slide, text, MARGIN, deck.y, CONTENT_WIDTH, height,
                    size=font_size,
                    bold=level is not None,
                    color=deck.HEADING_COLOR if level else deck.BODY_COLOR,
                    align=ALIGNMENT_MAP[alignment(node)],
                    shrink_to_fit=overflow
                )
                deck.y += height

    def _add_table(self, deck: _Deck, node):
        rows = [[element_text(cell) for cell in cells] for cells in table_rows(node)]
        if not rows:
            return

        if deck.y > MARGIN and deck.y + len(rows) * TABLE_ROW_HEIGHT > USABLE_BOTTOM:
            deck.new_content_slide()

        header, body = rows[0], rows[1:]
        chunk = rows
        while True:
            capacity = max(2, int((USABLE_BOTTOM - deck.y) / TABLE_ROW_HEIGHT))
            if len(chunk) <= capacity:
                deck.add_table(chunk, deck.y)
                deck.y += len(chunk) * TABLE_ROW_HEIGHT + TABLE_GAP
                return

            deck.add_table(chunk[:capacity], deck.y)
            # Continuation chunks repeat the header row
            consumed = capacity - 1
            body = body[consumed:]
            chunk = [header] + body
            deck.new_content_slide()

    # ==================== IMAGES ====================

    async def _add_gallery(self, deck: _Deck, block: ReportBlock):
        if not block.images:
            return

        loaded = await self.image_loader.load_many(block.images)
        for index, image in enumerate(loaded):
            if image is None:
                continue

            slide = deck.new_content_slide()
            width, height = scaled_image_size(image)
            left = (SLIDE_WIDTH - width) / 2
            top = (SLIDE_HEIGHT - height - CAPTION_RESERVE) / 2
            try:
                slide.shapes.add_picture(image.stream(), Inches(left), Inches(top), Inches(width), Inches(height))
            except (ValueError, KeyError, OSError) as e:
                logger.warning(f"[PPTExporter] Image {index} of block {block.id} could not be placed: {e}")
                deck.discard_last_slide()
                continue

            caption = block.caption_at(index)
            if caption:
                deck.add_text(
                    slide, caption, 0, SLIDE_HEIGHT - 0.8, SLIDE_WIDTH, 0.4,
                    size=12, italic=True, color=deck.MUTED_COLOR, align=PP_ALIGN.CENTER
                )

# Singleton instance
ppt_exporter = ReportPPTExporter()
