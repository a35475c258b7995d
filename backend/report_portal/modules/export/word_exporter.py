"""
REPORT WORD EXPORTER
====================
Serializes a report's block sequence into a .docx flow document.

Features:
- Provenance banners for aggregated reports (info_header blocks)
- Rich-text HTML: headings, alignment, inline styles, lists, rules
- Bordered tables with a shaded header row
- Image galleries with captions (images fetched concurrently)

A broken image, or a malformed provenance header, is logged and skipped.
Anything else aborts the export with DocxExportError; no partial file is
ever produced.
"""

from io import BytesIO
from typing import Dict, List, Optional, Sequence
import time

from bs4 import Comment, NavigableString, Tag
from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, RGBColor
from pydantic import ValidationError as PydanticValidationError

from report_portal.core.config import settings
from report_portal.core.exceptions import DocxExportError
from report_portal.core.logging_config import logger
from report_portal.modules.export.html_fragments import (
    alignment,
    heading_level,
    inherited_style,
    normalize_text,
    parse_fragment,
    table_rows,
    top_level_nodes,
)
from report_portal.modules.export.images import ImageLoader, LoadedImage
from report_portal.modules.export.validation import validate_export_input
from report_portal.schemas.report import BlockType, InfoHeader, ReportBlock

EMU_PER_PX = 9525

INLINE_IMAGE_SIZE = (400, 300)  # px
GALLERY_IMAGE_SIZE = (450, 338)  # px

ALIGNMENT_MAP = {
    "left": WD_ALIGN_PARAGRAPH.LEFT,
    "center": WD_ALIGN_PARAGRAPH.CENTER,
    "right": WD_ALIGN_PARAGRAPH.RIGHT,
    "justify": WD_ALIGN_PARAGRAPH.JUSTIFY,
}


def px(value: int) -> Emu:
    return Emu(value * EMU_PER_PX)


class ReportWordExporter:
    """
    Word exporter for reports and aggregated reports

    Stateless between calls: every export builds its own Document.
    """

    # Color scheme
    LABEL_COLOR = RGBColor(0x4F, 0x46, 0xE5)  # Indigo
    VALUE_COLOR = RGBColor(0x1E, 0x29, 0x3B)  # Slate 800
    MUTED_COLOR = RGBColor(0x64, 0x74, 0x8B)  # Slate 500
    DIVIDER_COLOR = RGBColor(0xE2, 0xE8, 0xF0)  # Slate 200

    TABLE_BORDER_HEX = "E5E7EB"
    TABLE_HEADER_FILL_HEX = "F3F4F6"
    RULE_HEX = "CBD5E1"

    GALLERY_LABEL = "[Image Gallery]"

    def __init__(self, image_loader: Optional[ImageLoader] = None):
        self.image_loader = image_loader or ImageLoader()

    async def export(
        self,
        title: str,
        author: str,
        blocks: Optional[Sequence[ReportBlock]] = None,
        html_content: Optional[str] = None
    ) -> bytes:
        """
        Build the .docx and return its bytes.

        Args:
            title: Document title (required)
            author: Author name (required)
            blocks: Block sequence; takes precedence over html_content
            html_content: Legacy single-HTML body

        Raises:
            ExportValidationError: missing title / author / content
            DocxExportError: anything failed while building the document
        """
        validate_export_input(title, author, blocks, html_content)

        started = time.perf_counter()
        logger.log_export_event("docx", "started", title=title, block_count=len(blocks or []))

        try:
            document = Document()
            self._setup_document(document, title, author)

            heading = document.add_paragraph(title.strip(), style="Title")
            heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

            if blocks:
                for block in blocks:
                    await self._add_block(document, block)
            else:
                await self._add_html(document, html_content)

            buffer = BytesIO()
            document.save(buffer)
        except Exception as e:
            logger.error(f"[WordExporter] Export failed: {e}", exc_info=True)
            raise DocxExportError(str(e) or type(e).__name__) from e

        data = buffer.getvalue()
        logger.log_export_event(
            "docx", "completed",
            size_bytes=len(data),
            duration_ms=round((time.perf_counter() - started) * 1000, 2)
        )
        return data

    def _setup_document(self, document, title: str, author: str):
        """Document properties and base font"""
        core_props = document.core_properties
        core_props.title = title.strip()
        core_props.author = author.strip()

        normal = document.styles["Normal"]
        normal.font.name = settings.EXPORT_FONT_FACE
        # East Asian glyphs ignore font.name unless rFonts/eastAsia is set
        rfonts = normal.element.get_or_add_rPr().get_or_add_rFonts()
        rfonts.set(qn("w:eastAsia"), settings.EXPORT_FONT_FACE)

    async def _add_block(self, document, block: ReportBlock):
        if block.type == BlockType.INFO_HEADER.value:
            self._add_info_header(document, block)
        elif block.type == BlockType.TEXT.value:
            await self._add_html(document, block.content)
        elif block.type == BlockType.IMAGE_GALLERY.value:
            await self._add_gallery(document, block)
        else:
            logger.debug(f"[WordExporter] Skipping block {block.id} of unknown type '{block.type}'")

    # ==================== PROVENANCE HEADER ====================

    def _add_info_header(self, document, block: ReportBlock):
        try:
            info = InfoHeader.model_validate_json(block.content or "")
        except PydanticValidationError as e:
            logger.warning(f"[WordExporter] Malformed info header in block {block.id}, skipped: {e.error_count()} error(s)")
            return

        p = document.add_paragraph()
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p.paragraph_format.space_before = Pt(20)

        entries = [
            ("Author", info.writer, Pt(12), True, self.VALUE_COLOR),
            ("Team", info.team, Pt(12), True, self.VALUE_COLOR),
            ("Date", info.date, Pt(9), False, self.MUTED_COLOR),
        ]
        for index, (label, value, size, bold, color) in enumerate(entries):
            if index:
                divider = p.add_run("    |    ")
                divider.font.size = Pt(8)
                divider.font.color.rgb = self.DIVIDER_COLOR

            label_run = p.add_run(label)
            label_run.bold = True
            label_run.font.size = Pt(7)
            label_run.font.color.rgb = self.LABEL_COLOR

            value_run = p.add_run(f"  {value}")
            value_run.bold = bold
            value_run.font.size = size
            value_run.font.color.rgb = color

        self._add_rule(document, color_hex="E2E8F0", size=6)

    # ==================== RICH TEXT ====================

    async def _add_html(self, document, html: Optional[str]):
        soup = parse_fragment(html)
        images = await self._load_inline_images(soup)

        for node in top_level_nodes(soup):
            if isinstance(node, NavigableString):
                text = normalize_text(str(node)).strip()
                if text:
                    document.add_paragraph().add_run(text)
                continue

            level = heading_level(node)
            if node.name == "table":
                self._add_table(document, node, images)
            elif level:
                p = document.add_paragraph(style=f"Heading {level}")
                p.alignment = ALIGNMENT_MAP[alignment(node)]
                self._add_inline(p, node, images)
            elif node.name == "hr":
                self._add_rule(document)
            elif node.name in ("ul", "ol"):
                style = "List Bullet" if node.name == "ul" else "List Number"
                for item in node.find_all("li", recursive=False):
                    p = document.add_paragraph(style=style)
                    p.alignment = ALIGNMENT_MAP[alignment(item)]
                    self._add_inline(p, item, images)
            else:
                p = document.add_paragraph()
                p.alignment = ALIGNMENT_MAP[alignment(node)]
                if not self._add_inline(p, node, images):
                    p._element.getparent().remove(p._element)

    async def _load_inline_images(self, soup) -> Dict[int, LoadedImage]:
        """Fetch every <img> of a fragment concurrently, keyed by tag identity"""
        tags = [tag for tag in soup.find_all("img") if tag.get("src")]
        if not tags:
            return {}
        loaded = await self.image_loader.load_many([tag["src"] for tag in tags])
        return {id(tag): image for tag, image in zip(tags, loaded) if image is not None}

    def _add_inline(self, paragraph, node, images: Dict[int, LoadedImage]) -> int:
        """Append runs for ``node``'s subtree; returns how many were added"""
        added = 0
        children = node.children if isinstance(node, Tag) else [node]

        for child in children:
            if isinstance(child, Comment):
                continue
            if isinstance(child, NavigableString):
                text = normalize_text(str(child))
                if not text or (not text.strip() and "\n" in text):
                    continue
                style = inherited_style(child)
                run = paragraph.add_run(text)
                if style.bold:
                    run.bold = True
                if style.italic:
                    run.italic = True
                if style.underline:
                    run.underline = True
                if style.strike:
                    run.font.strike = True
                if style.color:
                    run.font.color.rgb = RGBColor.from_string(style.color)
                added += 1
            elif isinstance(child, Tag):
                if child.name == "br":
                    paragraph.add_run().add_break()
                    added += 1
                elif child.name == "img":
                    image = images.get(id(child))
                    if image is not None and self._add_picture(paragraph.add_run(), image, INLINE_IMAGE_SIZE):
                        added += 1
                else:
                    added += self._add_inline(paragraph, child, images)
        return added

    def _add_picture(self, run, image: LoadedImage, size) -> bool:
        try:
            run.add_picture(image.stream(), width=px(size[0]), height=px(size[1]))
            return True
        except (UnrecognizedImageError, ValueError, KeyError) as e:
            logger.warning(f"[WordExporter] Image could not be embedded: {type(e).__name__}")
            return False

    # ==================== TABLES & RULES ====================

    def _add_table(self, document, node: Tag, images: Dict[int, LoadedImage]):
        rows = table_rows(node)
        if not rows:
            return

        col_count = max(len(cells) for cells in rows)
        table = document.add_table(rows=len(rows), cols=col_count)
        table.style = "Table Grid"
        table.alignment = WD_TABLE_ALIGNMENT.CENTER

        for row_idx, cells in enumerate(rows):
            for col_idx in range(col_count):
                cell = table.cell(row_idx, col_idx)
                self._set_cell_borders(cell, self.TABLE_BORDER_HEX)
                if row_idx == 0:
                    self._shade_cell(cell, self.TABLE_HEADER_FILL_HEX)
                if col_idx < len(cells):
                    source = cells[col_idx]
                    p = cell.paragraphs[0]
                    p.alignment = ALIGNMENT_MAP[alignment(source)]
                    self._add_inline(p, source, images)

        document.add_paragraph()

    def _set_cell_borders(self, cell, color_hex: str):
        tc_pr = cell._tc.get_or_add_tcPr()
        borders = OxmlElement("w:tcBorders")
        for edge in ("top", "left", "bottom", "right"):
            border = OxmlElement(f"w:{edge}")
            border.set(qn("w:val"), "single")
            border.set(qn("w:sz"), "4")
            border.set(qn("w:space"), "0")
            border.set(qn("w:color"), color_hex)
            borders.append(border)
        tc_pr.append(borders)

    def _shade_cell(self, cell, fill_hex: str):
        shading = OxmlElement("w:shd")
        shading.set(qn("w:val"), "clear")
        shading.set(qn("w:color"), "auto")
        shading.set(qn("w:fill"), fill_hex)
        cell._tc.get_or_add_tcPr().append(shading)

    def _add_rule(self, document, color_hex: Optional[str] = None, size: int = 4):
        """Empty paragraph with a bottom border acting as a horizontal rule"""
        p = document.add_paragraph()
        p_pr = p._p.get_or_add_pPr()
        borders = OxmlElement("w:pBdr")
        bottom = OxmlElement("w:bottom")
        bottom.set(qn("w:val"), "single")
        bottom.set(qn("w:sz"), str(size))
        bottom.set(qn("w:space"), "1")
        bottom.set(qn("w:color"), color_hex or self.RULE_HEX)
        borders.append(bottom)
        p_pr.append(borders)
        return p

    # ==================== IMAGE GALLERY ====================

    async def _add_gallery(self, document, block: ReportBlock):
        if block.images is None:
            return

        label = document.add_paragraph(self.GALLERY_LABEL, style="Heading 3")
        label.paragraph_format.space_before = Pt(20)
        label.paragraph_format.space_after = Pt(10)

        loaded: List[Optional[LoadedImage]] = await self.image_loader.load_many(block.images)
        for index, image in enumerate(loaded):
            if image is None:
                continue

            p = document.add_paragraph()
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER
            if not self._add_picture(p.add_run(), image, GALLERY_IMAGE_SIZE):
                p._element.getparent().remove(p._element)
                continue

            caption = block.caption_at(index)
            if caption:
                cap_p = document.add_paragraph()
                cap_p.alignment = WD_ALIGN_PARAGRAPH.CENTER
                cap_run = cap_p.add_run(f"▲ {caption}")
                cap_run.italic = True
                cap_run.font.size = Pt(9)
                cap_run.font.color.rgb = self.MUTED_COLOR
            else:
                document.add_paragraph()


# Singleton instance
word_exporter = ReportWordExporter()
