"""
HTML Fragment Helpers
=====================

Reads the rich-text editor's HTML (Quill-style markup) for both document
serializers. Parsing uses BeautifulSoup with the stdlib ``html.parser``
backend; there is no browser engine, so layout is never measured.

Supported markup:
- headings: ``h1``-``h3`` or ``ql-as-heading-{1,2,3}`` classes
- alignment: ``ql-align-center|right|justify`` classes
- inline styles: strong/b, em/i, u, s/strike/del, ``style="color: ..."``
- tables (``tr`` > ``td``/``th``), ``hr``, ``br``, ``ul``/``ol``, ``img``
"""
from dataclasses import dataclass
from typing import List, Optional, Union
import re

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

Alignment = str  # "left" | "center" | "right" | "justify"

_ALIGNMENTS = ("center", "right", "justify")
_HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3}
_HEADING_CLASS = re.compile(r"^ql-as-heading-([123])$")
_STYLE_COLOR = re.compile(r"(?:^|;)\s*color\s*:\s*([^;]+)", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_RGB_COLOR = re.compile(r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[\d.]+\s*)?\)$", re.IGNORECASE)

BOLD_TAGS = {"strong", "b"}
ITALIC_TAGS = {"em", "i"}
UNDERLINE_TAGS = {"u"}
STRIKE_TAGS = {"s", "strike", "del"}
BLOCK_TAGS = {"p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "tr", "blockquote", "pre"}


@dataclass(frozen=True)
class RunStyle:
    """Character formatting inherited by a text node"""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    color: Optional[str] = None  # "RRGGBB" without '#'


def parse_fragment(html: Optional[str]) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def top_level_nodes(soup: Union[BeautifulSoup, Tag]) -> List[Union[Tag, NavigableString]]:
    """Direct children worth rendering (comments and doctypes dropped)"""
    nodes = []
    for child in soup.children:
        if isinstance(child, (Comment, Doctype)):
            continue
        if isinstance(child, (Tag, NavigableString)):
            nodes.append(child)
    return nodes


def _classes(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def heading_level(tag) -> Optional[int]:
    if not isinstance(tag, Tag):
        return None
    if tag.name in _HEADING_TAGS:
        return _HEADING_TAGS[tag.name]
    for cls in _classes(tag):
        match = _HEADING_CLASS.match(cls)
        if match:
            return int(match.group(1))
    return None


def alignment(tag) -> Alignment:
    if not isinstance(tag, Tag):
        return "left"
    for cls in _classes(tag):
        for align in _ALIGNMENTS:
            if cls == f"ql-align-{align}":
                return align
    return "left"


def color_to_hex(css: Optional[str]) -> Optional[str]:
    """CSS color (#RRGGBB, #RGB, rgb(), rgba()) -> 'RRGGBB'; None if unsupported"""
    if not css:
        return None
    value = re.sub(r"\s*!important\s*$", "", css.strip(), flags=re.IGNORECASE)

    match = _HEX_COLOR.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return digits.upper()

    match = _RGB_COLOR.match(value)
    if match:
        channels = [int(c) for c in match.groups()]
        if all(0 <= c <= 255 for c in channels):
            return "".join(f"{c:02X}" for c in channels)
    return None


def _style_color(tag: Tag) -> Optional[str]:
    style = tag.get("style")
    if not style:
        return None
    match = _STYLE_COLOR.search(style)
    return color_to_hex(match.group(1)) if match else None


def inherited_style(node) -> RunStyle:
    """
    Formatting a text node inherits from its ancestors.

    Walks up to (excluding) the document root; the nearest colored ancestor
    wins.
    """
    bold = italic = underline = strike = False
    color = None

    parent = node if isinstance(node, Tag) else node.parent
    while parent is not None and not isinstance(parent, BeautifulSoup):
        name = parent.name
        if name in BOLD_TAGS:
            bold = True
        elif name in ITALIC_TAGS:
            italic = True
        elif name in UNDERLINE_TAGS:
            underline = True
        elif name in STRIKE_TAGS:
            strike = True
        if color is None:
            color = _style_color(parent)
        parent = parent.parent

    return RunStyle(bold=bold, italic=italic, underline=underline, strike=strike, color=color)


def table_rows(table: Tag) -> List[List[Tag]]:
    """Cells per row, skipping rows of nested tables"""
    rows = []
    for tr in table.find_all("tr"):
        if tr.find_parent("table") is not table:
            continue
        cells = [c for c in tr.find_all(["td", "th"], recursive=False)]
        if cells:
            rows.append(cells)
    return rows


def normalize_text(text: str) -> str:
    return text.replace("\xa0", " ")


def element_text(node) -> str:
    """Visible text of a node; br and block boundaries become newlines"""
    if isinstance(node, NavigableString):
        return "" if isinstance(node, (Comment, Doctype)) else normalize_text(str(node)).strip()

    parts: List[str] = []

    def walk(current):
        for child in current.children:
            if isinstance(child, (Comment, Doctype)):
                continue
            if isinstance(child, NavigableString):
                parts.append(normalize_text(str(child)))
            elif isinstance(child, Tag):
                if child.name == "br":
                    parts.append("\n")
                    continue
                walk(child)
                if child.name in BLOCK_TAGS:
                    parts.append("\n")

    walk(node)
    lines = [re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in "".join(parts).split("\n")]
    return "\n".join(line for line in lines if line)
